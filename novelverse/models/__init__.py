# Import every model so Base.metadata knows all tables

from .base import Base, BaseModel
from .user import User, UserRole
from .novel import Novel, NovelCategory, NovelStatus
from .chapter import Chapter
from .purchased_chapter import PurchasedChapter
from .bookmark import Bookmark
from .transaction import CoinTransaction, TransactionType
from .site_setting import SiteSetting
from .comment import Comment
from .notification import Notification, NotificationType

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "UserRole",
    "Novel",
    "NovelCategory",
    "NovelStatus",
    "Chapter",
    "PurchasedChapter",
    "Bookmark",
    "CoinTransaction",
    "TransactionType",
    "SiteSetting",
    "Comment",
    "Notification",
    "NotificationType",
]
