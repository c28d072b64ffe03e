# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .user_repository import UserRepository
from .novel_repository import NovelRepository
from .chapter_repository import ChapterRepository
from .comment_repository import CommentRepository
from .ledger_repository import LedgerRepository, PurchaseOutcome
from .notification_repository import NotificationRepository
from .site_settings_repository import SiteSettingsRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "NovelRepository",
    "ChapterRepository",
    "CommentRepository",
    "LedgerRepository",
    "PurchaseOutcome",
    "NotificationRepository",
    "SiteSettingsRepository",
]
