from .auth import Token, TokenData, RegisterRequest, LoginRequest, AuthResponse
from .user import User
from .novel import Novel
from .chapter import Chapter, ChapterRead, ChapterSummary
from .ledger import Transaction, PurchaseResult
from .site_settings import SiteSettings
from .comment import Comment, CommentCreate
from .notification import Notification, UnreadCount
