from sqlalchemy.orm import Session

from novelverse.repositories.chapter_repository import ChapterRepository
from novelverse.repositories.ledger_repository import LedgerRepository
from novelverse.repositories.novel_repository import NovelRepository
from novelverse.repositories.user_repository import UserRepository
from novelverse.schemas.admin import AdminStats, NovelChapterCount, NovelViews


class AdminService:
    """관리자 대시보드 통계"""

    TOP_NOVELS_LIMIT = 5

    def __init__(self, db: Session):
        self.db = db
        self.novel_repo = NovelRepository(db)
        self.chapter_repo = ChapterRepository(db)
        self.user_repo = UserRepository(db)
        self.ledger_repo = LedgerRepository(db)

    def get_stats(self) -> AdminStats:
        top_novels = [
            NovelViews(id=novel.id, title=novel.title, views=novel.views)
            for novel in self.novel_repo.top_by_views(self.TOP_NOVELS_LIMIT)
        ]
        return AdminStats(
            total_novels=self.novel_repo.count(),
            total_chapters=self.chapter_repo.count(),
            total_users=self.user_repo.count(),
            total_revenue=self.ledger_repo.total_deposits(),
            top_novels=top_novels,
            chapters_per_novel=[
                NovelChapterCount(**row) for row in self.novel_repo.chapter_counts()
            ],
        )
