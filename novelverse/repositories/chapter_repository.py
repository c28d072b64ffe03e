from typing import List

from sqlalchemy.orm import Session

from novelverse.models.chapter import Chapter as ChapterModel
from novelverse.models.comment import Comment as CommentModel
from novelverse.models.purchased_chapter import PurchasedChapter as PurchasedChapterModel
from novelverse.schemas.chapter import Chapter as ChapterSchema
from novelverse.repositories.base import BaseRepository


class ChapterRepository(BaseRepository[ChapterModel, ChapterSchema]):
    """회차 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(ChapterModel, ChapterSchema, db)

    def list_by_novel(self, novel_id: str) -> List[ChapterSchema]:
        """작품의 회차 목록 (order 오름차순)"""
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.novel_id == novel_id)
            .order_by(self.model_class.order.asc(), self.model_class.created_at.asc())
            .all()
        )
        return self._to_schemas(model_instances)

    def delete_chapter(self, chapter_id: str) -> bool:
        """회차 삭제 - 소유권 기록과 댓글도 함께 삭제 (원장은 유지)"""
        instance = self._get_model(chapter_id)
        if not instance:
            return False

        try:
            self.db.query(PurchasedChapterModel).filter(
                PurchasedChapterModel.chapter_id == chapter_id
            ).delete(synchronize_session=False)
            self.db.query(CommentModel).filter(
                CommentModel.chapter_id == chapter_id
            ).delete(synchronize_session=False)
            self.db.delete(instance)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.expire_all()
        return True
