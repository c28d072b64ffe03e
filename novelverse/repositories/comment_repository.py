from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from novelverse.models.comment import Comment as CommentModel
from novelverse.schemas.comment import Comment as CommentSchema
from novelverse.repositories.base import BaseRepository


class CommentRepository(BaseRepository[CommentModel, CommentSchema]):
    """댓글/리뷰 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(CommentModel, CommentSchema, db)

    def _newest_first(self, *criteria) -> List[CommentSchema]:
        model_instances = (
            self.db.query(self.model_class)
            .filter(*criteria)
            .order_by(self.model_class.created_at.desc())
            .all()
        )
        return self._to_schemas(model_instances)

    def list_by_chapter(self, chapter_id: str) -> List[CommentSchema]:
        return self._newest_first(self.model_class.chapter_id == chapter_id)

    def list_by_novel(self, novel_id: str) -> List[CommentSchema]:
        return self._newest_first(self.model_class.novel_id == novel_id)

    def average_rating(self, novel_id: str) -> Optional[float]:
        """작품 리뷰 평점 평균 - 리뷰가 없으면 None"""
        average = (
            self.db.query(func.avg(self.model_class.rating))
            .filter(
                self.model_class.novel_id == novel_id,
                self.model_class.rating.isnot(None),
            )
            .scalar()
        )
        return float(average) if average is not None else None
