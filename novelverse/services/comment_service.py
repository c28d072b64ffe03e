from typing import List

from sqlalchemy.orm import Session

from novelverse.core.exceptions import NotFoundError
from novelverse.repositories.chapter_repository import ChapterRepository
from novelverse.repositories.comment_repository import CommentRepository
from novelverse.repositories.novel_repository import NovelRepository
from novelverse.schemas.comment import Comment, CommentCreate
from novelverse.schemas.user import User as UserSchema
import logging

logger = logging.getLogger(__name__)

DEFAULT_AVATAR_COLOR = "bg-indigo-500"


class CommentService:
    """회차 댓글과 작품 리뷰"""

    def __init__(self, db: Session):
        self.db = db
        self.comment_repo = CommentRepository(db)
        self.chapter_repo = ChapterRepository(db)
        self.novel_repo = NovelRepository(db)

    def _require_chapter(self, chapter_id: str) -> None:
        if not self.chapter_repo.get_by_id(chapter_id):
            raise NotFoundError("Chapter not found", details={"chapter_id": chapter_id})

    def _require_novel(self, novel_id: str) -> None:
        if not self.novel_repo.get_by_id(novel_id):
            raise NotFoundError("Novel not found", details={"novel_id": novel_id})

    def list_for_chapter(self, chapter_id: str) -> List[Comment]:
        self._require_chapter(chapter_id)
        return self.comment_repo.list_by_chapter(chapter_id)

    def list_for_novel(self, novel_id: str) -> List[Comment]:
        self._require_novel(novel_id)
        return self.comment_repo.list_by_novel(novel_id)

    def create_comment(self, author: UserSchema, payload: CommentCreate) -> Comment:
        """댓글 작성 - 평점이 있는 작품 리뷰면 작품 평점을 같은 트랜잭션에서 재계산"""
        if payload.chapter_id:
            self._require_chapter(payload.chapter_id)
        if payload.novel_id:
            self._require_novel(payload.novel_id)

        data = payload.model_dump()
        data["avatar_color"] = data["avatar_color"] or DEFAULT_AVATAR_COLOR
        try:
            comment = self.comment_repo.create(
                commit=False, user_id=author.id, username=author.username, **data
            )
            if payload.novel_id and payload.rating is not None:
                average = self.comment_repo.average_rating(payload.novel_id)
                self.novel_repo.update(
                    payload.novel_id, commit=False, rating=round(average, 1)
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Comment created: {comment.id} by {author.id} "
            f"(chapter={payload.chapter_id}, novel={payload.novel_id})"
        )
        return comment
