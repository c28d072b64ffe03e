"""
댓글/리뷰 모델

- chapter_id만 있으면 회차 댓글 (paragraph_id로 문단 댓글 가능)
- novel_id + rating이면 작품 리뷰 (작품 평점 평균에 반영)
"""

from typing import Optional

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from novelverse.models.base import BaseModel, generate_id


class Comment(BaseModel):
    __tablename__ = "comments"
    __table_args__ = (
        CheckConstraint(
            "chapter_id IS NOT NULL OR novel_id IS NOT NULL",
            name="ck_comments_target_required",
        ),
        CheckConstraint(
            "rating IS NULL OR (rating >= 1 AND rating <= 5)",
            name="ck_comments_rating_range",
        ),
        Index("idx_comments_chapter_created", "chapter_id", "created_at"),
        Index("idx_comments_novel_created", "novel_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    chapter_id: Mapped[Optional[str]] = mapped_column(
        String(32), ForeignKey("chapters.id", ondelete="CASCADE"), nullable=True
    )
    novel_id: Mapped[Optional[str]] = mapped_column(
        String(32), ForeignKey("novels.id", ondelete="CASCADE"), nullable=True
    )
    user_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("users.id"), nullable=False
    )
    # 작성 시점의 표시 이름
    username: Mapped[str] = mapped_column(String(50), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    likes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rating: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    avatar_color: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    paragraph_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True)
