"""
Purchased Chapter Model

회차 소유권 테이블. (user_id, chapter_id) 복합 기본키 덕분에
같은 회차는 사용자당 한 번만 기록된다 - 동시 구매 요청이 와도
두 번째 INSERT는 IntegrityError로 실패한다.
"""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import PrimaryKeyConstraint

from novelverse.models.base import BaseModel


class PurchasedChapter(BaseModel):
    __tablename__ = "purchased_chapters"
    __table_args__ = (
        PrimaryKeyConstraint("user_id", "chapter_id", name="pk_purchased_chapters"),
    )

    user_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )

    chapter_id: Mapped[str] = mapped_column(
        String(32),
        ForeignKey("chapters.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
