from typing import Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from novelverse.models.base import BaseModel, generate_id


class Chapter(BaseModel):
    __tablename__ = "chapters"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_chapters_price_non_negative"),
        Index("idx_chapters_novel_order", "novel_id", "order"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    novel_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("novels.id", ondelete="CASCADE"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    volume: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<Chapter(id={self.id}, novel_id={self.novel_id}, order={self.order})>"
