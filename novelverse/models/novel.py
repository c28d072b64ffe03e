from enum import Enum
from typing import List, Optional

from sqlalchemy import JSON, Boolean, CheckConstraint, Float, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from novelverse.models.base import BaseModel, generate_id


class NovelCategory(str, Enum):
    ORIGINAL = "Original"
    FANFIC = "Fanfic"
    TRANSLATION = "Translation"


class NovelStatus(str, Enum):
    ONGOING = "Ongoing"
    COMPLETED = "Completed"


class Novel(BaseModel):
    """
    작품 테이블

    가격 관련 필드:
    - is_free: 작품 전체 무료 전환 (모든 회차의 is_paid 무시)
    - offer_price: 0보다 크면 모든 유료 회차 가격을 이 값으로 대체 (묶음 할인)
    우선순위는 is_free > offer_price > Chapter.price
    """

    __tablename__ = "novels"
    __table_args__ = (
        CheckConstraint(
            "offer_price IS NULL OR offer_price >= 0",
            name="ck_novels_offer_price_non_negative",
        ),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    author: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    cover_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    tags: Mapped[List[str]] = mapped_column(JSON, default=list, nullable=False)
    category: Mapped[str] = mapped_column(
        String(20), default=NovelCategory.ORIGINAL.value, nullable=False
    )
    status: Mapped[str] = mapped_column(
        String(20), default=NovelStatus.ONGOING.value, nullable=False
    )
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    is_weekly_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    offer_price: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    is_free: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Novel(id={self.id}, slug={self.slug})>"
