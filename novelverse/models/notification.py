from enum import Enum
from typing import Any, Dict

from sqlalchemy import JSON, Boolean, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from novelverse.models.base import BaseModel, generate_id


class NotificationType(str, Enum):
    NEW_CHAPTER = "new_chapter"  # 북마크한 작품의 새 회차
    COMMENT_REPLY = "comment_reply"
    SYSTEM_ANNOUNCEMENT = "system_announcement"  # 관리자 공지


class Notification(BaseModel):
    """사용자 알림 (최신순 조회, 읽음 여부 집계용 인덱스)"""

    __tablename__ = "notifications"
    __table_args__ = (
        Index("idx_notifications_user_created", "user_id", "created_at"),
        Index("idx_notifications_user_read", "user_id", "is_read"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(String(30), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    link: Mapped[str] = mapped_column(Text, nullable=False)
    is_read: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    # "metadata"는 declarative에서 예약된 속성명이라 컬럼명만 유지
    meta: Mapped[Dict[str, Any]] = mapped_column("metadata", JSON, default=dict, nullable=False)
