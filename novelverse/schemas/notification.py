from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, Field

from novelverse.models.notification import NotificationType


class Notification(BaseModel):
    id: str
    user_id: str
    type: NotificationType
    title: str
    message: str
    link: str
    is_read: bool = False
    # ORM 속성명은 meta, 응답 키는 metadata
    metadata: Dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("meta", "metadata")
    )
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UnreadCount(BaseModel):
    count: int


class AnnouncementCreate(BaseModel):
    """전체 사용자 공지 (관리자)"""

    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    link: str = Field("/", description="알림 클릭 시 이동 경로")


class AnnouncementResult(BaseModel):
    success: bool = True
    msg: str
    recipients: int
