"""
알림 API 라우터

모든 엔드포인트는 로그인 필요, 본인 알림만 조회/수정 가능:
- GET /notifications: 내 알림 (최신순)
- GET /notifications/unread-count: 안 읽은 알림 수
- PUT /notifications/read-all, PUT /notifications/{id}/read: 읽음 처리
- DELETE /notifications/{id}: 삭제

관리자용:
- POST /notifications/announcement: 모든 활성 사용자에게 공지
"""

from typing import List

from fastapi import APIRouter, Depends, Path, Query

from novelverse.core.auth_middleware import get_current_active_user, require_admin
from novelverse.deps import get_notification_service
from novelverse.schemas.notification import (
    AnnouncementCreate,
    AnnouncementResult,
    Notification,
    UnreadCount,
)
from novelverse.schemas.user import User as UserSchema
from novelverse.services.notification_service import NotificationService

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=List[Notification])
def list_notifications(
    limit: int = Query(20, ge=1, le=100, description="페이지 크기"),
    offset: int = Query(0, ge=0, description="오프셋"),
    current_user: UserSchema = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> List[Notification]:
    return notification_service.list_notifications(current_user.id, limit=limit, offset=offset)


@router.get("/unread-count", response_model=UnreadCount)
def get_unread_count(
    current_user: UserSchema = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> UnreadCount:
    return notification_service.unread_count(current_user.id)


@router.put("/read-all")
def mark_all_read(
    current_user: UserSchema = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> dict:
    notification_service.mark_all_read(current_user.id)
    return {"success": True, "msg": "All notifications marked as read"}


@router.put("/{notification_id}/read", response_model=Notification)
def mark_read(
    notification_id: str = Path(...),
    current_user: UserSchema = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> Notification:
    """다른 사용자의 알림은 404"""
    return notification_service.mark_read(notification_id, current_user.id)


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: str = Path(...),
    current_user: UserSchema = Depends(get_current_active_user),
    notification_service: NotificationService = Depends(get_notification_service),
) -> dict:
    notification_service.delete_notification(notification_id, current_user.id)
    return {"success": True, "msg": "Notification deleted"}


@router.post("/announcement", response_model=AnnouncementResult)
def send_announcement(
    payload: AnnouncementCreate,
    _: UserSchema = Depends(require_admin),
    notification_service: NotificationService = Depends(get_notification_service),
) -> AnnouncementResult:
    return notification_service.send_announcement(payload)
