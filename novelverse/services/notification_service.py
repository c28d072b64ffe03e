from typing import List

from sqlalchemy.orm import Session

from novelverse.core.exceptions import NotFoundError
from novelverse.models.notification import NotificationType
from novelverse.repositories.notification_repository import NotificationRepository
from novelverse.repositories.user_repository import UserRepository
from novelverse.schemas.chapter import Chapter
from novelverse.schemas.notification import (
    AnnouncementCreate,
    AnnouncementResult,
    Notification,
    UnreadCount,
)
from novelverse.schemas.novel import Novel
import logging

logger = logging.getLogger(__name__)


class NotificationService:
    """사용자 알림 서비스

    - 새 회차 등록 시 해당 작품을 북마크한 사용자에게 new_chapter 알림
    - 관리자 공지는 모든 활성 사용자에게 system_announcement 알림
    """

    PAGE_SIZE_MAX = 100

    def __init__(self, db: Session):
        self.db = db
        self.notification_repo = NotificationRepository(db)
        self.user_repo = UserRepository(db)

    def list_notifications(
        self, user_id: str, limit: int = 20, offset: int = 0
    ) -> List[Notification]:
        limit = max(1, min(limit, self.PAGE_SIZE_MAX))
        return self.notification_repo.list_for_user(user_id, limit=limit, offset=max(0, offset))

    def unread_count(self, user_id: str) -> UnreadCount:
        return UnreadCount(count=self.notification_repo.count_unread(user_id))

    def mark_read(self, notification_id: str, user_id: str) -> Notification:
        notification = self.notification_repo.mark_read(notification_id, user_id)
        if notification is None:
            raise NotFoundError(
                "Notification not found", details={"notification_id": notification_id}
            )
        return notification

    def mark_all_read(self, user_id: str) -> int:
        return self.notification_repo.mark_all_read(user_id)

    def delete_notification(self, notification_id: str, user_id: str) -> None:
        if not self.notification_repo.delete_for_user(notification_id, user_id):
            raise NotFoundError(
                "Notification not found", details={"notification_id": notification_id}
            )

    def notify_new_chapter(self, novel: Novel, chapter: Chapter, commit: bool = True) -> int:
        """북마크한 사용자에게 새 회차 알림 - 호출자의 트랜잭션에 포함될 수 있음"""
        recipients = self.user_repo.bookmarked_by(novel.id)
        rows = [
            {
                "user_id": user_id,
                "type": NotificationType.NEW_CHAPTER.value,
                "title": "New Chapter Released!",
                "message": f"{novel.title} - {chapter.title}",
                "link": f"/reader/{novel.id}/{chapter.id}",
                "meta": {
                    "novel_id": novel.id,
                    "novel_title": novel.title,
                    "chapter_id": chapter.id,
                    "chapter_title": chapter.title,
                },
            }
            for user_id in recipients
        ]
        created = self.notification_repo.create_many(rows, commit=commit)
        if created:
            logger.info(f"Created {created} new_chapter notifications (novel={novel.id}, chapter={chapter.id})")
        return created

    def send_announcement(self, payload: AnnouncementCreate) -> AnnouncementResult:
        recipients = self.user_repo.active_user_ids()
        rows = [
            {
                "user_id": user_id,
                "type": NotificationType.SYSTEM_ANNOUNCEMENT.value,
                "title": payload.title,
                "message": payload.message,
                "link": payload.link or "/",
                "meta": {},
            }
            for user_id in recipients
        ]
        created = self.notification_repo.create_many(rows)
        logger.info(f"Announcement sent to {created} users: {payload.title}")
        return AnnouncementResult(
            msg=f"Announcement sent to {created} users", recipients=created
        )
