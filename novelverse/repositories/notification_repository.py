from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from novelverse.models.notification import Notification as NotificationModel
from novelverse.schemas.notification import Notification as NotificationSchema
from novelverse.repositories.base import BaseRepository


class NotificationRepository(BaseRepository[NotificationModel, NotificationSchema]):
    """알림 리포지토리 - 조회/수정은 항상 소유자(user_id) 조건을 건다"""

    def __init__(self, db: Session):
        super().__init__(NotificationModel, NotificationSchema, db)

    def _owned(self, notification_id: str, user_id: str) -> Optional[NotificationModel]:
        return self._query({"id": notification_id, "user_id": user_id}).first()

    def list_for_user(
        self, user_id: str, limit: int = 20, offset: int = 0
    ) -> List[NotificationSchema]:
        model_instances = (
            self._query({"user_id": user_id})
            .order_by(self.model_class.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return self._to_schemas(model_instances)

    def count_unread(self, user_id: str) -> int:
        return self.count(filters={"user_id": user_id, "is_read": False})

    def mark_read(self, notification_id: str, user_id: str) -> Optional[NotificationSchema]:
        instance = self._owned(notification_id, user_id)
        if instance is None:
            return None
        instance.is_read = True
        self._commit(True)
        return self._to_schema(instance)

    def mark_all_read(self, user_id: str) -> int:
        """안 읽은 알림을 모두 읽음 처리 - 변경된 건수 반환"""
        updated = (
            self._query({"user_id": user_id, "is_read": False})
            .update({self.model_class.is_read: True}, synchronize_session=False)
        )
        self._commit(True)
        self.db.expire_all()
        return updated

    def delete_for_user(self, notification_id: str, user_id: str) -> bool:
        instance = self._owned(notification_id, user_id)
        if instance is None:
            return False
        self.db.delete(instance)
        self._commit(True)
        return True

    def create_many(self, rows: List[Dict[str, Any]], commit: bool = True) -> int:
        """여러 사용자에게 같은 알림을 한 번에 생성 (fan-out)"""
        if not rows:
            return 0
        self.db.add_all([self.model_class(**row) for row in rows])
        self._commit(commit)
        return len(rows)
