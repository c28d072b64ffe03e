from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from novelverse.models.bookmark import Bookmark as BookmarkModel
from novelverse.models.user import User as UserModel
from novelverse.schemas.user import User as UserSchema
from novelverse.repositories.base import BaseRepository


class UserRepository(BaseRepository[UserModel, UserSchema]):
    """사용자 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def get_by_email(self, email: str) -> Optional[UserSchema]:
        """이메일로 사용자 조회"""
        return self.get_by_field("email", email.lower())

    def get_by_username(self, username: str) -> Optional[UserSchema]:
        return self.get_by_field("username", username)

    def get_credentials(self, email: str) -> Optional[Tuple[UserSchema, str]]:
        """로그인 검증용 - (사용자, 비밀번호 해시)"""
        model_instance = (
            self.db.query(self.model_class)
            .filter(self.model_class.email == email.lower())
            .first()
        )
        if model_instance is None:
            return None
        return self._to_schema(model_instance), model_instance.password_hash

    def create_user(
        self,
        username: str,
        email: str,
        password_hash: str,
        role: str = "user",
        coins: int = 0,
    ) -> UserSchema:
        return self.create(
            username=username,
            email=email.lower(),
            password_hash=password_hash,
            role=role,
            coins=coins,
            is_active=True,
        )

    def list_users(self, limit: int = 50, offset: int = 0) -> List[UserSchema]:
        """가입일 역순 사용자 목록"""
        model_instances = (
            self.db.query(self.model_class)
            .order_by(self.model_class.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return self._to_schemas(model_instances)

    def deactivate_user(self, user_id: str) -> Optional[UserSchema]:
        """사용자 비활성화 - 원장 보존을 위해 행은 삭제하지 않음"""
        return self.update(user_id, is_active=False)

    def is_taken(
        self, field_name: str, value: str, exclude_user_id: Optional[str] = None
    ) -> bool:
        """username/email 중복 여부"""
        query = self.db.query(self.model_class.id).filter(
            getattr(self.model_class, field_name) == value
        )
        if exclude_user_id:
            query = query.filter(self.model_class.id != exclude_user_id)
        return query.first() is not None

    def toggle_bookmark(self, user_id: str, novel_id: str) -> bool:
        """북마크 토글 - 추가되었으면 True, 해제되었으면 False"""
        existing = (
            self.db.query(BookmarkModel)
            .filter(
                BookmarkModel.user_id == user_id,
                BookmarkModel.novel_id == novel_id,
            )
            .first()
        )
        if existing:
            self.db.delete(existing)
            added = False
        else:
            self.db.add(BookmarkModel(user_id=user_id, novel_id=novel_id))
            added = True

        self._commit(True)
        # 관계 컬렉션을 다시 읽도록 만료
        self.db.expire_all()
        return added

    def bookmarked_by(self, novel_id: str) -> List[str]:
        """작품을 북마크한 활성 사용자 ID (새 회차 알림 대상)"""
        rows = (
            self.db.query(BookmarkModel.user_id)
            .join(UserModel, UserModel.id == BookmarkModel.user_id)
            .filter(BookmarkModel.novel_id == novel_id, UserModel.is_active.is_(True))
            .all()
        )
        return [row.user_id for row in rows]

    def active_user_ids(self) -> List[str]:
        rows = self.db.query(UserModel.id).filter(UserModel.is_active.is_(True)).all()
        return [row.id for row in rows]
