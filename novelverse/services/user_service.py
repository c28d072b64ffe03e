from typing import List

from sqlalchemy.orm import Session

from novelverse.config import Settings
from novelverse.core.exceptions import ConflictError, InvalidInputError, NotFoundError
from novelverse.core.security import get_password_hash
from novelverse.repositories.novel_repository import NovelRepository
from novelverse.repositories.user_repository import UserRepository
from novelverse.schemas.user import (
    AdminUserCreate,
    User as UserSchema,
    UserLibrary,
    UserUpdate,
)
from novelverse.models.user import UserRole
import logging

logger = logging.getLogger(__name__)


class UserService:
    """사용자 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.user_repo = UserRepository(db)
        self.novel_repo = NovelRepository(db)
        self.settings = settings

    def get_user_by_id(self, user_id: str) -> UserSchema:
        """사용자 ID로 조회"""
        user = self.user_repo.get_by_id(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        return user

    def update_profile(self, user_id: str, update_data: UserUpdate) -> UserSchema:
        """프로필 업데이트 - username/email 중복 시 409"""
        self.get_user_by_id(user_id)

        update_fields = update_data.model_dump(exclude_unset=True, exclude_none=True)
        if "email" in update_fields:
            update_fields["email"] = update_fields["email"].lower()

        for field in ("username", "email"):
            if field in update_fields and self.user_repo.is_taken(
                field, update_fields[field], exclude_user_id=user_id
            ):
                raise ConflictError(f"{field.capitalize()} already in use", details={"field": field})

        if not update_fields:
            return self.get_user_by_id(user_id)

        user = self.user_repo.update(user_id, **update_fields)
        logger.info(f"Profile updated for user {user_id}: {sorted(update_fields)}")
        return user

    def toggle_bookmark(self, user_id: str, novel_id: str) -> UserSchema:
        """북마크 추가/해제"""
        if not self.novel_repo.get_by_id(novel_id):
            raise NotFoundError("Novel not found", details={"novel_id": novel_id})
        self.get_user_by_id(user_id)

        added = self.user_repo.toggle_bookmark(user_id, novel_id)
        logger.info(f"Bookmark {'added' if added else 'removed'}: user={user_id} novel={novel_id}")
        return self.get_user_by_id(user_id)

    def get_library(self, user_id: str) -> UserLibrary:
        user = self.get_user_by_id(user_id)
        return UserLibrary(
            coins=user.coins,
            bookmarks=user.bookmarks,
            purchased_chapters=user.purchased_chapters,
        )

    # ----------------------------- 관리자 기능 -----------------------------

    def list_users(self, limit: int = 50, offset: int = 0) -> List[UserSchema]:
        return self.user_repo.list_users(limit=limit, offset=offset)

    def create_user(self, payload: AdminUserCreate) -> UserSchema:
        """관리자 사용자 생성 (역할/초기 코인 지정)

        초기 코인은 원장을 거치지 않는 관리자 지급분이다.
        """
        if self.user_repo.is_taken("email", payload.email.lower()):
            raise ConflictError("Email already registered", details={"field": "email"})
        if self.user_repo.is_taken("username", payload.username):
            raise ConflictError("Username already taken", details={"field": "username"})

        user = self.user_repo.create_user(
            username=payload.username,
            email=payload.email,
            password_hash=get_password_hash(payload.password),
            role=payload.role.value,
            coins=payload.coins,
        )
        logger.info(f"Admin created user {user.id} with role {user.role.value}")
        return user

    def update_role(self, user_id: str, role: UserRole, acting_admin_id: str) -> UserSchema:
        if user_id == acting_admin_id and role != UserRole.ADMIN:
            raise InvalidInputError("Admins cannot demote themselves")

        user = self.user_repo.update(user_id, role=role.value)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        logger.info(f"Role of user {user_id} changed to {role.value}")
        return user

    def deactivate_user(self, user_id: str, acting_admin_id: str) -> UserSchema:
        """사용자 삭제 요청 - 원장 보존을 위해 비활성화로 처리"""
        if user_id == acting_admin_id:
            raise InvalidInputError("Admins cannot delete themselves")

        user = self.user_repo.deactivate_user(user_id)
        if not user:
            raise NotFoundError(f"User not found: {user_id}")
        logger.info(f"User deactivated: {user_id}")
        return user
