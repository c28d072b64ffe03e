from enum import Enum
from typing import List, Optional, Union

from sqlalchemy import BigInteger, Boolean, CheckConstraint, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from novelverse.models.base import BaseModel, generate_id

"""User role enumeration for role-based access control."""


class UserRole(str, Enum):
    """사용자 역할 정의"""

    USER = "user"  # 일반 독자
    ADMIN = "admin"  # 관리자 (모든 유료 회차 열람 가능)

    @classmethod
    def is_admin(cls, role: Union[str, "UserRole", None]) -> bool:
        """관리자 권한 확인"""
        if isinstance(role, cls):
            role = role.value
        return role == cls.ADMIN.value


class User(BaseModel):
    __tablename__ = "users"
    __table_args__ = (CheckConstraint("coins >= 0", name="ck_users_coins_non_negative"),)

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    username: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), default=UserRole.USER.value, nullable=False
    )
    # 코인 잔액 - 조건부 UPDATE로만 차감되므로 음수가 될 수 없음
    coins: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    purchases = relationship(
        "PurchasedChapter",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    bookmark_entries = relationship(
        "Bookmark",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Bookmark.created_at",
    )

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username}, role={self.role})>"

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(str(self.role))

    @property
    def purchased_chapters(self) -> List[str]:
        return [purchase.chapter_id for purchase in self.purchases]

    @property
    def bookmarks(self) -> List[str]:
        return [entry.novel_id for entry in self.bookmark_entries]
