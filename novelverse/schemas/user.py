from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional, List

from novelverse.models.user import UserRole


class User(BaseModel):
    id: str
    username: str
    email: EmailStr
    role: UserRole = UserRole.USER
    coins: int = 0
    avatar: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    purchased_chapters: List[str] = Field(default_factory=list)
    bookmarks: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(self.role)


class UserUpdate(BaseModel):
    username: Optional[str] = Field(None, min_length=2, max_length=50)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = None

    @field_validator("username")
    @classmethod
    def username_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v.strip() == "":
            raise ValueError("Username cannot be empty")
        return v.strip() if v is not None else v


class AdminUserCreate(BaseModel):
    """관리자용 사용자 생성 요청"""

    username: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: UserRole = UserRole.USER
    coins: int = Field(0, ge=0)


class RoleUpdate(BaseModel):
    role: UserRole


class UserLibrary(BaseModel):
    """내 서재 - 북마크, 구매 회차, 코인 잔액"""

    coins: int
    bookmarks: List[str]
    purchased_chapters: List[str]
