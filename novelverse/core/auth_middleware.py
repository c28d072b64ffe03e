from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from novelverse.database.session import get_db
from novelverse.core.security import decode_access_token
from novelverse.repositories.user_repository import UserRepository
from novelverse.schemas.user import User as UserSchema
from novelverse.core.exceptions import AuthenticationError, AuthorizationError

# JWT Bearer 토큰 스킴
security = HTTPBearer(auto_error=False)


def _resolve_user(token: str, db: Session) -> UserSchema:
    user_id = decode_access_token(token)
    user = UserRepository(db).get_by_id(user_id)
    if not user:
        raise AuthenticationError("User not found for token")
    return user


def get_current_user_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[UserSchema]:
    """선택적 사용자 인증 - 토큰이 없거나 유효하지 않으면 비로그인(None)으로 취급"""
    if not credentials:
        return None
    try:
        user = _resolve_user(credentials.credentials, db)
    except AuthenticationError:
        return None
    return user if user.is_active else None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> UserSchema:
    """필수 사용자 인증 - 유효한 토큰이 필요함"""
    if not credentials:
        raise AuthenticationError("Authentication required")
    return _resolve_user(credentials.credentials, db)


def get_current_active_user(
    current_user: UserSchema = Depends(get_current_user),
) -> UserSchema:
    """활성 사용자만 허용"""
    if not current_user.is_active:
        raise AuthorizationError("Inactive user account")
    return current_user


def require_admin(
    current_user: UserSchema = Depends(get_current_active_user),
) -> UserSchema:
    """관리자 권한이 필요한 엔드포인트용 의존성"""
    if not current_user.is_admin:
        raise AuthorizationError("Admin access required")
    return current_user
