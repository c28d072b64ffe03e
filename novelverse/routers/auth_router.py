"""
인증 API 라우터

- POST /auth/register: 이메일 회원가입 (가입 즉시 토큰 발급)
- POST /auth/login: 이메일/비밀번호 로그인
- GET /auth/me: 토큰 소유자 정보
"""

import logging

from fastapi import APIRouter, Depends, status

from novelverse.core.auth_middleware import get_current_active_user
from novelverse.deps import get_auth_service
from novelverse.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
from novelverse.schemas.user import User as UserSchema
from novelverse.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["authentication"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    회원가입

    HTTP Status:
        201: 가입 성공, 토큰 반환
        409: 이메일 또는 사용자명 중복
        400: 요청 형식 오류 (누락/잘못된 필드)
    """
    return auth_service.register(request)


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> AuthResponse:
    """
    로그인

    HTTP Status:
        200: 로그인 성공
        401: 이메일/비밀번호 불일치
        403: 비활성 계정
    """
    return auth_service.login(request)


@router.get("/me", response_model=UserSchema)
async def get_me(current_user: UserSchema = Depends(get_current_active_user)) -> UserSchema:
    """현재 로그인한 사용자 정보"""
    return current_user
