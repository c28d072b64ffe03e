from sqlalchemy.orm import Session

from novelverse.config import Settings
from novelverse.core.security import (
    create_access_token,
    get_password_hash,
    verify_password,
)
from novelverse.core.exceptions import AuthenticationError, AuthorizationError, ConflictError
from novelverse.repositories.ledger_repository import LedgerRepository
from novelverse.repositories.user_repository import UserRepository
from novelverse.schemas.auth import AuthResponse, LoginRequest, RegisterRequest
import logging

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 담당하는 서비스"""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.user_repo = UserRepository(db)
        self.ledger_repo = LedgerRepository(db)
        self.settings = settings

    def _issue_token(self, user) -> AuthResponse:
        token = create_access_token({"sub": user.id, "role": str(user.role.value)})
        return AuthResponse(access_token=token, user=user)

    def register(self, request: RegisterRequest) -> AuthResponse:
        """이메일 회원가입 - 가입 즉시 토큰 발급"""
        if self.user_repo.is_taken("email", request.email.lower()):
            raise ConflictError("Email already registered", details={"field": "email"})
        if self.user_repo.is_taken("username", request.username):
            raise ConflictError("Username already taken", details={"field": "username"})

        user = self.user_repo.create_user(
            username=request.username,
            email=request.email,
            password_hash=get_password_hash(request.password),
        )

        # 가입 보너스도 원장을 거쳐 지급
        if self.settings.SIGNUP_BONUS_COINS > 0:
            self.ledger_repo.record_deposit(
                user_id=user.id,
                amount=self.settings.SIGNUP_BONUS_COINS,
                description="Signup bonus",
            )
            user = self.user_repo.get_by_id(user.id)

        logger.info(f"User registered: {user.id} ({user.username})")
        return self._issue_token(user)

    def login(self, request: LoginRequest) -> AuthResponse:
        credentials = self.user_repo.get_credentials(request.email)
        if credentials is None or not verify_password(request.password, credentials[1]):
            logger.warning(f"Failed login attempt for {request.email}")
            raise AuthenticationError("Invalid email or password")

        user = credentials[0]
        if not user.is_active:
            raise AuthorizationError("Inactive user account")

        logger.info(f"User logged in: {user.id}")
        return self._issue_token(user)
