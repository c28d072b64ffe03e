from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class BaseAPIException(HTTPException):
    """API 에러 공통 베이스

    응답 본문: {"success": False, "msg": ..., "error": {"code", "message", "details"}}
    하위 클래스는 http_status / error_code / default_message 만 지정한다.
    """

    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    error_code: str = "INTERNAL_001"
    default_message: str = "Internal server error"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(
            status_code=self.http_status,
            detail={
                "success": False,
                "msg": self.message,
                "error": {
                    "code": self.error_code,
                    "message": self.message,
                    "details": self.details,
                },
            },
            headers=headers,
        )

    def __str__(self) -> str:
        return self.message


class AuthenticationError(BaseAPIException):
    http_status = status.HTTP_401_UNAUTHORIZED
    error_code = "AUTH_001"
    default_message = "Authentication required"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict] = None):
        super().__init__(message, details, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationError(BaseAPIException):
    http_status = status.HTTP_403_FORBIDDEN
    error_code = "AUTH_002"
    default_message = "Access forbidden"


class InvalidInputError(BaseAPIException):
    """잘못된 식별자, 누락된 필수 필드, 허용되지 않는 값 (요청 스키마 검증 실패 포함)"""

    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "VALIDATION_002"
    default_message = "Invalid input"


class NotFoundError(BaseAPIException):
    http_status = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND_001"
    default_message = "Resource not found"


class ConflictError(BaseAPIException):
    http_status = status.HTTP_409_CONFLICT
    error_code = "CONFLICT_001"
    default_message = "Resource conflict"


class InternalServerError(BaseAPIException):
    pass


class InsufficientFundsError(BaseAPIException):
    """잔액이 유효 가격보다 적은 상태에서 구매 시도"""

    http_status = status.HTTP_400_BAD_REQUEST
    error_code = "BALANCE_001"
    default_message = "Insufficient coins"
