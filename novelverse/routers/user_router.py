"""
사용자 API 라우터

사용자용 엔드포인트:
- POST /users/purchase/{chapter_id}: 유료 회차 구매
- POST /users/add-coins: 코인 충전 (mock 결제)
- GET /users/transactions: 내 코인 원장 (최신순)
- PUT /users/profile: 프로필 수정
- POST /users/bookmark/{novel_id}: 북마크 토글
- GET /users/me/library: 북마크 + 구매 회차 + 잔액

관리자용 엔드포인트:
- GET /users, POST /users, PUT /users/{user_id}/role, DELETE /users/{user_id}
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path, Query, status

from novelverse.core.auth_middleware import get_current_active_user, require_admin
from novelverse.deps import get_ledger_service, get_user_service
from novelverse.schemas.ledger import (
    AddCoinsRequest,
    AddCoinsResponse,
    PurchaseResult,
    Transaction,
)
from novelverse.schemas.user import (
    AdminUserCreate,
    RoleUpdate,
    User as UserSchema,
    UserLibrary,
    UserUpdate,
)
from novelverse.services.ledger_service import LedgerService
from novelverse.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


# 구매/충전은 사용자별 스레드 락을 잡으므로 sync 핸들러(스레드풀)로 둔다
@router.post("/purchase/{chapter_id}", response_model=PurchaseResult)
def purchase_chapter(
    chapter_id: str = Path(..., description="구매할 회차 ID"),
    current_user: UserSchema = Depends(get_current_active_user),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> PurchaseResult:
    """
    유료 회차 구매

    HTTP Status:
        200: 구매 성공 또는 이미 열람 가능 (amount_charged=0)
        400: 코인 부족 (msg: "Insufficient coins")
        401: 인증 실패
        404: 회차/작품 없음
    """
    return ledger_service.purchase(current_user.id, chapter_id)


@router.post("/add-coins", response_model=AddCoinsResponse)
def add_coins(
    request: AddCoinsRequest,
    current_user: UserSchema = Depends(get_current_active_user),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> AddCoinsResponse:
    """코인 충전 (mock) - 충전 후 잔액 반환"""
    coins = ledger_service.add_coins(current_user.id, request.amount)
    return AddCoinsResponse(coins=coins)


@router.get("/transactions", response_model=List[Transaction])
def get_my_transactions(
    limit: int = Query(50, ge=1, le=100, description="페이지 크기"),
    offset: int = Query(0, ge=0, description="오프셋"),
    current_user: UserSchema = Depends(get_current_active_user),
    ledger_service: LedgerService = Depends(get_ledger_service),
) -> List[Transaction]:
    return ledger_service.get_transactions(current_user.id, limit=limit, offset=offset)


@router.put("/profile", response_model=UserSchema)
def update_profile(
    update: UserUpdate,
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserSchema:
    return user_service.update_profile(current_user.id, update)


@router.post("/bookmark/{novel_id}", response_model=UserSchema)
def toggle_bookmark(
    novel_id: str = Path(...),
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserSchema:
    return user_service.toggle_bookmark(current_user.id, novel_id)


@router.get("/me/library", response_model=UserLibrary)
def get_my_library(
    current_user: UserSchema = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> UserLibrary:
    return user_service.get_library(current_user.id)


# ----------------------------- 관리자 -----------------------------


@router.get("", response_model=List[UserSchema])
def list_users(
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    _: UserSchema = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> List[UserSchema]:
    return user_service.list_users(limit=limit, offset=offset)


@router.post("", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
def create_user(
    payload: AdminUserCreate,
    _: UserSchema = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserSchema:
    return user_service.create_user(payload)


@router.put("/{user_id}/role", response_model=UserSchema)
def update_user_role(
    payload: RoleUpdate,
    user_id: str = Path(...),
    admin: UserSchema = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserSchema:
    return user_service.update_role(user_id, payload.role, acting_admin_id=admin.id)


@router.delete("/{user_id}", response_model=UserSchema)
def delete_user(
    user_id: str = Path(...),
    admin: UserSchema = Depends(require_admin),
    user_service: UserService = Depends(get_user_service),
) -> UserSchema:
    """사용자 삭제 (관리자) - 원장 보존을 위해 비활성화 처리"""
    return user_service.deactivate_user(user_id, acting_admin_id=admin.id)
