"""
회차 열람 권한 판정 (Entitlement Evaluator)

회차 본문 조회, 목차 잠금 아이콘, 구매 검증이 모두 이 함수 하나를 호출한다.
부수효과가 없는 순수 함수이며, "잠김"은 에러가 아니라 정상 반환값이다.

판정 순서 (순서 자체가 규칙이다):
1. 무료 회차(is_paid=False) -> 열람 가능, 가격 0
2. 유효 가격 계산: novel.is_free -> 0, offer_price > 0 -> offer_price, 그 외 chapter.price
3. 유효 가격 0 -> 열람 가능
4. 비로그인 -> 잠김 (login_required)
5. 관리자 -> 열람 가능
6. 결제 기능 OFF -> 로그인 사용자 모두 열람 가능
7. 구매 이력 있으면 열람 가능, 없으면 잠김 (purchase_required)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from novelverse.core.exceptions import InvalidInputError
from novelverse.models.user import UserRole


class AccessReason(str, Enum):
    FREE = "free"
    ADMIN = "admin"
    PAYMENTS_DISABLED = "payments_disabled"
    OWNED = "owned"
    LOGIN_REQUIRED = "login_required"
    PURCHASE_REQUIRED = "purchase_required"


@dataclass(frozen=True)
class EntitlementDecision:
    locked: bool
    effective_price: int
    reason: AccessReason


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _validate_chapter(chapter: Any) -> None:
    if chapter is None:
        raise InvalidInputError("Chapter is required")
    if not getattr(chapter, "id", None):
        raise InvalidInputError("Chapter id is required")
    if not isinstance(getattr(chapter, "is_paid", None), bool):
        raise InvalidInputError("Chapter is_paid must be a boolean")
    price = getattr(chapter, "price", None)
    if not _is_number(price) or price < 0:
        raise InvalidInputError("Chapter price must be a non-negative number")


def _validate_novel(novel: Any) -> None:
    if novel is None:
        raise InvalidInputError("Novel is required")
    if not isinstance(getattr(novel, "is_free", None), bool):
        raise InvalidInputError("Novel is_free must be a boolean")
    offer_price = getattr(novel, "offer_price", None)
    if offer_price is not None and (not _is_number(offer_price) or offer_price < 0):
        raise InvalidInputError("Novel offer_price must be a non-negative number")


def compute_effective_price(chapter: Any, novel: Any) -> int:
    """작품 단위 가격 정책을 적용한 실제 결제 가격

    is_free > offer_price(>0) > chapter.price 순으로 적용된다.
    무료 회차는 항상 0.
    """
    _validate_chapter(chapter)
    _validate_novel(novel)

    if not chapter.is_paid:
        return 0
    if novel.is_free:
        return 0
    if novel.offer_price is not None and novel.offer_price > 0:
        return novel.offer_price
    return chapter.price


def evaluate_entitlement(
    chapter: Any,
    novel: Any,
    requester: Optional[Any],
    site_settings: Any,
) -> EntitlementDecision:
    """요청자가 지금 이 회차를 읽을 수 있는지, 해금 가격은 얼마인지 판정

    Args:
        chapter: id, is_paid, price 속성을 가진 회차
        novel: is_free, offer_price 속성을 가진 작품 (chapter와 짝이 맞는지는 호출자 책임)
        requester: role, purchased_chapters 속성을 가진 사용자. 비로그인이면 None
        site_settings: enable_payments 속성을 가진 전역 설정

    Returns:
        EntitlementDecision: 잠김 여부, 유효 가격, 사유

    Raises:
        InvalidInputError: chapter/novel/site_settings가 없거나 형식이 잘못된 경우
    """
    if site_settings is None or not isinstance(
        getattr(site_settings, "enable_payments", None), bool
    ):
        raise InvalidInputError("Site settings with enable_payments are required")

    effective_price = compute_effective_price(chapter, novel)

    if not chapter.is_paid or effective_price == 0:
        return EntitlementDecision(False, 0, AccessReason.FREE)

    if requester is None:
        return EntitlementDecision(True, effective_price, AccessReason.LOGIN_REQUIRED)

    if UserRole.is_admin(getattr(requester, "role", None)):
        return EntitlementDecision(False, effective_price, AccessReason.ADMIN)

    if not site_settings.enable_payments:
        return EntitlementDecision(False, effective_price, AccessReason.PAYMENTS_DISABLED)

    purchased = getattr(requester, "purchased_chapters", None) or ()
    if chapter.id in purchased:
        return EntitlementDecision(False, effective_price, AccessReason.OWNED)

    return EntitlementDecision(True, effective_price, AccessReason.PURCHASE_REQUIRED)
