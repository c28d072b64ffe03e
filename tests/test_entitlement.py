from types import SimpleNamespace

import pytest

from novelverse.core.entitlement import (
    AccessReason,
    EntitlementDecision,
    compute_effective_price,
    evaluate_entitlement,
)
from novelverse.core.exceptions import InvalidInputError


def chapter(is_paid=True, price=10, id="ch1"):
    return SimpleNamespace(id=id, is_paid=is_paid, price=price)


def novel(is_free=False, offer_price=None):
    return SimpleNamespace(is_free=is_free, offer_price=offer_price)


def reader(role="user", purchased=()):
    return SimpleNamespace(role=role, purchased_chapters=list(purchased))


def site(enable_payments=True):
    return SimpleNamespace(enable_payments=enable_payments)


class TestEffectivePrice:
    """유효 가격 계산 테스트"""

    @pytest.mark.parametrize(
        "ch, nv, expected",
        [
            (chapter(price=10), novel(), 10),
            (chapter(price=10), novel(offer_price=5), 5),
            (chapter(price=10), novel(offer_price=0), 10),
            (chapter(price=10), novel(is_free=True, offer_price=5), 0),
            (chapter(is_paid=False, price=10), novel(offer_price=5), 0),
        ],
    )
    def test_precedence(self, ch, nv, expected):
        """is_free > offer_price(>0) > chapter.price"""
        assert compute_effective_price(ch, nv) == expected


class TestEvaluateEntitlement:
    """열람 권한 판정 테스트"""

    @pytest.mark.parametrize("requester", [None, reader(), reader(role="admin")])
    @pytest.mark.parametrize("payments", [True, False])
    def test_free_chapter_is_always_unlocked(self, requester, payments):
        decision = evaluate_entitlement(
            chapter(is_paid=False, price=10), novel(), requester, site(payments)
        )
        assert decision == EntitlementDecision(False, 0, AccessReason.FREE)

    def test_free_novel_unlocks_paid_chapter(self):
        """작품 전체 무료면 유료 회차도 가격 0으로 열림"""
        decision = evaluate_entitlement(
            chapter(price=10), novel(is_free=True), None, site()
        )
        assert decision.locked is False
        assert decision.effective_price == 0
        assert decision.reason == AccessReason.FREE

    @pytest.mark.parametrize("payments", [True, False])
    def test_anonymous_requester_needs_login(self, payments):
        decision = evaluate_entitlement(chapter(price=10), novel(), None, site(payments))
        assert decision.locked is True
        assert decision.reason == AccessReason.LOGIN_REQUIRED
        assert decision.effective_price == 10

    @pytest.mark.parametrize("payments", [True, False])
    def test_admin_bypasses_payment(self, payments):
        decision = evaluate_entitlement(
            chapter(price=10), novel(offer_price=3), reader(role="admin"), site(payments)
        )
        assert decision.locked is False
        assert decision.reason == AccessReason.ADMIN
        assert decision.effective_price == 3

    def test_payments_disabled_unlocks_for_signed_in_user(self):
        decision = evaluate_entitlement(chapter(price=10), novel(), reader(), site(False))
        assert decision.locked is False
        assert decision.reason == AccessReason.PAYMENTS_DISABLED

    def test_owned_chapter_is_unlocked(self):
        decision = evaluate_entitlement(
            chapter(id="ch9"), novel(), reader(purchased=["ch9"]), site()
        )
        assert decision.locked is False
        assert decision.reason == AccessReason.OWNED

    def test_unowned_chapter_quotes_offer_price(self):
        # Given: 정가 10, 묶음 할인 5
        # When
        decision = evaluate_entitlement(
            chapter(price=10), novel(offer_price=5), reader(purchased=["other"]), site()
        )
        # Then
        assert decision == EntitlementDecision(True, 5, AccessReason.PURCHASE_REQUIRED)

    def test_login_required_is_distinct_from_purchase_required(self):
        anonymous = evaluate_entitlement(chapter(), novel(), None, site())
        signed_in = evaluate_entitlement(chapter(), novel(), reader(), site())
        assert anonymous.locked and signed_in.locked
        assert anonymous.reason != signed_in.reason

    def test_zero_priced_paid_chapter_is_free(self):
        decision = evaluate_entitlement(chapter(price=0), novel(), None, site())
        assert decision == EntitlementDecision(False, 0, AccessReason.FREE)


class TestMalformedInput:
    """잘못된 입력은 InvalidInputError"""

    @pytest.mark.parametrize(
        "ch, nv",
        [
            (None, novel()),
            (chapter(), None),
            (chapter(price=-1), novel()),
            (chapter(price="10"), novel()),
            (chapter(id=None), novel()),
            (chapter(), novel(offer_price=-5)),
            (SimpleNamespace(id="x", is_paid="yes", price=1), novel()),
        ],
    )
    def test_invalid_chapter_or_novel(self, ch, nv):
        with pytest.raises(InvalidInputError):
            evaluate_entitlement(ch, nv, reader(), site())

    @pytest.mark.parametrize("settings", [None, SimpleNamespace(), site("true")])
    def test_invalid_site_settings(self, settings):
        with pytest.raises(InvalidInputError):
            evaluate_entitlement(chapter(), novel(), reader(), settings)
