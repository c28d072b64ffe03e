import threading
from unittest.mock import Mock

import pytest
from sqlalchemy.exc import OperationalError

from novelverse.core.entitlement import evaluate_entitlement
from novelverse.core.exceptions import (
    AuthorizationError,
    InsufficientFundsError,
    InvalidInputError,
    NotFoundError,
)
from novelverse.core.locks import KeyedLock
from novelverse.models import CoinTransaction, PurchasedChapter, User, UserRole
from novelverse.repositories.ledger_repository import LedgerRepository, PurchaseOutcome
from novelverse.services.ledger_service import LedgerService
from novelverse.services.site_settings_service import SiteSettingsService


@pytest.fixture
def service(db, test_settings):
    return LedgerService(db, test_settings, locks=KeyedLock())


def purchase_rows(db, user_id):
    return (
        db.query(CoinTransaction)
        .filter(CoinTransaction.user_id == user_id, CoinTransaction.type == "purchase")
        .all()
    )


def balance(session_factory, user_id):
    session = session_factory()
    try:
        return session.query(User.coins).filter(User.id == user_id).scalar()
    finally:
        session.close()


class TestPurchase:
    """회차 구매 시나리오"""

    def test_purchase_debits_price_and_records_ledger(self, db, service, make_user, make_novel, make_chapter):
        # Given: 10코인 회차, 잔액 10
        user = make_user(coins=10)
        ch = make_chapter(make_novel(), price=10)

        # When
        result = service.purchase(user.id, ch.id)

        # Then
        assert result.success is True
        assert result.coins == 0
        assert result.amount_charged == 10
        assert result.already_owned is False
        assert ch.id in result.purchased_chapters

        rows = purchase_rows(db, user.id)
        assert len(rows) == 1
        assert rows[0].amount == 10
        assert rows[0].chapter_id == ch.id

    def test_offer_price_is_charged_instead_of_chapter_price(self, db, service, make_user, make_novel, make_chapter):
        user = make_user(coins=5)
        ch = make_chapter(make_novel(offer_price=5), price=10)

        result = service.purchase(user.id, ch.id)

        assert result.coins == 0
        assert result.amount_charged == 5
        assert [row.amount for row in purchase_rows(db, user.id)] == [5]

    def test_free_novel_needs_no_purchase(self, db, service, test_settings, make_user, make_novel, make_chapter):
        user = make_user(coins=10)
        nv = make_novel(is_free=True)
        ch = make_chapter(nv, price=10)

        site_settings = SiteSettingsService(db, test_settings).get_settings()
        decision = evaluate_entitlement(ch, nv, None, site_settings)
        assert decision.locked is False
        assert decision.effective_price == 0

        result = service.purchase(user.id, ch.id)

        assert result.amount_charged == 0
        assert result.coins == 10
        assert purchase_rows(db, user.id) == []

    def test_insufficient_funds_changes_nothing(self, db, service, session_factory, make_user, make_novel, make_chapter):
        user = make_user(coins=3)
        ch = make_chapter(make_novel(), price=10)

        with pytest.raises(InsufficientFundsError) as exc_info:
            service.purchase(user.id, ch.id)

        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Insufficient coins"
        assert balance(session_factory, user.id) == 3
        assert purchase_rows(db, user.id) == []
        assert db.query(PurchasedChapter).filter_by(user_id=user.id).count() == 0

    def test_repeat_purchase_is_idempotent(self, db, service, make_user, make_novel, make_chapter):
        user = make_user(coins=30)
        ch = make_chapter(make_novel(), price=10)

        first = service.purchase(user.id, ch.id)
        second = service.purchase(user.id, ch.id)

        assert first.amount_charged == 10
        assert second.amount_charged == 0
        assert second.already_owned is True
        assert second.coins == 20
        assert len(purchase_rows(db, user.id)) == 1

    def test_admin_is_never_charged(self, db, service, make_user, make_novel, make_chapter):
        admin = make_user(coins=50, role=UserRole.ADMIN)
        ch = make_chapter(make_novel(), price=10)

        result = service.purchase(admin.id, ch.id)

        assert result.amount_charged == 0
        assert result.coins == 50
        assert purchase_rows(db, admin.id) == []

    def test_payments_disabled_is_not_charged(self, db, service, set_payments, make_user, make_novel, make_chapter):
        set_payments(False)
        user = make_user(coins=10)
        ch = make_chapter(make_novel(), price=10)

        result = service.purchase(user.id, ch.id)

        assert result.amount_charged == 0
        assert result.coins == 10

    def test_missing_chapter_or_user(self, service, make_user, make_novel, make_chapter):
        user = make_user(coins=10)
        ch = make_chapter(make_novel())

        with pytest.raises(NotFoundError):
            service.purchase(user.id, "missing")
        with pytest.raises(NotFoundError):
            service.purchase("missing", ch.id)

    def test_concurrent_purchases_debit_once(self, session_factory, test_settings, make_user, make_novel, make_chapter):
        # Given: 한 번만 살 수 있는 잔액
        user = make_user(coins=10)
        ch = make_chapter(make_novel(), price=10)
        locks = KeyedLock()
        barrier = threading.Barrier(2)
        results, errors = [], []

        def worker():
            session = session_factory()
            try:
                svc = LedgerService(session, test_settings, locks=locks)
                barrier.wait()
                results.append(svc.purchase(user.id, ch.id))
            except Exception as e:  # 테스트에서 실패 원인 수집
                errors.append(e)
            finally:
                session.close()

        # When
        threads = [threading.Thread(target=worker) for _ in range(2)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=30)

        # Then
        assert errors == []
        assert sorted(r.amount_charged for r in results) == [0, 10]
        assert balance(session_factory, user.id) == 0
        assert locks.active_keys() == 0

        session = session_factory()
        try:
            assert len(purchase_rows(session, user.id)) == 1
        finally:
            session.close()


class TestLedgerRepository:
    """저장소 수준의 원자성 보장"""

    def test_duplicate_ownership_insert_is_rejected(self, db, session_factory, make_user, make_novel, make_chapter):
        user = make_user(coins=20)
        ch = make_chapter(make_novel(), price=10)
        repo = LedgerRepository(db)

        assert repo.record_purchase(user.id, ch.id, 10, "first") == PurchaseOutcome.PURCHASED
        assert repo.record_purchase(user.id, ch.id, 10, "second") == PurchaseOutcome.ALREADY_OWNED
        assert balance(session_factory, user.id) == 10

    def test_conditional_debit_rolls_back_ownership(self, db, session_factory, make_user, make_novel, make_chapter):
        user = make_user(coins=3)
        ch = make_chapter(make_novel(), price=10)

        outcome = LedgerRepository(db).record_purchase(user.id, ch.id, 10, "too expensive")

        assert outcome == PurchaseOutcome.INSUFFICIENT_FUNDS
        assert balance(session_factory, user.id) == 3
        assert db.query(PurchasedChapter).count() == 0

    def test_commit_failure_rolls_back_everything(self, db, session_factory, make_user, make_novel, make_chapter, monkeypatch):
        user = make_user(coins=10)
        ch = make_chapter(make_novel(), price=10)
        monkeypatch.setattr(
            db, "commit", Mock(side_effect=OperationalError("COMMIT", {}, Exception("disk I/O error")))
        )

        with pytest.raises(OperationalError):
            LedgerRepository(db).record_purchase(user.id, ch.id, 10, "boom")

        assert balance(session_factory, user.id) == 10
        check = session_factory()
        try:
            assert check.query(PurchasedChapter).count() == 0
            assert check.query(CoinTransaction).count() == 0
        finally:
            check.close()

    def test_ledger_rows_are_immutable(self, db, service, make_user):
        user = make_user()
        service.add_coins(user.id, 10)
        entry = service.get_transactions(user.id)[0]
        repo = LedgerRepository(db)

        with pytest.raises(AuthorizationError):
            repo.update(entry.id, amount=1)
        with pytest.raises(AuthorizationError):
            repo.delete(entry.id)

        db.expire_all()
        assert [t.amount for t in service.get_transactions(user.id)] == [10]


class TestAddCoins:
    def test_add_coins_credits_and_records_deposit(self, db, service, make_user):
        user = make_user(coins=5)

        assert service.add_coins(user.id, 100) == 105

        deposits = db.query(CoinTransaction).filter_by(user_id=user.id, type="deposit").all()
        assert [d.amount for d in deposits] == [100]

    @pytest.mark.parametrize("amount", [0, -10, True])
    def test_non_positive_amount_is_rejected(self, service, make_user, amount):
        user = make_user()
        with pytest.raises(InvalidInputError):
            service.add_coins(user.id, amount)

    def test_amount_above_limit_is_rejected(self, service, test_settings, make_user):
        user = make_user()
        with pytest.raises(InvalidInputError):
            service.add_coins(user.id, test_settings.MAX_TOP_UP_AMOUNT + 1)

    def test_unknown_user(self, service):
        with pytest.raises(NotFoundError):
            service.add_coins("missing", 10)

    def test_transactions_are_newest_first(self, service, make_user, make_novel, make_chapter):
        user = make_user()
        ch = make_chapter(make_novel(), price=7)
        service.add_coins(user.id, 10)
        service.purchase(user.id, ch.id)

        transactions = service.get_transactions(user.id)

        assert [t.type.value for t in transactions] == ["purchase", "deposit"]
        assert transactions[0].amount == 7
        # 잔액 = 충전 합계 - 구매 합계
        assert service.ledger_repo.get_balance(user.id) == 10 - 7
