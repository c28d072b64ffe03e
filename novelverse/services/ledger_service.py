"""
코인 원장 / 회차 구매 서비스

구매 흐름:
1. 사용자별 락 획득 (같은 사용자의 구매 요청은 프로세스 안에서 직렬화)
2. 회차, 사용자, 사이트 설정(캐시 우회), 작품을 다시 읽고 권한 판정
3. 이미 열람 가능하면 아무것도 변경하지 않고 성공 반환
4. 잔액 부족이면 InsufficientFundsError
5. 소유권 기록 + 조건부 차감 + 원장 기록을 한 DB 트랜잭션으로 커밋
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from novelverse.config import Settings
from novelverse.core.entitlement import evaluate_entitlement
from novelverse.core.exceptions import (
    InsufficientFundsError,
    InvalidInputError,
    NotFoundError,
)
from novelverse.core.locks import KeyedLock
from novelverse.repositories.chapter_repository import ChapterRepository
from novelverse.repositories.ledger_repository import LedgerRepository, PurchaseOutcome
from novelverse.repositories.novel_repository import NovelRepository
from novelverse.repositories.user_repository import UserRepository
from novelverse.schemas.ledger import PurchaseResult, Transaction
from novelverse.services.site_settings_service import SiteSettingsService
from novelverse.services.redis_service import RedisService
import logging

logger = logging.getLogger(__name__)

# 컨테이너 없이 생성된 서비스끼리도 같은 레지스트리를 공유
_default_locks = KeyedLock()


class LedgerService:
    """코인 잔액과 원장을 다루는 서비스"""

    def __init__(
        self,
        db: Session,
        settings: Settings,
        locks: Optional[KeyedLock] = None,
        redis_service: Optional[RedisService] = None,
    ):
        self.db = db
        self.settings = settings
        self.locks = locks if locks is not None else _default_locks
        self.ledger_repo = LedgerRepository(db)
        self.user_repo = UserRepository(db)
        self.chapter_repo = ChapterRepository(db)
        self.novel_repo = NovelRepository(db)
        self.site_settings_service = SiteSettingsService(db, settings, redis_service)

    def purchase(self, user_id: str, chapter_id: str) -> PurchaseResult:
        """유료 회차 구매

        Raises:
            NotFoundError: 회차/사용자/작품이 없는 경우
            InsufficientFundsError: 잔액이 유효 가격보다 적은 경우
        """
        with self.locks.hold(f"user:{user_id}"):
            # 락 대기 중 다른 요청이 커밋했을 수 있으므로 세션 캐시를 버린다
            self.db.expire_all()

            chapter = self.chapter_repo.get_by_id(chapter_id)
            if not chapter:
                raise NotFoundError("Chapter not found", details={"chapter_id": chapter_id})

            user = self.user_repo.get_by_id(user_id)
            if not user:
                raise NotFoundError("User not found", details={"user_id": user_id})

            site_settings = self.site_settings_service.get_settings(fresh=True)

            novel = self.novel_repo.get_by_id(chapter.novel_id)
            if not novel:
                raise NotFoundError("Novel not found", details={"novel_id": chapter.novel_id})

            decision = evaluate_entitlement(chapter, novel, user, site_settings)
            if not decision.locked:
                logger.info(
                    f"Purchase no-op for user {user_id}, chapter {chapter_id}: {decision.reason.value}"
                )
                return PurchaseResult(
                    success=True,
                    coins=user.coins,
                    amount_charged=0,
                    already_owned=True,
                    purchased_chapters=user.purchased_chapters,
                )

            price = decision.effective_price
            if user.coins < price:
                logger.warning(
                    f"Insufficient coins for user {user_id}: balance={user.coins}, price={price}"
                )
                raise InsufficientFundsError(
                    details={"balance": user.coins, "price": price}
                )

            outcome = self.ledger_repo.record_purchase(
                user_id=user_id,
                chapter_id=chapter_id,
                price=price,
                description=f"Purchased chapter: {chapter.title}",
            )

            if outcome == PurchaseOutcome.INSUFFICIENT_FUNDS:
                balance = self.ledger_repo.get_balance(user_id)
                logger.warning(
                    f"Conditional debit rejected for user {user_id}: balance={balance}, price={price}"
                )
                raise InsufficientFundsError(details={"balance": balance, "price": price})

            refreshed = self.user_repo.get_by_id(user_id)
            if outcome == PurchaseOutcome.ALREADY_OWNED:
                logger.info(f"Chapter {chapter_id} already owned by user {user_id}")
                return PurchaseResult(
                    success=True,
                    coins=refreshed.coins,
                    amount_charged=0,
                    already_owned=True,
                    purchased_chapters=refreshed.purchased_chapters,
                )

            logger.info(
                f"User {user_id} purchased chapter {chapter_id} for {price} coins "
                f"(balance={refreshed.coins})"
            )
            return PurchaseResult(
                success=True,
                coins=refreshed.coins,
                amount_charged=price,
                already_owned=False,
                purchased_chapters=refreshed.purchased_chapters,
            )

    def add_coins(self, user_id: str, amount: int) -> int:
        """코인 충전 (mock 결제) - 충전 후 잔액 반환"""
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidInputError("Amount must be a positive integer")
        if amount > self.settings.MAX_TOP_UP_AMOUNT:
            raise InvalidInputError(
                "Amount exceeds the maximum top-up",
                details={"max": self.settings.MAX_TOP_UP_AMOUNT},
            )

        with self.locks.hold(f"user:{user_id}"):
            balance = self.ledger_repo.record_deposit(
                user_id=user_id,
                amount=amount,
                description=f"Top-up {amount} coins",
            )

        if balance is None:
            raise NotFoundError("User not found", details={"user_id": user_id})

        logger.info(f"User {user_id} added {amount} coins (balance={balance})")
        return balance

    def get_transactions(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> List[Transaction]:
        """사용자 원장 조회 (최신순)"""
        limit = max(1, min(limit, self.settings.LEDGER_PAGE_SIZE_MAX))
        offset = max(0, offset)
        return self.ledger_repo.get_user_transactions(user_id, limit=limit, offset=offset)
