"""
코인 원장 리포지토리 - 잔액 변동과 원장 기록을 한 트랜잭션으로 처리

핵심 특징:
- 원장(coin_transactions)은 추가만 가능하며 update/delete 호출은 AuthorizationError
- 차감은 "coins >= price" 조건부 UPDATE로만 수행되어 잔액이 음수가 될 수 없다
- 소유권 INSERT가 (user_id, chapter_id) 기본키 충돌로 실패하면 이미 구매한 회차로 간주한다
"""

from enum import Enum
from typing import List, Optional

from sqlalchemy import func, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from novelverse.core.exceptions import AuthorizationError
from novelverse.models.purchased_chapter import PurchasedChapter as PurchasedChapterModel
from novelverse.models.transaction import CoinTransaction as CoinTransactionModel, TransactionType
from novelverse.models.user import User as UserModel
from novelverse.schemas.ledger import Transaction as TransactionSchema
from novelverse.repositories.base import BaseRepository


class PurchaseOutcome(str, Enum):
    PURCHASED = "purchased"
    ALREADY_OWNED = "already_owned"
    INSUFFICIENT_FUNDS = "insufficient_funds"


class LedgerRepository(BaseRepository[CoinTransactionModel, TransactionSchema]):
    """코인 원장 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(CoinTransactionModel, TransactionSchema, db)

    def update(self, instance_id, commit: bool = True, **kwargs):
        raise AuthorizationError("Ledger entries are immutable")

    def delete(self, instance_id, commit: bool = True) -> bool:
        raise AuthorizationError("Ledger entries are immutable")

    def get_balance(self, user_id: str) -> Optional[int]:
        return (
            self.db.query(UserModel.coins)
            .filter(UserModel.id == user_id)
            .scalar()
        )

    def record_purchase(
        self, user_id: str, chapter_id: str, price: int, description: str
    ) -> PurchaseOutcome:
        """
        회차 구매를 원자적으로 기록

        1. 소유권 INSERT (중복이면 ALREADY_OWNED, 아무것도 변경하지 않음)
        2. 조건부 차감 UPDATE users SET coins = coins - price WHERE coins >= price
           (영향받은 행이 0이면 INSUFFICIENT_FUNDS, 소유권 INSERT까지 롤백)
        3. price > 0 이면 purchase 원장 기록
        4. 커밋 - 중간 실패 시 세 작업 모두 롤백 후 예외 전파
        """
        try:
            # ORM add 대신 Core INSERT - 세션 identity map과 무관하게 DB 제약으로 판정
            self.db.execute(
                insert(PurchasedChapterModel.__table__).values(
                    user_id=user_id, chapter_id=chapter_id
                )
            )
        except IntegrityError:
            self.db.rollback()
            return PurchaseOutcome.ALREADY_OWNED

        try:
            if price > 0:
                debited = (
                    self.db.query(UserModel)
                    .filter(UserModel.id == user_id, UserModel.coins >= price)
                    .update(
                        {UserModel.coins: UserModel.coins - price},
                        synchronize_session=False,
                    )
                )
                if debited == 0:
                    self.db.rollback()
                    return PurchaseOutcome.INSUFFICIENT_FUNDS

                self.db.add(
                    self.model_class(
                        user_id=user_id,
                        amount=price,
                        type=TransactionType.PURCHASE.value,
                        description=description,
                        chapter_id=chapter_id,
                    )
                )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        # 조건부 UPDATE는 세션 상태를 동기화하지 않으므로 이후 조회가 DB를 다시 읽도록 만료
        self.db.expire_all()
        return PurchaseOutcome.PURCHASED

    def record_deposit(self, user_id: str, amount: int, description: str) -> Optional[int]:
        """코인 충전 - 잔액 증가와 deposit 원장 기록. 사용자가 없으면 None"""
        try:
            credited = (
                self.db.query(UserModel)
                .filter(UserModel.id == user_id)
                .update(
                    {UserModel.coins: UserModel.coins + amount},
                    synchronize_session=False,
                )
            )
            if credited == 0:
                self.db.rollback()
                return None

            self.db.add(
                self.model_class(
                    user_id=user_id,
                    amount=amount,
                    type=TransactionType.DEPOSIT.value,
                    description=description,
                )
            )
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.expire_all()
        return self.get_balance(user_id)

    def get_user_transactions(
        self, user_id: str, limit: int = 50, offset: int = 0
    ) -> List[TransactionSchema]:
        """사용자 원장 조회 (최신순)"""
        model_instances = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .order_by(self.model_class.created_at.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )
        return self._to_schemas(model_instances)

    def total_deposits(self) -> int:
        total = (
            self.db.query(func.coalesce(func.sum(self.model_class.amount), 0))
            .filter(self.model_class.type == TransactionType.DEPOSIT.value)
            .scalar()
        )
        return int(total or 0)
