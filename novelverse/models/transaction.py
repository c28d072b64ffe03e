"""
코인 원장 데이터 모델

사용자 코인의 모든 변동(충전/구매)을 기록하는 원장(Ledger) 테이블.
"""

from enum import Enum
from typing import Optional

from sqlalchemy import BigInteger, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from novelverse.models.base import BaseModel, generate_id


class TransactionType(str, Enum):
    DEPOSIT = "deposit"  # 충전 (mock 결제)
    PURCHASE = "purchase"  # 유료 회차 구매


class CoinTransaction(BaseModel):
    """
    코인 원장 테이블

    1. 불변성(Immutable): 한번 생성된 레코드는 수정/삭제되지 않음
    2. purchase 레코드의 amount는 실제 차감된 유효 가격 (회차 정가가 아님)
    3. 무료 해금(유효 가격 0)은 기록하지 않음
    """

    __tablename__ = "coin_transactions"
    __table_args__ = (
        Index("idx_coin_transactions_user_created", "user_id", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(
        String(32), ForeignKey("users.id"), nullable=False
    )
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    # 구매 거래일 때만 채워짐
    chapter_id: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
