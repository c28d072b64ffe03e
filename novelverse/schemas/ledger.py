from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from novelverse.models.transaction import TransactionType


class Transaction(BaseModel):
    """코인 원장 항목"""

    id: str = Field(..., description="거래 ID")
    user_id: str = Field(..., description="사용자 ID")
    amount: int = Field(..., description="코인 변화량 (구매는 실제 차감된 유효 가격)")
    type: TransactionType = Field(..., description="거래 타입")
    description: str = Field(..., description="거래 설명")
    chapter_id: Optional[str] = Field(None, description="구매한 회차 ID")
    created_at: Optional[datetime] = Field(None, description="생성 시간")

    class Config:
        from_attributes = True


class AddCoinsRequest(BaseModel):
    """코인 충전 요청 (mock 결제)"""

    amount: int = Field(..., gt=0, description="충전할 코인 수")


class AddCoinsResponse(BaseModel):
    success: bool = True
    coins: int = Field(..., description="충전 후 잔액")


class PurchaseResult(BaseModel):
    """회차 구매 결과"""

    success: bool = Field(..., description="성공 여부")
    coins: int = Field(..., description="구매 후 잔액")
    amount_charged: int = Field(..., description="실제 차감된 코인")
    already_owned: bool = Field(False, description="이미 열람 가능했던 회차인지 여부")
    purchased_chapters: List[str] = Field(default_factory=list, description="구매한 회차 ID 목록")
