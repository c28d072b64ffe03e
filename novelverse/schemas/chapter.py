from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from novelverse.core.entitlement import AccessReason, EntitlementDecision


class AccessInfo(BaseModel):
    """회차 열람 판정 결과"""

    locked: bool = Field(..., description="잠김 여부")
    effective_price: int = Field(..., description="작품 가격 정책이 적용된 해금 가격")
    reason: AccessReason = Field(..., description="판정 사유")

    @classmethod
    def from_decision(cls, decision: EntitlementDecision) -> "AccessInfo":
        return cls(
            locked=decision.locked,
            effective_price=decision.effective_price,
            reason=decision.reason,
        )


class ChapterBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    volume: Optional[str] = Field(None, max_length=100)
    order: int = Field(..., ge=0, description="작품 내 정렬 순서")
    is_paid: bool = False
    price: int = Field(0, ge=0, description="회차 정가 (코인)")


class ChapterCreate(ChapterBase):
    novel_id: str
    content: str = ""


class ChapterUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = None
    volume: Optional[str] = Field(None, max_length=100)
    order: Optional[int] = Field(None, ge=0)
    is_paid: Optional[bool] = None
    price: Optional[int] = Field(None, ge=0)


class Chapter(ChapterBase):
    id: str
    novel_id: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ChapterRead(ChapterBase):
    """회차 조회 응답 - 잠긴 회차는 content가 비어 있다"""

    id: str
    novel_id: str
    content: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    access: AccessInfo


class ChapterSummary(ChapterBase):
    """목차 항목 - 본문 없이 잠금 상태만 포함"""

    id: str
    novel_id: str
    created_at: Optional[datetime] = None
    access: AccessInfo
