from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from novelverse.models.novel import NovelCategory, NovelStatus


class NovelBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    author: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    cover_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    category: NovelCategory = NovelCategory.ORIGINAL
    status: NovelStatus = NovelStatus.ONGOING
    is_weekly_featured: bool = False
    offer_price: Optional[int] = Field(None, ge=0, description="묶음 할인 가격 (0/None이면 미적용)")
    is_free: bool = Field(False, description="작품 전체 무료 여부")


class NovelCreate(NovelBase):
    slug: Optional[str] = Field(None, max_length=255)


class NovelUpdate(BaseModel):
    """부분 업데이트 - 전달된 필드만 반영"""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    slug: Optional[str] = Field(None, min_length=1, max_length=255)
    author: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    cover_url: Optional[str] = None
    tags: Optional[List[str]] = None
    category: Optional[NovelCategory] = None
    status: Optional[NovelStatus] = None
    is_weekly_featured: Optional[bool] = None
    offer_price: Optional[int] = Field(None, ge=0)
    is_free: Optional[bool] = None
    views: Optional[int] = Field(None, ge=0)
    rating: Optional[float] = Field(None, ge=0, le=5)


class Novel(NovelBase):
    id: str
    slug: str
    views: int = 0
    rating: float = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
