from typing import List

from pydantic import BaseModel, Field


class NovelViews(BaseModel):
    id: str
    title: str
    views: int


class NovelChapterCount(BaseModel):
    id: str
    title: str
    chapter_count: int


class AdminStats(BaseModel):
    """관리자 대시보드 통계"""

    total_novels: int = Field(..., description="작품 수")
    total_chapters: int = Field(..., description="회차 수")
    total_users: int = Field(..., description="사용자 수")
    total_revenue: int = Field(..., description="누적 충전 코인 (deposit 합계)")
    top_novels: List[NovelViews] = Field(default_factory=list, description="조회수 상위 5개 작품")
    chapters_per_novel: List[NovelChapterCount] = Field(default_factory=list)
