from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class CommentCreate(BaseModel):
    """댓글/리뷰 작성 요청 - chapter_id 또는 novel_id 중 하나는 필수"""

    chapter_id: Optional[str] = None
    novel_id: Optional[str] = None
    content: str = Field(..., min_length=1, max_length=5000)
    rating: Optional[int] = Field(None, ge=1, le=5, description="작품 리뷰 평점")
    avatar_color: Optional[str] = Field(None, max_length=50)
    paragraph_id: Optional[str] = Field(None, max_length=64)

    @model_validator(mode="after")
    def require_target(self) -> "CommentCreate":
        if not self.chapter_id and not self.novel_id:
            raise ValueError("Chapter ID or Novel ID is required")
        return self


class Comment(BaseModel):
    id: str
    chapter_id: Optional[str] = None
    novel_id: Optional[str] = None
    user_id: str
    username: str
    content: str
    likes: int = 0
    rating: Optional[int] = None
    avatar_color: Optional[str] = None
    paragraph_id: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
