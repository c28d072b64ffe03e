"""
댓글 API 라우터

- GET /comments/chapter/{chapter_id}: 회차 댓글 (최신순)
- GET /comments/novel/{novel_id}: 작품 리뷰 (최신순)
- POST /comments: 댓글/리뷰 작성 (로그인 필요)
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from novelverse.core.auth_middleware import get_current_active_user
from novelverse.deps import get_comment_service
from novelverse.schemas.comment import Comment, CommentCreate
from novelverse.schemas.user import User as UserSchema
from novelverse.services.comment_service import CommentService

router = APIRouter(prefix="/comments", tags=["comments"])


@router.get("/chapter/{chapter_id}", response_model=List[Comment])
def list_chapter_comments(
    chapter_id: str = Path(...),
    comment_service: CommentService = Depends(get_comment_service),
) -> List[Comment]:
    return comment_service.list_for_chapter(chapter_id)


@router.get("/novel/{novel_id}", response_model=List[Comment])
def list_novel_comments(
    novel_id: str = Path(...),
    comment_service: CommentService = Depends(get_comment_service),
) -> List[Comment]:
    return comment_service.list_for_novel(novel_id)


@router.post("", response_model=Comment, status_code=status.HTTP_201_CREATED)
def create_comment(
    payload: CommentCreate,
    current_user: UserSchema = Depends(get_current_active_user),
    comment_service: CommentService = Depends(get_comment_service),
) -> Comment:
    """
    댓글 작성

    HTTP Status:
        201: 작성 성공 (평점이 있는 작품 리뷰면 작품 평점 갱신)
        400: 요청 형식 오류 (chapter_id/novel_id 둘 다 없음, 평점 범위 밖)
        401: 인증 실패
        404: 회차/작품 없음
    """
    return comment_service.create_comment(current_user, payload)
