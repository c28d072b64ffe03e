"""
회차 API 라우터

- GET /chapters/{chapter_id}: 회차 조회 (잠긴 회차는 본문 없이 access 정보만)
- GET /chapters/novel/{novel_id}: 목차 (회차별 잠금 상태)
- POST/PUT/DELETE /chapters: 회차 관리 (관리자)

로그인은 선택 사항이며, 토큰이 없거나 유효하지 않으면 비로그인으로 판정한다.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, status

from novelverse.core.auth_middleware import get_current_user_optional, require_admin
from novelverse.deps import get_chapter_service
from novelverse.schemas.chapter import (
    Chapter,
    ChapterCreate,
    ChapterRead,
    ChapterSummary,
    ChapterUpdate,
)
from novelverse.schemas.user import User as UserSchema
from novelverse.services.chapter_service import ChapterService

router = APIRouter(prefix="/chapters", tags=["chapters"])


@router.get("/novel/{novel_id}", response_model=List[ChapterSummary])
def list_novel_chapters(
    novel_id: str = Path(...),
    current_user: Optional[UserSchema] = Depends(get_current_user_optional),
    chapter_service: ChapterService = Depends(get_chapter_service),
) -> List[ChapterSummary]:
    return chapter_service.list_chapters(novel_id, current_user)


@router.get("/{chapter_id}", response_model=ChapterRead)
def read_chapter(
    chapter_id: str = Path(...),
    current_user: Optional[UserSchema] = Depends(get_current_user_optional),
    chapter_service: ChapterService = Depends(get_chapter_service),
) -> ChapterRead:
    """
    회차 조회

    Returns:
        ChapterRead: 회차 정보 + access(locked, effective_price, reason).
        locked=True면 content는 null

    HTTP Status:
        200: 조회 성공 (잠김 포함)
        404: 회차 또는 작품 없음
    """
    return chapter_service.read_chapter(chapter_id, current_user)


@router.post("", response_model=Chapter, status_code=status.HTTP_201_CREATED)
def create_chapter(
    payload: ChapterCreate,
    _: UserSchema = Depends(require_admin),
    chapter_service: ChapterService = Depends(get_chapter_service),
) -> Chapter:
    return chapter_service.create_chapter(payload)


@router.put("/{chapter_id}", response_model=Chapter)
def update_chapter(
    payload: ChapterUpdate,
    chapter_id: str = Path(...),
    _: UserSchema = Depends(require_admin),
    chapter_service: ChapterService = Depends(get_chapter_service),
) -> Chapter:
    return chapter_service.update_chapter(chapter_id, payload)


@router.delete("/{chapter_id}")
def delete_chapter(
    chapter_id: str = Path(...),
    _: UserSchema = Depends(require_admin),
    chapter_service: ChapterService = Depends(get_chapter_service),
) -> dict:
    chapter_service.delete_chapter(chapter_id)
    return {"success": True, "msg": "Chapter deleted"}
