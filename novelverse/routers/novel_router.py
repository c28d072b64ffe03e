from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status

from novelverse.core.auth_middleware import require_admin
from novelverse.deps import get_novel_service
from novelverse.models.novel import NovelCategory
from novelverse.schemas.novel import Novel, NovelCreate, NovelUpdate
from novelverse.schemas.user import User as UserSchema
from novelverse.services.novel_service import NovelService

router = APIRouter(prefix="/novels", tags=["novels"])


@router.get("", response_model=List[Novel])
def list_novels(
    category: Optional[NovelCategory] = Query(None, description="카테고리 필터"),
    tag: Optional[str] = Query(None, description="태그 필터 (대소문자 무시)"),
    limit: Optional[int] = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
    novel_service: NovelService = Depends(get_novel_service),
) -> List[Novel]:
    """작품 목록 - 최근 업데이트 순"""
    return novel_service.list_novels(
        category=category.value if category else None,
        tag=tag,
        limit=limit,
        offset=offset,
    )


@router.get("/{id_or_slug}", response_model=Novel)
def get_novel(
    id_or_slug: str = Path(..., description="작품 ID 또는 slug"),
    novel_service: NovelService = Depends(get_novel_service),
) -> Novel:
    return novel_service.get_novel(id_or_slug)


@router.post("", response_model=Novel, status_code=status.HTTP_201_CREATED)
def create_novel(
    payload: NovelCreate,
    _: UserSchema = Depends(require_admin),
    novel_service: NovelService = Depends(get_novel_service),
) -> Novel:
    """작품 등록 (관리자) - slug 미지정 시 제목에서 생성"""
    return novel_service.create_novel(payload)


@router.put("/{novel_id}", response_model=Novel)
def update_novel(
    payload: NovelUpdate,
    novel_id: str = Path(...),
    _: UserSchema = Depends(require_admin),
    novel_service: NovelService = Depends(get_novel_service),
) -> Novel:
    return novel_service.update_novel(novel_id, payload)


@router.delete("/{novel_id}")
def delete_novel(
    novel_id: str = Path(...),
    _: UserSchema = Depends(require_admin),
    novel_service: NovelService = Depends(get_novel_service),
) -> dict:
    """작품 삭제 (관리자) - 소속 회차 포함"""
    novel_service.delete_novel(novel_id)
    return {"success": True, "msg": "Novel deleted"}
