import re
from typing import List, Optional

from sqlalchemy.orm import Session

from novelverse.core.exceptions import ConflictError, NotFoundError
from novelverse.repositories.novel_repository import NovelRepository
from novelverse.schemas.novel import Novel, NovelCreate, NovelUpdate
from novelverse.models.base import generate_id
import logging

logger = logging.getLogger(__name__)

_SLUG_INVALID = re.compile(r"[^\w\s-]", re.UNICODE)
_SLUG_SEPARATORS = re.compile(r"[\s_-]+")


def slugify(title: str) -> str:
    """제목에서 URL slug 생성 (한글 등 유니코드 문자는 유지)"""
    slug = _SLUG_INVALID.sub("", title.strip().lower())
    slug = _SLUG_SEPARATORS.sub("-", slug).strip("-")
    return slug or generate_id()[:8]


class NovelService:
    """작품 CRUD 서비스"""

    def __init__(self, db: Session):
        self.db = db
        self.novel_repo = NovelRepository(db)

    def _unique_slug(self, base: str, exclude_id: Optional[str] = None) -> str:
        slug = base
        suffix = 2
        while self.novel_repo.slug_exists(slug, exclude_id=exclude_id):
            slug = f"{base}-{suffix}"
            suffix += 1
        return slug

    def list_novels(
        self,
        category: Optional[str] = None,
        tag: Optional[str] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Novel]:
        return self.novel_repo.list_novels(
            category=category, tag=tag, limit=limit, offset=offset
        )

    def get_novel(self, id_or_slug: str) -> Novel:
        novel = self.novel_repo.get_by_id_or_slug(id_or_slug)
        if not novel:
            raise NotFoundError("Novel not found", details={"novel": id_or_slug})
        return novel

    def create_novel(self, payload: NovelCreate) -> Novel:
        data = payload.model_dump(mode="json")
        requested_slug = data.pop("slug", None)
        if requested_slug:
            if self.novel_repo.slug_exists(requested_slug):
                raise ConflictError("Slug already in use", details={"slug": requested_slug})
            slug = requested_slug
        else:
            slug = self._unique_slug(slugify(payload.title))

        novel = self.novel_repo.create(slug=slug, **data)
        logger.info(f"Novel created: {novel.id} ({novel.slug})")
        return novel

    def update_novel(self, novel_id: str, payload: NovelUpdate) -> Novel:
        changes = payload.model_dump(exclude_unset=True, mode="json")

        # 필수 컬럼에 null이 들어오면 무시
        for field in ("title", "slug", "author", "category", "status", "tags", "is_free",
                      "is_weekly_featured", "views", "rating"):
            if field in changes and changes[field] is None:
                changes.pop(field)

        if changes.get("slug") and self.novel_repo.slug_exists(changes["slug"], exclude_id=novel_id):
            raise ConflictError("Slug already in use", details={"slug": changes["slug"]})

        novel = self.novel_repo.update(novel_id, **changes)
        if not novel:
            raise NotFoundError("Novel not found", details={"novel_id": novel_id})
        logger.info(f"Novel updated: {novel_id} fields={sorted(changes)}")
        return novel

    def delete_novel(self, novel_id: str) -> None:
        """작품 삭제 - 소속 회차도 함께 삭제"""
        if not self.novel_repo.delete_with_chapters(novel_id):
            raise NotFoundError("Novel not found", details={"novel_id": novel_id})
        logger.info(f"Novel deleted with its chapters: {novel_id}")
