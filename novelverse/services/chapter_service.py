from typing import List, Optional

from sqlalchemy.orm import Session

from novelverse.config import Settings
from novelverse.core.entitlement import evaluate_entitlement
from novelverse.core.exceptions import NotFoundError
from novelverse.repositories.chapter_repository import ChapterRepository
from novelverse.repositories.novel_repository import NovelRepository
from novelverse.schemas.chapter import (
    AccessInfo,
    Chapter,
    ChapterCreate,
    ChapterRead,
    ChapterSummary,
    ChapterUpdate,
)
from novelverse.schemas.user import User as UserSchema
from novelverse.services.notification_service import NotificationService
from novelverse.services.site_settings_service import SiteSettingsService
from novelverse.services.redis_service import RedisService
import logging

logger = logging.getLogger(__name__)


class ChapterService:
    """회차 조회/관리 서비스

    회차 본문과 목차의 잠금 여부는 모두 evaluate_entitlement로 판정한다.
    """

    def __init__(
        self,
        db: Session,
        settings: Settings,
        redis_service: Optional[RedisService] = None,
    ):
        self.db = db
        self.chapter_repo = ChapterRepository(db)
        self.novel_repo = NovelRepository(db)
        self.site_settings_service = SiteSettingsService(db, settings, redis_service)
        self.notification_service = NotificationService(db)

    def _get_novel(self, novel_id: str):
        novel = self.novel_repo.get_by_id(novel_id)
        if not novel:
            raise NotFoundError("Novel not found", details={"novel_id": novel_id})
        return novel

    def read_chapter(self, chapter_id: str, requester: Optional[UserSchema]) -> ChapterRead:
        """회차 조회 - 잠긴 회차는 본문을 제외하고 판정 결과를 함께 반환"""
        chapter = self.chapter_repo.get_by_id(chapter_id)
        if not chapter:
            raise NotFoundError("Chapter not found", details={"chapter_id": chapter_id})

        novel = self._get_novel(chapter.novel_id)
        decision = evaluate_entitlement(
            chapter, novel, requester, self.site_settings_service.get_settings()
        )

        data = chapter.model_dump(exclude={"content"})
        return ChapterRead(
            **data,
            content=None if decision.locked else chapter.content,
            access=AccessInfo.from_decision(decision),
        )

    def list_chapters(
        self, novel_id: str, requester: Optional[UserSchema]
    ) -> List[ChapterSummary]:
        """목차 - 회차별 잠금 상태 포함, 본문 제외"""
        novel = self._get_novel(novel_id)
        site_settings = self.site_settings_service.get_settings()

        summaries = []
        for chapter in self.chapter_repo.list_by_novel(novel_id):
            decision = evaluate_entitlement(chapter, novel, requester, site_settings)
            summaries.append(
                ChapterSummary(
                    **chapter.model_dump(exclude={"content", "updated_at"}),
                    access=AccessInfo.from_decision(decision),
                )
            )
        return summaries

    def create_chapter(self, payload: ChapterCreate) -> Chapter:
        """회차 등록 - 작품 갱신과 북마크 사용자 알림까지 한 트랜잭션"""
        novel = self._get_novel(payload.novel_id)

        try:
            chapter = self.chapter_repo.create(commit=False, **payload.model_dump())
            # 새 회차가 올라온 작품을 목록 상단으로
            self.novel_repo.touch(payload.novel_id, commit=False)
            notified = self.notification_service.notify_new_chapter(
                novel, chapter, commit=True
            )
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Chapter created: {chapter.id} (novel={payload.novel_id}, order={chapter.order}, "
            f"notified={notified})"
        )
        return chapter

    def update_chapter(self, chapter_id: str, payload: ChapterUpdate) -> Chapter:
        changes = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or key == "volume"
        }
        chapter = self.chapter_repo.update(chapter_id, **changes)
        if not chapter:
            raise NotFoundError("Chapter not found", details={"chapter_id": chapter_id})
        logger.info(f"Chapter updated: {chapter_id} fields={sorted(changes)}")
        return chapter

    def delete_chapter(self, chapter_id: str) -> None:
        if not self.chapter_repo.delete_chapter(chapter_id):
            raise NotFoundError("Chapter not found", details={"chapter_id": chapter_id})
        logger.info(f"Chapter deleted: {chapter_id}")
