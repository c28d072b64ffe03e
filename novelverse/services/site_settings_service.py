from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from novelverse.config import Settings
from novelverse.repositories.site_settings_repository import SiteSettingsRepository
from novelverse.schemas.site_settings import SiteSettings, SiteSettingsUpdate
from novelverse.services.redis_service import RedisService
from novelverse.utils.cache_utils import cache_ttl_seconds, site_settings_cache_key
import logging

logger = logging.getLogger(__name__)


class SiteSettingsService:
    """전역 사이트 설정 서비스

    - 최초 조회 시 기본값으로 "global" 행을 생성
    - 일반 조회는 Redis 캐시 (짧은 TTL, 모든 인스턴스가 공유)
    - 구매 경로는 fresh=True로 항상 DB를 다시 읽는다
    - 관리자 변경 시 캐시 키 삭제
    """

    def __init__(self, db: Session, settings: Settings, redis_service: Optional[RedisService] = None):
        self.db = db
        self.settings = settings
        self._redis = redis_service  # None이면 캐시 없이 DB 조회
        self.repo = SiteSettingsRepository(db)

    @property
    def key(self) -> str:
        return self.settings.SITE_SETTINGS_KEY

    @property
    def cache_key(self) -> str:
        return site_settings_cache_key(self.key)

    def _default_document(self) -> Dict[str, Any]:
        return SiteSettings().model_dump(mode="json")

    def _cache_enabled(self) -> bool:
        return self._redis is not None and cache_ttl_seconds(
            self.settings.SITE_SETTINGS_CACHE_TTL_SECONDS
        ) > 0

    def get_settings(self, fresh: bool = False) -> SiteSettings:
        """현재 사이트 설정 조회"""
        if not fresh and self._cache_enabled():
            cached = self._redis.get(self.cache_key)
            if cached is not None:
                return SiteSettings.model_validate(cached)

        document = self.repo.get_or_create(self.key, self._default_document())
        site_settings = SiteSettings.model_validate(document)
        if self._cache_enabled():
            self._redis.set(
                self.cache_key,
                site_settings.model_dump(mode="json"),
                cache_ttl_seconds(self.settings.SITE_SETTINGS_CACHE_TTL_SECONDS),
            )
        return site_settings

    def update_settings(self, update: SiteSettingsUpdate) -> SiteSettings:
        """전달된 키만 기존 문서에 병합"""
        current = self.get_settings(fresh=True).model_dump(mode="json")
        changes = update.model_dump(exclude_unset=True, exclude_none=True, mode="json")

        theme_changes = changes.pop("theme_settings", None)
        merged = {**current, **changes}
        if theme_changes is not None:
            merged["theme_settings"] = {**current.get("theme_settings", {}), **theme_changes}

        # 저장 전에 검증 - 잘못된 타입이 문서에 들어가지 않도록
        site_settings = SiteSettings.model_validate(merged)
        self.repo.save(self.key, site_settings.model_dump(mode="json"))
        if self._redis is not None:
            self._redis.delete(self.cache_key)

        changed_keys = sorted(changes) + (['theme_settings'] if theme_changes is not None else [])
        logger.info(f"Site settings updated: keys={changed_keys}")
        return site_settings
