from typing import Any, Dict

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from novelverse.models.site_setting import SiteSetting as SiteSettingModel


class SiteSettingsRepository:
    """key 단위 사이트 설정 문서 저장소 (JSON dict 반환)"""

    def __init__(self, db: Session):
        self.db = db

    def _get_model(self, key: str):
        return (
            self.db.query(SiteSettingModel)
            .filter(SiteSettingModel.key == key)
            .first()
        )

    def get_or_create(self, key: str, defaults: Dict[str, Any]) -> Dict[str, Any]:
        """설정 문서 조회 - 없으면 기본값으로 생성"""
        instance = self._get_model(key)
        if instance is not None:
            return dict(instance.settings or {})

        self.db.add(SiteSettingModel(key=key, settings=dict(defaults)))
        try:
            self.db.commit()
        except IntegrityError:
            # 동시에 다른 요청이 먼저 생성한 경우
            self.db.rollback()
            instance = self._get_model(key)
            return dict(instance.settings or {})
        return dict(defaults)

    def save(self, key: str, settings: Dict[str, Any]) -> Dict[str, Any]:
        instance = self._get_model(key)
        try:
            if instance is None:
                self.db.add(SiteSettingModel(key=key, settings=dict(settings)))
            else:
                # JSON 컬럼 변경 감지를 위해 새 dict로 교체
                instance.settings = dict(settings)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return dict(settings)
