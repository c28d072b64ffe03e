from fastapi import APIRouter, Depends

from novelverse.core.auth_middleware import require_admin
from novelverse.deps import get_admin_service, get_site_settings_service
from novelverse.schemas.admin import AdminStats
from novelverse.schemas.site_settings import SiteSettings, SiteSettingsUpdate
from novelverse.schemas.user import User as UserSchema
from novelverse.services.admin_service import AdminService
from novelverse.services.site_settings_service import SiteSettingsService

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/settings", response_model=SiteSettings)
def get_site_settings(
    site_settings_service: SiteSettingsService = Depends(get_site_settings_service),
) -> SiteSettings:
    """사이트 설정 조회 (공개) - 없으면 기본값으로 생성"""
    return site_settings_service.get_settings()


@router.put("/settings", response_model=SiteSettings)
def update_site_settings(
    update: SiteSettingsUpdate,
    _: UserSchema = Depends(require_admin),
    site_settings_service: SiteSettingsService = Depends(get_site_settings_service),
) -> SiteSettings:
    """사이트 설정 부분 수정 (관리자)"""
    return site_settings_service.update_settings(update)


@router.get("/stats", response_model=AdminStats)
def get_stats(
    _: UserSchema = Depends(require_admin),
    admin_service: AdminService = Depends(get_admin_service),
) -> AdminStats:
    return admin_service.get_stats()
