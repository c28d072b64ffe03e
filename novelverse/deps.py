from typing import Callable

from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.orm import Session

from novelverse.containers import Container
from novelverse.database.session import get_db

# Services
from novelverse.services.admin_service import AdminService
from novelverse.services.auth_service import AuthService
from novelverse.services.chapter_service import ChapterService
from novelverse.services.comment_service import CommentService
from novelverse.services.ledger_service import LedgerService
from novelverse.services.novel_service import NovelService
from novelverse.services.notification_service import NotificationService
from novelverse.services.site_settings_service import SiteSettingsService
from novelverse.services.user_service import UserService

# 요청마다 get_db 세션으로 서비스 팩토리를 호출한다.
# get_db를 dependency_overrides로 바꾸면 서비스도 같은 세션을 받는다.


@inject
def get_auth_service(
    db: Session = Depends(get_db),
    factory: Callable[..., AuthService] = Depends(Provide[Container.services.auth_service.provider]),
) -> AuthService:
    return factory(db=db)


@inject
def get_user_service(
    db: Session = Depends(get_db),
    factory: Callable[..., UserService] = Depends(Provide[Container.services.user_service.provider]),
) -> UserService:
    return factory(db=db)


@inject
def get_novel_service(
    db: Session = Depends(get_db),
    factory: Callable[..., NovelService] = Depends(Provide[Container.services.novel_service.provider]),
) -> NovelService:
    return factory(db=db)


@inject
def get_chapter_service(
    db: Session = Depends(get_db),
    factory: Callable[..., ChapterService] = Depends(Provide[Container.services.chapter_service.provider]),
) -> ChapterService:
    return factory(db=db)


@inject
def get_ledger_service(
    db: Session = Depends(get_db),
    factory: Callable[..., LedgerService] = Depends(Provide[Container.services.ledger_service.provider]),
) -> LedgerService:
    return factory(db=db)


@inject
def get_site_settings_service(
    db: Session = Depends(get_db),
    factory: Callable[..., SiteSettingsService] = Depends(
        Provide[Container.services.site_settings_service.provider]
    ),
) -> SiteSettingsService:
    return factory(db=db)


@inject
def get_admin_service(
    db: Session = Depends(get_db),
    factory: Callable[..., AdminService] = Depends(Provide[Container.services.admin_service.provider]),
) -> AdminService:
    return factory(db=db)


@inject
def get_comment_service(
    db: Session = Depends(get_db),
    factory: Callable[..., CommentService] = Depends(Provide[Container.services.comment_service.provider]),
) -> CommentService:
    return factory(db=db)


@inject
def get_notification_service(
    db: Session = Depends(get_db),
    factory: Callable[..., NotificationService] = Depends(
        Provide[Container.services.notification_service.provider]
    ),
) -> NotificationService:
    return factory(db=db)
