from dependency_injector import containers, providers

from novelverse.config import Settings
from novelverse.core.locks import KeyedLock
from novelverse.services.admin_service import AdminService
from novelverse.services.auth_service import AuthService
from novelverse.services.chapter_service import ChapterService
from novelverse.services.comment_service import CommentService
from novelverse.services.ledger_service import LedgerService
from novelverse.services.novel_service import NovelService
from novelverse.services.notification_service import NotificationService
from novelverse.services.redis_service import RedisService
from novelverse.services.site_settings_service import SiteSettingsService
from novelverse.services.user_service import UserService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class InfraModule(containers.DeclarativeContainer):
    """Shared infrastructure: Redis cache client and per-user purchase locks."""

    config = providers.DependenciesContainer()

    redis_service = providers.Singleton(RedisService, settings=config.config)
    purchase_locks = providers.Singleton(KeyedLock)


class ServiceModule(containers.DeclarativeContainer):
    """Service layer dependencies.

    db 세션은 요청마다 deps.py에서 주입된다 (factory(db=db)).
    """

    config = providers.DependenciesContainer()
    infra = providers.DependenciesContainer()

    auth_service = providers.Factory(AuthService, settings=config.config)
    user_service = providers.Factory(UserService, settings=config.config)
    novel_service = providers.Factory(NovelService)
    chapter_service = providers.Factory(
        ChapterService, settings=config.config, redis_service=infra.redis_service
    )
    ledger_service = providers.Factory(
        LedgerService,
        settings=config.config,
        locks=infra.purchase_locks,
        redis_service=infra.redis_service,
    )
    site_settings_service = providers.Factory(
        SiteSettingsService, settings=config.config, redis_service=infra.redis_service
    )
    comment_service = providers.Factory(CommentService)
    notification_service = providers.Factory(NotificationService)
    admin_service = providers.Factory(AdminService)


class Container(containers.DeclarativeContainer):
    """Application container."""

    wiring_config = containers.WiringConfiguration(
        modules=["novelverse.deps"],
    )

    config = providers.Container(ConfigModule)
    infra = providers.Container(InfraModule, config=config)
    services = providers.Container(
        ServiceModule, config=config, infra=infra
    )
