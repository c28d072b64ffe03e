import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from mangum import Mangum
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware

load_dotenv("novelverse/.env")

from novelverse import containers  # noqa: E402
from novelverse.config import settings  # noqa: E402
from novelverse.core.exception_handlers import (  # noqa: E402
    handle_base_api_exception,
    handle_database_error,
    handle_http_exception,
    handle_unexpected_error,
    handle_validation_error,
)
from novelverse.core.exceptions import BaseAPIException  # noqa: E402
from novelverse.core.logging_middleware import LoggingMiddleware  # noqa: E402
from novelverse.logging_config import setup_logging  # noqa: E402
from novelverse.routers import (  # noqa: E402
    admin_router,
    auth_router,
    chapter_router,
    comment_router,
    health_router,
    notification_router,
    novel_router,
    user_router,
)

setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Close Redis connection pool on shutdown
    app.container.infra.redis_service().close()


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
        debug=settings.DEBUG,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
    )
    app.container = containers.Container()  # type: ignore

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(BaseAPIException, handle_base_api_exception)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    for router_module in (
        health_router,
        auth_router,
        novel_router,
        chapter_router,
        comment_router,
        user_router,
        notification_router,
        admin_router,
    ):
        app.include_router(router_module.router, prefix=settings.API_V1_STR)

    logger.info(f"{settings.APP_NAME} started (environment={settings.ENVIRONMENT})")
    return app


app = create_app()

handler = Mangum(app)
