import logging
import traceback
from typing import Any, Dict

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .exceptions import InternalServerError, InvalidInputError

logger = logging.getLogger("novelverse")


def _request_context(request: Request) -> Dict[str, Any]:
    client = request.client.host if request.client else "-"
    return {
        "method": request.method,
        "url": str(request.url),
        "client": client,
    }


def _error_body(code: str, message: str, details: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "success": False,
        "msg": message,
        "error": {"code": code, "message": message, "details": details},
    }


async def handle_base_api_exception(request, exc):
    ctx = _request_context(request)
    message = (
        f"[BaseAPIException] {ctx['method']} {ctx['url']} from {ctx['client']} "
        f"-> {exc.status_code}: {exc.error_code} {exc.message}"
    )
    if exc.status_code >= 500:
        logger.error(message)
    else:
        logger.warning(message)
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_http_exception(request, exc):
    ctx = _request_context(request)

    error_msg = f"[HTTPException] {ctx['method']} {ctx['url']} from {ctx['client']} -> {exc.status_code}: {exc.detail}"

    if exc.status_code >= 500:
        # 500번대 에러는 스택 트레이스 포함
        tb_str = ''.join(traceback.format_tb(exc.__traceback__))
        logger.error(f"{error_msg}\n\nStack Trace:\n{tb_str}")
    else:
        logger.warning(error_msg)

    if isinstance(exc.detail, dict) and "error" in exc.detail:
        content = exc.detail
    else:
        content = _error_body("HTTP_ERROR", str(exc.detail), {})
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(content),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(request, exc):
    ctx = _request_context(request)
    logger.warning(
        f"[ValidationError] {ctx['method']} {ctx['url']} from {ctx['client']} -> 400: {exc.errors()}"
    )
    # 누락/잘못된 필드는 400 InvalidInput으로 응답
    error = InvalidInputError("Invalid input", details={"errors": exc.errors()})
    return JSONResponse(
        status_code=error.status_code, content=jsonable_encoder(error.detail)
    )


async def handle_database_error(request, exc):
    ctx = _request_context(request)
    logger.error(
        f"[DatabaseError] {ctx['method']} {ctx['url']} from {ctx['client']}: {type(exc).__name__}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    internal = InternalServerError("Database error")
    return JSONResponse(status_code=internal.status_code, content=internal.detail)


async def handle_unexpected_error(request, exc):
    ctx = _request_context(request)

    # 전체 스택 트레이스 포함
    tb_str = ''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error(
        f"\n{'=' * 80}\n"
        f"[Unhandled Error] {ctx['method']} {ctx['url']} from {ctx['client']}\n"
        f"Exception Type: {type(exc).__name__}\n"
        f"Exception Message: {str(exc)}\n\n"
        f"Full Stack Trace:\n{tb_str}"
        f"{'=' * 80}"
    )

    internal = InternalServerError()
    return JSONResponse(status_code=internal.status_code, content=internal.detail)
