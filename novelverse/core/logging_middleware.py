import logging
import time
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

# novelverse 로거 - JSON 포맷이면 요청 필드가 별도 키로 출력됨
logger = logging.getLogger("novelverse.http")


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 한 줄 로그 (method, path, client, status, 처리 시간)"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.perf_counter()
        context = {
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "-",
        }

        logger.debug(f"[Request] {context['method']} {request.url}", extra=context)
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                f"[Unhandled Error] {context['method']} {context['path']}", extra=context
            )
            raise

        duration_ms = round((time.perf_counter() - start) * 1000, 1)
        context.update(status_code=response.status_code, duration_ms=duration_ms)
        line = (
            f"[Response] {context['method']} {context['path']} from {context['client']} "
            f"-> {response.status_code} in {duration_ms}ms"
        )
        if response.status_code >= 500:
            logger.error(line, extra=context)
        elif response.status_code >= 400:
            logger.warning(line, extra=context)
        else:
            logger.info(line, extra=context)
        return response
