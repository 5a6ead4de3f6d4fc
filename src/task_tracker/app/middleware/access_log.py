import time
import uuid
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("tracker.access")

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 128


def _request_id(supplied) -> str:
    # client ids are echoed and logged, so only short printable ones are kept
    if supplied and len(supplied) <= MAX_REQUEST_ID_LENGTH and supplied.isprintable():
        return supplied
    return str(uuid.uuid4())


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class AccessLogMiddleware(BaseHTTPMiddleware):
    """Logs every request with a request id, echoed back in X-Request-ID."""

    async def dispatch(self, request: Request, call_next):
        request_id = _request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = request_id
        start = time.perf_counter()
        base = {
            "category": "http",
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
        }

        logger.info(
            "request.start",
            extra={**base, "event": "request.start", "client": request.client.host if request.client else None},
        )

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception("request.error", extra={**base, "event": "request.error", "duration_ms": _elapsed_ms(start)})
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        logger.info(
            "request.end",
            extra={
                **base,
                "event": "request.end",
                "status_code": response.status_code,
                "duration_ms": _elapsed_ms(start),
            },
        )
        return response
