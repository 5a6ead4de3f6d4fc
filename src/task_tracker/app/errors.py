import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from task_tracker.domain.errors import TaskTrackerError, TaskValidationError

logger = logging.getLogger("tracker.errors")


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


async def task_error_handler(request: Request, exc: TaskTrackerError) -> JSONResponse:
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "request.failed",
        extra={
            "category": "http",
            "event": "request.failed",
            "request_id": _request_id(request),
            "error_code": exc.error_code,
            "error": exc.message,
        },
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Body/path errors detected by FastAPI answer 400 in the same shape as ours."""
    return await task_error_handler(request, TaskValidationError.from_pydantic(exc.errors()))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "request.unhandled",
        extra={"category": "http", "event": "request.unhandled", "request_id": _request_id(request)},
    )
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "error_code": "INTERNAL_ERROR", "details": {}},
    )


def register_error_handlers(app) -> None:
    app.add_exception_handler(TaskTrackerError, task_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
