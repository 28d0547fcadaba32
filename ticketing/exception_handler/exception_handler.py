import logging
from fastapi import Request
from fastapi.responses import JSONResponse

from ticketing.exception_handler.exceptions import AppError

logger = logging.getLogger(__name__)


def app_error_handler(request: Request, exc: AppError):
    content = {
        "message": exc.message,
        "status": "error",
        "code": exc.code,
        "data": [],
    }
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


def custom_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"message": "Internal Server Error"},
    )
