"""
Global exception handlers

Error response format:
{"success": false, "error": "Tenant 'x' not found", "code": "TRIAL_EXPIRED"}

`code` is only present for conditions a client is expected to branch on.
"""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from funeral_platform.core.exceptions import PlatformError

logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str, code: Optional[str] = None) -> JSONResponse:
    content = {"success": False, "error": message}
    if code:
        content["code"] = code
    return JSONResponse(status_code=status_code, content=content)


def _format_validation_error(exc: RequestValidationError) -> str:
    messages = []
    for error in exc.errors():
        # Drop the leading "body"/"query" segment from the location
        loc = [str(part) for part in error.get("loc", ())[1:]]
        field = ".".join(loc)
        messages.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(messages) or "Invalid request"


async def platform_error_handler(request: Request, exc: PlatformError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(
            "request rejected",
            path=request.url.path,
            status=exc.status_code,
            error=exc.message,
        )
    return error_response(exc.status_code, exc.message, exc.code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(status.HTTP_400_BAD_REQUEST, _format_validation_error(exc))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    response = error_response(exc.status_code, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlatformError, platform_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
