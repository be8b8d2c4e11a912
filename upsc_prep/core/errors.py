# upsc_prep/core/errors.py
import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import config

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Error carrying the HTTP status it should be reported with"""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(404, message)


class BadRequestError(AppError):
    def __init__(self, message: str):
        super().__init__(400, message)


class UnauthorizedError(AppError):
    def __init__(self, message: str):
        super().__init__(401, message)


class ConflictError(AppError):
    def __init__(self, message: str):
        super().__init__(409, message)


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"status": "error", "message": message, **extra})


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def register_exception_handlers(app: FastAPI):
    """Map raised errors onto the {status, message} envelope"""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"[Error] {exc.message} ({request.method} {request.url.path})")
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return error_response(404, f"Route {request.url.path} not found")
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        message = _first_validation_message(exc)
        logger.warning(f"Validation error on {request.url.path}: {message}")
        return error_response(400, message)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        logger.warning(f"Validation error: {exc}")
        return error_response(400, str(exc))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception: {exc}", exc_info=True)
        extra = {}
        if config.IS_DEVELOPMENT:
            extra["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        return error_response(500, "Internal server error", **extra)
