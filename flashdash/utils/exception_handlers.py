from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from flashdash.utils.logger import logger
from flashdash.utils.exceptions import BaseAPIException


async def base_api_exception_handler(request: Request, exc: BaseAPIException):
    """Handle custom API exceptions and log them."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        f"{exc.__class__.__name__}: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "failure",
            "status_code": exc.status_code,
            "message": exc.detail,
            "error": jsonable_encoder(exc.error),
        },
        headers=exc.headers,
    )


async def request_validation_exception_handler(
    request: Request, exc: RequestValidationError
):
    """Handle validation errors as 400 InvalidInput and log them."""
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"errors": errors},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "status": "failure",
            "status_code": 400,
            "message": "Invalid request",
            "error": {"details": errors},
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTPException (e.g. unknown routes) and log them."""
    logger.warning(
        f"HTTP {exc.status_code}: {exc.detail}",
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )
    message = "Route not found" if exc.status_code == 404 else exc.detail
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "status": "failure",
            "status_code": exc.status_code,
            "message": message,
            "error": {},
        },
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions. Detail stays in the logs."""
    logger.exception(
        f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}",
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "status": "failure",
            "status_code": 500,
            "message": "Internal server error",
            "error": {},
        },
    )
