from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import settings
from app.core.exceptions import GymVisaError
from app.core.logging import get_logger
from app.schemas.response import ErrorResponse

logger = get_logger(__name__)


def error_response(status_code: int, error: str, code: str, details=None, errors=None) -> JSONResponse:
    """Every error leaves the API as {error, code, details?, errors?}."""
    body = ErrorResponse(error=error, code=code, details=details, errors=errors)
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body.model_dump(exclude_none=True)))


def validation_details(exc: RequestValidationError) -> list:
    # Only the parts that are always JSON-safe
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def add_exception_handlers(app: FastAPI):
    """
    Registers exception handlers with the FastAPI app.
    """
    @app.exception_handler(GymVisaError)
    async def gymvisa_exception_handler(request: Request, exc: GymVisaError):
        where = f"{request.method} {request.url.path}"
        if exc.status_code >= 500:
            logger.error(f"{exc.code} on {where}: {exc.message}")
        elif exc.status_code == 401:
            logger.warning(f"Rejected unauthenticated request: {where}")
        else:
            logger.info(f"{exc.code} on {where}: {exc.message}")
        return error_response(exc.status_code, exc.message, exc.code, exc.details, exc.errors)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """404 for unknown routes, 405, and other framework-raised errors."""
        return error_response(exc.status_code, str(exc.detail), "HTTP_ERROR")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed or missing request fields."""
        return error_response(422, "Input validation failed", "VALIDATION_ERROR", validation_details(exc))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all for unhandled exceptions.
        """
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}: {str(exc)}",
            exc_info=True
        )
        message = "An internal error occurred. Please try again later." if settings.is_production else str(exc)
        return error_response(500, message, "INTERNAL_ERROR")
