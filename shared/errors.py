"""
Error taxonomy shared by every back-office service.

Services raise these; each FastAPI sub-app registers the handlers below so a
failure reaches the console as a transient notification instead of a 500.
"""
import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as SchemaError

logger = structlog.get_logger(__name__)


class BackofficeError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NetworkError(BackofficeError):
    """The backend could not be reached or answered with a non-2xx status."""
    status_code = status.HTTP_502_BAD_GATEWAY
    title = "Network Error"

    def __init__(self, message: str, upstream_status: int | None = None):
        super().__init__(message)
        self.upstream_status = upstream_status


class ValidationError(BackofficeError):
    """Malformed or missing field, caught before anything is submitted."""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    title = "Validation Error"


class InvalidTransition(BackofficeError):
    status_code = status.HTTP_409_CONFLICT
    title = "Invalid Status Change"


class NotFound(BackofficeError):
    status_code = status.HTTP_404_NOT_FOUND
    title = "Not Found"


def from_schema_error(exc: SchemaError) -> ValidationError:
    """Collapse a pydantic validation failure into one readable ValidationError."""
    problems = []
    for err in exc.errors(include_url=False):
        field = ".".join(str(part) for part in err.get("loc", ()))
        message = err.get("msg", "invalid")
        problems.append(f"{field}: {message}" if field else message)
    return ValidationError("; ".join(problems) or "Invalid input")


def notification(title: str, description: str) -> dict:
    return {"title": title, "description": description, "variant": "destructive"}


async def backoffice_error_handler(request: Request, exc: BackofficeError):
    logger.warning(
        "request_failed",
        error=type(exc).__name__,
        detail=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=notification(exc.title, exc.message),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    problems = []
    for err in exc.errors():
        field = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        problems.append(f"{field}: {err.get('msg')}" if field else err.get("msg", "invalid"))
    description = "; ".join(problems) or "Invalid request"
    logger.info("request_rejected", path=request.url.path, detail=description)
    return JSONResponse(
        status_code=ValidationError.status_code,
        content=notification(ValidationError.title, description),
    )


def register_error_handlers(app: FastAPI):
    app.add_exception_handler(BackofficeError, backoffice_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
