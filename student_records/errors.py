"""
Domain exceptions and their HTTP translation.

Services raise these; the handlers registered by add_error_handlers turn
them (and request validation failures) into consistent JSON bodies.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from student_records.logging_config import get_logger, log_with_context

logger = get_logger("http")


class StudentRecordsError(Exception):
    """Base class for errors raised by the record service."""


class StudentNotFoundError(StudentRecordsError):
    def __init__(self, record_id: str):
        self.record_id = record_id
        super().__init__(f"Student not found: {record_id}")


class DuplicateFieldError(StudentRecordsError):
    """A unique business key (studentId or email) is already taken."""

    def __init__(self, field: str, value: str = None):
        self.field = field
        self.value = value
        super().__init__(f"{field} already exists")


def _field_path(loc) -> str:
    # ("body", "marks", "english") -> "marks.english"
    parts = [str(p) for p in loc if p not in ("body", "query", "path")]
    if parts:
        return ".".join(parts)
    return str(loc[0]) if loc else ""


# Messages for values that are present but not parseable as the field type
FORMAT_MESSAGES = {
    "email": "Please provide a valid email",
    "dateOfBirth": "Please provide a valid date of birth",
}


def format_validation_errors(errors) -> list:
    formatted = []
    for err in errors:
        field = _field_path(err.get("loc", ()))
        message = err.get("msg", "Invalid value")
        if err.get("type") == "value_error" and err.get("ctx", {}).get("error"):
            message = str(err["ctx"]["error"])
        elif field in FORMAT_MESSAGES and err.get("type") != "missing":
            message = FORMAT_MESSAGES[field]
        formatted.append({
            "field": field,
            "message": message,
        })
    return formatted


def add_error_handlers(app: FastAPI):
    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = format_validation_errors(exc.errors())
        log_with_context(logger, "INFO",
            "Validation failed: {} {}".format(request.method, request.url.path),
            extra_data={"errors": errors})
        return JSONResponse(
            status_code=400,
            content={"message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(DuplicateFieldError)
    async def duplicate_field_handler(request: Request, exc: DuplicateFieldError):
        return JSONResponse(
            status_code=400,
            content={
                "message": f"{exc.field} already exists",
                "error": f"Duplicate {exc.field}",
                "field": exc.field,
            },
        )

    @app.exception_handler(StudentNotFoundError)
    async def not_found_handler(request: Request, exc: StudentNotFoundError):
        return JSONResponse(status_code=404, content={"message": "Student not found"})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and exc.detail == "Not Found":
            return JSONResponse(status_code=404, content={"message": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail},
                            headers=getattr(exc, "headers", None))

    # Store failures are answered inside the middleware stack, so the
    # response still carries CORS and X-Request-ID headers
    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        return server_error_response(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        return server_error_response(request, exc)


def server_error_response(request: Request, exc: Exception) -> JSONResponse:
    log_with_context(logger, "ERROR",
        "Unhandled error: {} {}".format(request.method, request.url.path),
        extra_data={"error": str(exc), "error_type": type(exc).__name__},
        exc_info=(type(exc), exc, exc.__traceback__))
    return JSONResponse(
        status_code=500,
        content={"message": "Server error", "error": str(exc)},
    )
