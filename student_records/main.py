"""
Student Records API - FastAPI Application Entry Point.

This is the main application module that:
1. Initializes the FastAPI app with CORS middleware
2. Sets up structured JSON logging
3. Implements request ID middleware (X-Request-ID header)
4. Registers error handlers and the students routes
5. Provides health check endpoints

Layout:
- routes/: API endpoint handlers
- models/: SQLAlchemy ORM models
- services/: Business logic (grading, query, statistics, record writes)
- schemas.py: Request validation and response shapes
- errors.py: Domain exceptions and their HTTP mapping
"""

import time
from datetime import datetime, timezone
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from student_records.config import settings
from student_records.logging_config import (
    setup_logging, get_logger, log_with_context,
    request_id_var, generate_request_id
)
from student_records.errors import add_error_handlers, server_error_response
from student_records.routes import students
from student_records.database import DATABASE_URL, create_tables

# Registers the students table with Base.metadata
from student_records.models.student import Student  # noqa: F401

setup_logging()
logger = get_logger("http")

if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite, creating tables directly")
    create_tables()

app = FastAPI(
    title=settings.APP_TITLE,
    description=(
        "Record keeping for student academic data: profiles, marks, "
        "server-computed totals, percentages and grades, with searchable "
        "listings and class statistics."
    ),
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc"
)

add_error_handlers(app)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """
    Tag every request with a UUID, log its start and completion, and
    return the ID in the X-Request-ID response header.
    """
    req_id = generate_request_id()
    request_id_var.set(req_id)
    start_time = time.time()

    log_with_context(logger, "INFO",
        f"Request started: {request.method} {request.url.path}",
        context={"request_id": req_id},
        extra_data={
            "ip": request.client.host if request.client else "unknown",
            "query_params": dict(request.query_params)
        })

    try:
        response = await call_next(request)
    except Exception as exc:
        response = server_error_response(request, exc)

    duration_ms = (time.time() - start_time) * 1000
    response.headers["X-Request-ID"] = req_id

    log_with_context(logger, "INFO",
        f"Request completed: {request.method} {request.url.path} → {response.status_code}",
        context={"request_id": req_id},
        extra_data={
            "duration_ms": round(duration_ms, 2),
            "status_code": response.status_code
        })

    return response


# Added last so it wraps the request ID middleware and every error response
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"]
)

app.include_router(students.router, tags=["Students"])


def _health():
    return {
        "message": "Student Records API is running!",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/api/health", tags=["Health"])
def api_health_check():
    return _health()


@app.get("/health", tags=["Health"])
def health_check():
    """Health check for container probes and monitoring."""
    return _health()


@app.get("/", tags=["Root"])
def root():
    """Root endpoint with API information."""
    return {
        "service": settings.APP_TITLE,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
        "endpoints": {
            "list": "GET /api/students",
            "stats": "GET /api/students/stats",
            "detail": "GET /api/students/{id}",
            "create": "POST /api/students",
            "update": "PUT /api/students/{id}",
            "delete": "DELETE /api/students/{id}"
        }
    }
