"""
Academic Records API

Main FastAPI application for the student/teacher records service.
Every request passes the route gate; every operation re-checks the
caller's role and, where it applies, ownership of the target record.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from access import (
    AuthenticationFailure,
    AuthorizationFailure,
    NotFoundFailure,
    ValidationError,
)
from api import (
    RouteGateMiddleware,
    auth_router,
    basic_scheme,
    reference_router,
    student_router,
    teacher_router,
)
from config import settings, setup_logging
from database import init_db

setup_logging()
logger = logging.getLogger(__name__)


# --------------- Lifespan ---------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler – initialise DB on startup."""
    logger.info("Initializing database...")
    init_db()
    if settings.seed_on_startup:
        from database.seed import seed_database
        seed_database()
    logger.info("Database initialized.")
    yield


# --------------- FastAPI app ---------------

app = FastAPI(
    title="Academic Records API",
    description="""
API for managing student and teacher records with role-based access control.

## Authorization Rules
- **Teachers**: Can list, read, create, update and delete student records; read all teacher records;
  create and delete teachers; update only their own teacher profile
- **Students**: Can only read their own student record; never change records
- **Reference data**: Departments and courses are readable by everyone signed in, writable by teachers

## Layers
- Route gate: Path patterns checked against the caller's role before dispatch
- Method guard: Every operation checks the caller's role again
- Ownership: Self-scoped operations compare the caller with the target record
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(RouteGateMiddleware)


# --------------- Exception handlers ---------------

@app.exception_handler(AuthenticationFailure)
async def authentication_failure_handler(request: Request, exc: AuthenticationFailure):
    """Generic sign-in failure; the reason is never exposed."""
    return JSONResponse(
        status_code=401,
        content={"detail": "Sign-in failed"},
        headers={"WWW-Authenticate": f'Basic realm="{basic_scheme.realm}"'},
    )


@app.exception_handler(AuthorizationFailure)
async def authorization_failure_handler(request: Request, exc: AuthorizationFailure):
    """Uniform denial; the failure kind stays internal."""
    logger.info("Access denied on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=403, content={"detail": "Access denied"})


@app.exception_handler(NotFoundFailure)
async def not_found_handler(request: Request, exc: NotFoundFailure):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    content = {"detail": exc.message}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(status_code=400, content=content)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error", "type": type(exc).__name__}
    )


# Include routers
app.include_router(auth_router)
app.include_router(student_router)
app.include_router(teacher_router)
app.include_router(reference_router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint - API health check."""
    return {
        "status": "online",
        "service": "Academic Records API",
        "version": "1.0.0"
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/status", tags=["Health"])
async def api_status():
    return {"status": "ok", "database": settings.database_url.split(":", 1)[0]}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
