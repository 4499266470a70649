"""FastAPI app with health, CRUD and search endpoints, and proper error handling.

Every error response uses the ``{error, message}`` envelope; database
failures are logged in full and reported to clients without detail.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from http import HTTPStatus

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings as default_settings
from .db import build_engine, build_session_maker, create_tables
from .logging_config import setup_logging
from .pipelines.search import SearchValidationError
from .routers import profile, projects, search, skills, work
from .schemas import ErrorResponse, HealthResponse

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, message: str, **extra) -> JSONResponse:
    content = ErrorResponse(error=error, message=message).model_dump()
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SearchValidationError)
    async def search_validation_handler(request: Request, exc: SearchValidationError):
        """Handle rejected search input."""
        logger.info(f"Rejected search on {request.url.path}: {exc.message}")
        return _error(status.HTTP_400_BAD_REQUEST, exc.error, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Handle malformed query parameters and bodies."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{location}: {first.get('msg', 'invalid value')}" if location else "Invalid request"
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid request",
            message,
            details=jsonable_encoder(errors),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Pass router errors through, wrapping plain details in the envelope."""
        if isinstance(exc.detail, dict) and {"error", "message"} <= exc.detail.keys():
            content = exc.detail
        else:
            content = ErrorResponse(
                error=HTTPStatus(exc.status_code).phrase,
                message=str(exc.detail),
            ).model_dump()
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        """Handle database failures without leaking internals."""
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error",
            "Database operation failed",
        )


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the application. ``app_settings`` defaults to the environment settings."""
    config = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Lifespan context manager for startup/shutdown logic."""
        # Startup
        setup_logging(config.logging)
        logger.info(f"{config.app_name} v{config.version} starting up")

        engine = build_engine(config.db)
        app.state.engine = engine
        app.state.session_maker = build_session_maker(engine)
        if config.db.create_tables:
            await create_tables(engine)

        yield

        # Shutdown
        await engine.dispose()
        logger.info("Application shutting down")

    app = FastAPI(
        title=config.app_name,
        version=config.version,
        description="Profile, skills, projects and work history with cross-entity search",
        lifespan=lifespan,
    )
    app.state.settings = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    for module in (profile, skills, projects, work, search):
        app.include_router(module.router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="ok", version=config.version)

    @app.get("/")
    async def root():
        """Root endpoint with API info."""
        return {
            "app": config.app_name,
            "version": config.version,
            "endpoints": {
                "health": "/health",
                "profile": "/api/profile",
                "skills": "/api/skills",
                "top_skills": "/api/skills/top",
                "projects": "/api/projects",
                "work": "/api/work",
                "search": "/api/search?q=",
                "advanced_search": "/api/search/advanced?q=&type=&category=&limit=",
                "docs": "/docs",
            },
        }

    return app


app = create_app()
