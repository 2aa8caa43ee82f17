# src/vidtube/app/main.py
"""
FastAPI Main Application
VidTube video-sharing backend
"""

import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from vidtube import __version__
from vidtube.api.routers import ALL_ROUTERS
from vidtube.api.schemas import ApiError
from vidtube.app.config import Config, get_config, setup_logging, validate_config
from vidtube.app.database import DatabaseManager
from vidtube.infrastructure.clients.media_client import MediaClient, MediaStore
from vidtube.services import ServiceError

logger = logging.getLogger(__name__)


# ============================================================================
# Application Lifecycle Management
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan manager
    Handles startup and shutdown events
    """
    # ========== STARTUP ==========
    config: Config = app.state.config
    setup_logging(config)
    logger.info("🚀 Starting VidTube...")

    # 1. Validate configuration
    validation_result = validate_config(config)
    if not validation_result["valid"]:
        logger.error("❌ Configuration validation failed!")
        for error in validation_result["errors"]:
            logger.error(f"  - {error}")
        raise RuntimeError("Invalid configuration")

    for warning in validation_result["warnings"]:
        logger.warning(f"  ⚠️  {warning}")
    logger.info("✅ Configuration loaded and validated")

    # 2. Initialize database
    logger.info("🗄️  Initializing database...")
    await app.state.db_manager.create_tables()

    _print_startup_summary(config)
    logger.info("✅ Application startup complete!")

    yield

    # ========== SHUTDOWN ==========
    logger.info("🛑 Shutting down application...")
    await app.state.db_manager.close()

    media = app.state.media_client
    if hasattr(media, "aclose"):
        await media.aclose()

    logger.info("✅ Application shutdown complete")


def _print_startup_summary(config: Config) -> None:
    summary = config.get_summary()
    logger.info(
        f"📋 env={summary['app']['env']} "
        f"database={summary['database']['url']} "
        f"api=http://{config.api.host}:{config.api.port}{config.api.prefix} "
        f"media={'✅' if summary['media']['configured'] else '❌'}"
    )


# ============================================================================
# FastAPI Application Instance
# ============================================================================


def create_app(
    config: Optional[Config] = None,
    db_manager: Optional[DatabaseManager] = None,
    media_client: Optional[MediaStore] = None,
) -> FastAPI:
    """
    FastAPI application factory

    Args:
        config: Configuration (global singleton if None)
        db_manager: Database manager (built from config if None)
        media_client: Media host client (Cloudinary client if None)

    Returns:
        Configured application
    """
    config = config or get_config()

    app = FastAPI(
        title=config.app.name,
        description=config.get(
            "app.description",
            "Video-sharing platform backend: users, videos, comments, likes, "
            "playlists, tweets and subscriptions",
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        debug=config.api.debug,
    )

    app.state.config = config
    app.state.db_manager = db_manager or DatabaseManager(config.database)
    app.state.media_client = media_client or MediaClient(config.media)

    app.add_middleware(JSONBodyLimitMiddleware, config=config)

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.api.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app, config)
    _register_routers(app, config)

    return app


# ============================================================================
# Error Envelope
# ============================================================================


def _error_response(
    config: Config,
    status_code: int,
    message: str,
    errors: Optional[List[Any]] = None,
    exc: Optional[BaseException] = None,
) -> JSONResponse:
    stack = None
    if exc is not None and not config.app.is_production:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))

    body = ApiError(
        statusCode=status_code,
        message=message,
        errors=jsonable_encoder(errors or []),
        stack=stack,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
    )


class JSONBodyLimitMiddleware:
    """
    Reject JSON bodies larger than the configured limit

    Declared sizes are refused before the app runs. Streamed bodies are
    counted as they arrive and cut off once they pass the limit.
    """

    def __init__(self, app: ASGIApp, config: Config):
        self.app = app
        self.config = config
        self.limit = config.api.max_json_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = Headers(scope=scope)
        if not headers.get("content-type", "").startswith("application/json"):
            await self.app(scope, receive, send)
            return

        detail = f"Request body exceeds {self.limit} bytes"
        content_length = headers.get("content-length", "")
        if content_length.isdigit() and int(content_length) > self.limit:
            logger.warning(f"⚠️ Rejected {content_length}-byte JSON body on {scope['path']}")
            response = _error_response(self.config, 413, detail)
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.limit:
                    logger.warning(f"⚠️ Streamed JSON body on {scope['path']} passed {self.limit} bytes")
                    raise HTTPException(status_code=413, detail=detail)
            return message

        await self.app(scope, limited_receive, send)


def _register_exception_handlers(app: FastAPI, config: Config) -> None:
    """Register custom exception handlers"""

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """Handle errors raised by services and the auth gate"""
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return _error_response(config, exc.status_code, exc.message, exc.errors, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Handle validation errors"""
        errors = exc.errors()
        logger.info(f"Validation error on {request.url.path}: {errors}")
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        return _error_response(config, 400, message, errors, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        """Handle HTTP exceptions"""
        logger.info(f"HTTP error: {exc.status_code} - {exc.detail}")
        return _error_response(config, exc.status_code, str(exc.detail), exc=exc)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle all other exceptions"""
        logger.exception(f"Unhandled exception: {exc}")
        return _error_response(config, 500, "Internal Server Error", exc=exc)


def _register_routers(app: FastAPI, config: Config) -> None:
    """Register API routers"""
    for router in ALL_ROUTERS:
        app.include_router(router, prefix=config.api.prefix)

    @app.get("/", tags=["System"])
    async def root():
        """Root endpoint with API information"""
        return {
            "message": f"{config.app.name} API",
            "version": __version__,
            "docs": "/docs",
            "health": f"{config.api.prefix}/healthcheck",
        }

    logger.debug("✅ API routers registered")


# ============================================================================
# Application Instance
# ============================================================================

app = create_app()


# ============================================================================
# Development Server Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    config = get_config()

    uvicorn.run(
        "vidtube.app.main:app",
        host=config.api.host,
        port=config.api.port,
        reload=config.api.debug,
        log_level=config.logging.level.lower(),
    )
