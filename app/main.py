import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.gzip import GZipMiddleware
from starlette.staticfiles import StaticFiles

# Load environment variables as early as possible
load_dotenv()

from .config import Settings, get_settings
from .container import build_container, build_rate_limiter
from .exceptions import http_exception_handler, validation_exception_handler
from .utils import iso_utc, utcnow
from .middleware import (
    RateLimitMiddleware, SecurityMiddleware, LoggingMiddleware,
    ErrorHandlingMiddleware, RequestSizeLimitMiddleware,
)
from .application.ports.task_runner import TaskRunner
from .application.ports.vision_provider import VisionProvider
from .routers import auth_router, analyze_router, history_router, gallery_router, export_router

logger = logging.getLogger(__name__)

# Multipart framing on top of the image itself
MULTIPART_OVERHEAD = 1024 * 1024


def create_app(
    settings: Optional[Settings] = None,
    vision_provider: Optional[VisionProvider] = None,
    task_runner: Optional[TaskRunner] = None,
) -> FastAPI:
    settings = settings or get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=settings.LOG_FORMAT
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME}...")
        container = build_container(settings, vision_provider=vision_provider, task_runner=task_runner)
        app.state.container = container
        logger.info("Service container initialized")
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")
        await container.task_runner.drain()
        container.close()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None)
    )

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(SecurityMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, max_body_size=settings.MAX_FILE_SIZE + MULTIPART_OVERHEAD)
    app.add_middleware(RateLimitMiddleware, limiter=build_rate_limiter(settings), max_per_minute=settings.RATE_LIMIT_PER_MINUTE)
    app.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MIN_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Uploaded images and thumbnails
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

    app.include_router(auth_router.router)
    app.include_router(analyze_router.router)
    app.include_router(history_router.router)
    app.include_router(gallery_router.router)
    app.include_router(export_router.router)

    @app.get("/health")
    def health_check():
        return {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": iso_utc(utcnow()),
        }

    return app


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )
