import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from sqlalchemy.engine import Engine

from .config import Settings
from .database import build_engine, create_db_and_tables
from .exceptions import ConfigurationError
from .application.ports.rate_limiter import RateLimiter
from .application.ports.task_runner import TaskRunner
from .application.ports.vision_provider import VisionProvider
from .application.services.auth_service import AuthService
from .application.services.auto_save_service import AutoSaveService
from .application.services.export_service import ExportService
from .application.services.gallery_service import GalleryService
from .application.services.history_service import HistoryService
from .application.services.preferences_service import PreferencesService
from .application.services.token_service import TokenService
from .application.services.upload_service import UploadService
from .application.services.vision_service import VisionService
from .infrastructure.persistence.sqlalchemy.repositories.analysis_repository_sql import SqlAnalysisRepository
from .infrastructure.persistence.sqlalchemy.repositories.image_repository_sql import SqlImageRepository
from .infrastructure.persistence.sqlalchemy.repositories.preferences_repository_sql import SqlPreferencesRepository
from .infrastructure.persistence.sqlalchemy.repositories.user_repository_sql import SqlUserRepository
from .infrastructure.rate_limit.memory_rate_limiter import InMemoryRateLimiter
from .infrastructure.storage.local_storage import LocalStorageRepository
from .infrastructure.tasks.background import AsyncioTaskRunner

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Process-scoped services, built once at startup and handed to request handlers."""

    settings: Settings
    engine: Engine
    task_runner: TaskRunner
    tokens: TokenService
    auth: AuthService
    auto_save: AutoSaveService
    upload: UploadService
    history: HistoryService
    gallery: GalleryService
    exports: ExportService
    preferences: PreferencesService

    def close(self) -> None:
        self.engine.dispose()


def build_rate_limiter(settings: Settings) -> RateLimiter:
    if settings.REDIS_URL:
        from .infrastructure.rate_limit.redis_rate_limiter import RedisRateLimiter
        logger.info("Redis rate limiter initialized")
        return RedisRateLimiter(settings.REDIS_URL)
    logger.info("Using memory-based rate limiting")
    return InMemoryRateLimiter()


def build_vision_provider(settings: Settings) -> VisionProvider:
    if not settings.GEMINI_API_KEY:
        raise ConfigurationError("GEMINI_API_KEY must be configured")
    from .infrastructure.ai.gemini_vision_provider import GeminiVisionProvider
    return GeminiVisionProvider(settings.GEMINI_API_KEY, settings.GEMINI_MODEL, settings.VISION_TIMEOUT_SECONDS)


def build_container(
    settings: Settings,
    vision_provider: Optional[VisionProvider] = None,
    task_runner: Optional[TaskRunner] = None,
) -> Container:
    if not settings.SECRET_KEY:
        raise ConfigurationError("JWT_SECRET_KEY must be configured; refusing to start with a default secret")

    engine = build_engine(settings)
    create_db_and_tables(engine)

    analysis_repo = SqlAnalysisRepository(engine)
    user_repo = SqlUserRepository(engine)
    image_repo = SqlImageRepository(engine)

    tokens = TokenService(settings.SECRET_KEY, settings.ALGORITHM, settings.TOKEN_EXPIRE_DAYS)
    runner = task_runner or AsyncioTaskRunner()
    auto_save = AutoSaveService(analysis_repo, window=timedelta(seconds=settings.AUTO_SAVE_WINDOW_SECONDS))
    vision = VisionService(vision_provider or build_vision_provider(settings), timeout_seconds=settings.VISION_TIMEOUT_SECONDS)

    return Container(
        settings=settings,
        engine=engine,
        task_runner=runner,
        tokens=tokens,
        auth=AuthService(user_repo, tokens, min_password_length=settings.MIN_PASSWORD_LENGTH),
        auto_save=auto_save,
        upload=UploadService(
            storage_repo=LocalStorageRepository(settings.UPLOAD_DIR),
            image_repo=image_repo,
            vision=vision,
            auto_save=auto_save,
            task_runner=runner,
            max_file_size=settings.MAX_FILE_SIZE,
            thumbnail_size=tuple(settings.THUMBNAIL_SIZE),
            thumbnail_quality=settings.THUMBNAIL_QUALITY,
        ),
        history=HistoryService(
            analysis_repo,
            source=settings.APP_NAME,
            default_limit=settings.HISTORY_PAGE_SIZE,
            max_limit=settings.HISTORY_MAX_PAGE_SIZE,
        ),
        gallery=GalleryService(image_repo),
        exports=ExportService(source=settings.APP_NAME),
        preferences=PreferencesService(SqlPreferencesRepository(engine)),
    )
