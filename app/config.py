#config.py
import os
from pydantic_settings import BaseSettings
from pydantic import Field
from pydantic_settings import SettingsConfigDict
from typing import Optional, List, Tuple
from functools import lru_cache


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "AI Image Recognition Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 5000

    # Database Settings
    DATABASE_URL: str = "sqlite:///./images.db"

    # Security Settings (no default secret: the container refuses to start without one)
    SECRET_KEY: Optional[str] = Field(default=None, alias="JWT_SECRET_KEY")
    ALGORITHM: str = "HS256"
    TOKEN_EXPIRE_DAYS: int = 7
    MIN_PASSWORD_LENGTH: int = 6

    # CORS Settings (comma-separated)
    ALLOWED_ORIGINS: str = "*"

    # File Upload Settings
    MAX_FILE_SIZE: int = 10 * 1024 * 1024  # 10MB
    UPLOAD_DIR: str = "uploads"
    THUMBNAIL_SIZE: Tuple[int, int] = (200, 200)
    THUMBNAIL_QUALITY: int = 80
    GZIP_MIN_SIZE: int = 500  # bytes

    # Vision Settings
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    VISION_TIMEOUT_SECONDS: float = 30.0

    # History
    AUTO_SAVE_WINDOW_SECONDS: int = 5 * 60
    HISTORY_PAGE_SIZE: int = 20
    HISTORY_MAX_PAGE_SIZE: int = 100

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # Rate Limiting
    RATE_LIMIT_PER_MINUTE: int = 60
    REDIS_URL: Optional[str] = None

    def _split_csv(self, value: str) -> List[str]:
        if value is None:
            return []
        value = value.strip()
        if value == "":
            return []
        return [item.strip() for item in value.split(",")]

    @property
    def allowed_origins_list(self) -> List[str]:
        return self._split_csv(self.ALLOWED_ORIGINS)


@lru_cache()
def get_settings() -> Settings:
    s = Settings()
    # CORS_ORIGINS is accepted as an alias for ALLOWED_ORIGINS
    cors_env = os.environ.get("CORS_ORIGINS")
    if cors_env:
        s.ALLOWED_ORIGINS = cors_env
    return s
