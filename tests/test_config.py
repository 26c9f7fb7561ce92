from app.config import Settings, get_settings


def test_environment_overrides_defaults(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///./other.db")
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379/0")
    monkeypatch.setenv("JWT_SECRET_KEY", "from-env")

    s = Settings(_env_file=None)
    assert s.PORT == 8080
    assert s.DATABASE_URL == "sqlite:///./other.db"
    assert s.REDIS_URL == "redis://cache:6379/0"
    assert s.SECRET_KEY == "from-env"


def test_literal_defaults(monkeypatch):
    for name in ("PORT", "DATABASE_URL", "REDIS_URL", "ALLOWED_ORIGINS", "GEMINI_API_KEY", "GEMINI_MODEL"):
        monkeypatch.delenv(name, raising=False)

    s = Settings(_env_file=None)
    assert s.PORT == 5000
    assert s.DATABASE_URL == "sqlite:///./images.db"
    assert s.REDIS_URL is None
    assert s.allowed_origins_list == ["*"]


def test_cors_origins_alias(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    get_settings.cache_clear()
    try:
        assert get_settings().allowed_origins_list == ["https://a.example", "https://b.example"]
    finally:
        get_settings.cache_clear()
