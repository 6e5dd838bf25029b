from om_intel.core.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("ENV", raising=False)
    settings = Settings(_env_file=None)
    assert settings.DATABASE_URL == "sqlite:///./om_intel.db"
    assert settings.API_PREFIX == "/api"
    assert settings.DEFAULT_SESSION_TITLE == "New Chat"
    assert settings.CORS_ORIGINS == ["*"]


def test_cors_origins_parsed_from_comma_list(monkeypatch):
    monkeypatch.setenv("CORS_ORIGINS", "https://app.example.com, http://localhost:3000")
    settings = Settings(_env_file=None)
    assert settings.CORS_ORIGINS == ["https://app.example.com", "http://localhost:3000"]
