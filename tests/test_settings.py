from __future__ import annotations

from webhook_inspector.settings import Settings


def test_defaults():
    settings = Settings()
    assert settings.port == 8080
    assert settings.cors_allowed_origins == ["*"]
    assert settings.webhook_secret is None
    assert settings.request_retention_days == 0


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ALLOWED_ORIGINS", "http://localhost:3000, https://dash.example.com")

    settings = Settings()

    assert settings.cors_allowed_origins == ["http://localhost:3000", "https://dash.example.com"]


def test_webhook_secret_from_env(monkeypatch):
    monkeypatch.setenv("WEBHOOK_SECRET", "abc")
    assert Settings().webhook_secret == "abc"
