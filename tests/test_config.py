"""Tests for configuration module."""

from __future__ import annotations

from core.config import Settings, _ENV_PROFILES, get_settings


def test_settings_dataclass():
    s = Settings()
    assert s.app_env == "dev"
    assert s.log_level == "INFO"
    assert s.cors_origins == ["http://localhost:3000"]
    assert s.request_id_header_name == "X-Request-ID"
    assert s.goal_pull_factor == 0.95


def test_settings_frozen():
    s = Settings()
    try:
        s.app_env = "production"
        assert False, "Should raise"
    except AttributeError:
        pass


def test_settings_is_production():
    s = Settings(app_env="production")
    assert s.is_production is True
    assert s.is_dev is False


def test_settings_is_dev():
    s = Settings(app_env="dev")
    assert s.is_dev is True
    assert s.is_production is False


def test_env_profiles_exist():
    assert "dev" in _ENV_PROFILES
    assert "staging" in _ENV_PROFILES
    assert "production" in _ENV_PROFILES


def test_dev_profile_debug_logging():
    assert _ENV_PROFILES["dev"]["log_level"] == "DEBUG"


def test_get_settings_uses_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example,")
    monkeypatch.setenv("REQUEST_ID_HEADER", "X-Trace-ID")
    monkeypatch.setenv("GOAL_PULL_FACTOR", "0.9")
    s = get_settings()
    assert s.app_env == "production"
    assert s.log_level == "ERROR"
    assert s.cors_origins == ["https://a.example", "https://b.example"]
    assert s.request_id_header_name == "X-Trace-ID"
    assert s.goal_pull_factor == 0.9


def test_settings_profile_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "CORS_ORIGINS", "REQUEST_ID_HEADER", "GOAL_PULL_FACTOR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("APP_ENV", "dev")
    s = get_settings()
    assert s.log_level == "DEBUG"
    assert s.cors_origins == ["*"]

    monkeypatch.setenv("APP_ENV", "production")
    s = get_settings()
    assert s.log_level == "WARNING"
    assert s.cors_origins == []


def test_unknown_env_falls_back_to_dev_profile(monkeypatch):
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.setenv("APP_ENV", "qa")
    s = get_settings()
    assert s.app_env == "qa"
    assert s.log_level == "DEBUG"
