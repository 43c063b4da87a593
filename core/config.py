"""Application configuration with environment-specific profiles.

Supports dev, staging, and production environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    request_id_header_name: str = "X-Request-ID"

    # Coaching parameters
    goal_pull_factor: float = 0.95

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "cors_origins": "*",
    },
    "staging": {
        "log_level": "INFO",
        "cors_origins": "http://localhost:3000",
    },
    "production": {
        "log_level": "WARNING",
        "cors_origins": "",
    },
}


def _split_origins(raw: str) -> list[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", profile.get("cors_origins", ""))),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER", "X-Request-ID"),
        goal_pull_factor=float(os.getenv("GOAL_PULL_FACTOR", "0.95")),
    )
