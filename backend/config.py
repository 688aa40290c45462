"""
Environment configuration for the snake game driver.

Game tunables live in domain.constants; this module only holds settings
that change between deployments.
"""

import os

from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def get_snake_db_path():
    """SQLite file holding the persisted high score, or None for the default location."""
    return os.getenv("SNAKE_DB_PATH")


# Start with sound cues muted
SNAKE_MUTED = _env_flag("SNAKE_MUTED")

SNAKE_HOST = os.getenv("SNAKE_HOST", "127.0.0.1")
SNAKE_PORT = int(os.getenv("SNAKE_PORT", "5000"))

# Comma separated list of origins allowed to call /api/*
CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS")
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]


def get_cors_origins():
    if CORS_ALLOWED_ORIGINS:
        return [o.strip() for o in CORS_ALLOWED_ORIGINS.split(",") if o.strip()]
    return list(DEFAULT_CORS_ORIGINS)
