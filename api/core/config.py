"""
Runtime settings, read from the process environment.

Every accessor reads the environment at call time and falls back to a local
default, so a bare `uvicorn main:app` works against a local Postgres.
"""

from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent

DEFAULT_DATABASE_URL = "postgresql://localhost:5432/monkey_ranch"
DEFAULT_PORT = 3000
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def raw_database_url() -> str:
    return _env_str("DATABASE_URL", DEFAULT_DATABASE_URL)


def database_ssl() -> str | bool:
    """
    asyncpg `ssl` argument.

    Hosted databases (DATABASE_URL set) get `require`, which encrypts without
    verifying the certificate. A plain local default connects without TLS.
    """
    default = "require" if os.environ.get("DATABASE_URL", "").strip() else "disable"
    mode = _env_str("DATABASE_SSL", default).lower()
    if mode in {"disable", "false", "0", "off"}:
        return False
    return mode


def port() -> int:
    return _env_int("PORT", DEFAULT_PORT)


def host() -> str:
    return _env_str("HOST", "0.0.0.0")


def public_base_url() -> str:
    return _env_str("PUBLIC_BASE_URL", f"http://localhost:{port()}").rstrip("/")


def upload_dir() -> Path:
    return Path(_env_str("UPLOAD_DIR", str(BASE_DIR / "uploads")))


def static_dir() -> Path:
    return Path(_env_str("STATIC_DIR", str(BASE_DIR / "public")))


def max_upload_bytes() -> int:
    value = _env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()
