"""Runtime configuration helpers for the bbmcp engines."""
from __future__ import annotations

import os
from typing import Any, Dict, Optional

DEFAULT_MAX_CUBES = 2048
DEFAULT_MAX_TEXTURE_SIZE = 2048
DEFAULT_MAX_ANIMATION_SECONDS = 120.0
DEFAULT_MAX_TEXTURE_OPS = 4096
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_SERVICE_NAME = "bbmcp_gateway"
DEFAULT_REQUIRE_REVISION = False


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def _get_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _get_float(name: str, default: float) -> float:
    raw = _get_env(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def get_max_cubes() -> int:
    return _get_int("BBMCP_MAX_CUBES", DEFAULT_MAX_CUBES)


def get_max_texture_size() -> int:
    return _get_int("BBMCP_MAX_TEXTURE_SIZE", DEFAULT_MAX_TEXTURE_SIZE)


def get_max_animation_seconds() -> float:
    return _get_float("BBMCP_MAX_ANIMATION_SECONDS", DEFAULT_MAX_ANIMATION_SECONDS)


def get_max_texture_ops() -> int:
    return _get_int("BBMCP_MAX_TEXTURE_OPS", DEFAULT_MAX_TEXTURE_OPS)


def get_log_level() -> str:
    level = (_get_env("BBMCP_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        return DEFAULT_LOG_LEVEL
    return level


def get_service_name() -> str:
    return _get_env("BBMCP_SERVICE_NAME") or DEFAULT_SERVICE_NAME


def get_require_revision() -> bool:
    """When on, every mutating tool call must carry ifRevision."""
    raw = _get_env("BBMCP_REQUIRE_REVISION")
    if raw is None or not raw.strip():
        return DEFAULT_REQUIRE_REVISION
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def config_snapshot() -> Dict[str, Any]:
    """Return resolved config values for diagnostics."""
    return {
        "service_name": get_service_name(),
        "log_level": get_log_level(),
        "max_cubes": get_max_cubes(),
        "max_texture_size": get_max_texture_size(),
        "max_animation_seconds": get_max_animation_seconds(),
        "max_texture_ops": get_max_texture_ops(),
        "require_revision": get_require_revision(),
    }
