"""
Centralized configuration for the helpdesk access engine.

- Frozen dataclass validated in __post_init__.
- Loads from OS env; a .env file at the repo root is read first if present.
- Immutable singleton via functools.lru_cache.
"""

from __future__ import annotations

import functools
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional, cast

from dotenv import load_dotenv

from shared.infrastructure.observability.logger import get_logger

# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------
def _get_env_str(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    v = os.getenv(key, default)
    if required and (v is None or str(v).strip() == ""):
        raise ValueError(f"Missing required env var: {key}")
    return v


def _get_env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v is None:
        return default
    return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"Env var {key} must be an integer") from None


def _validate_choice(value: str, *, choices: tuple[str, ...], key: str) -> str:
    if value not in choices:
        raise ValueError(f"{key} must be one of {choices}, got {value!r}")
    return value


def _validate_database_url(value: str, *, key: str) -> str:
    if not value.startswith(("postgresql+asyncpg://", "sqlite+aiosqlite://")):
        raise ValueError(f"{key} must start with postgresql+asyncpg:// or sqlite+aiosqlite://")
    return value


def _mask_url(value: str) -> str:
    # hide credentials, keep driver and host for diagnostics
    return re.sub(r"//[^@/]+@", "//***@", value)


# ------------------------------------------------------------------------------
# Settings dataclass (immutable)
# ------------------------------------------------------------------------------
EnvName = Literal["local", "dev", "test", "staging", "prod"]


@dataclass(frozen=True)
class Settings:
    # Environment
    environment: EnvName = "local"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./access.db"
    database_echo: bool = False
    database_pool_size: int = 5
    database_max_overflow: int = 10
    create_schema_on_startup: bool = True

    # Domain routing cache (seconds)
    domain_cache_ttl_seconds: int = 300
    domain_cache_retry_seconds: int = 30

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    base_dir: Path = field(default_factory=lambda: Path(__file__).resolve().parents[2])

    # Derived flags (filled in __post_init__)
    is_prod: bool = field(init=False)
    is_local: bool = field(init=False)

    def __post_init__(self) -> None:
        _validate_choice(
            self.environment,
            choices=("local", "dev", "test", "staging", "prod"),
            key="ENVIRONMENT",
        )
        _validate_database_url(self.database_url, key="DATABASE_URL")

        if self.domain_cache_ttl_seconds < 0:
            raise ValueError("DOMAIN_CACHE_TTL_SECONDS must be >= 0")
        if self.domain_cache_retry_seconds < 0:
            raise ValueError("DOMAIN_CACHE_RETRY_SECONDS must be >= 0")
        if self.database_pool_size <= 0:
            raise ValueError("DATABASE_POOL_SIZE must be > 0")

        if not re.fullmatch(r"(?i)DEBUG|INFO|WARNING|ERROR|CRITICAL", self.log_level.strip()):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

        object.__setattr__(self, "is_prod", self.environment == "prod")
        object.__setattr__(self, "is_local", self.environment in ("local", "test"))

    def safe_dict(self) -> dict:
        """Settings snapshot suitable for logging."""
        return {
            "environment": self.environment,
            "debug": self.debug,
            "database_url": _mask_url(self.database_url),
            "database_echo": self.database_echo,
            "domain_cache_ttl_seconds": self.domain_cache_ttl_seconds,
            "domain_cache_retry_seconds": self.domain_cache_retry_seconds,
            "log_level": self.log_level,
            "log_json": self.log_json,
        }


# ------------------------------------------------------------------------------
# Loader (singleton)
# ------------------------------------------------------------------------------
_logger = get_logger(__name__)


def load_settings() -> Settings:
    """Build Settings from the current environment (no caching)."""
    return Settings(
        environment=cast(EnvName, _get_env_str("ENVIRONMENT", "local") or "local"),
        debug=_get_env_bool("DEBUG", False),
        database_url=_get_env_str("DATABASE_URL", "sqlite+aiosqlite:///./access.db") or "",
        database_echo=_get_env_bool("DATABASE_ECHO", False),
        database_pool_size=_get_env_int("DATABASE_POOL_SIZE", 5),
        database_max_overflow=_get_env_int("DATABASE_MAX_OVERFLOW", 10),
        create_schema_on_startup=_get_env_bool("CREATE_SCHEMA_ON_STARTUP", True),
        domain_cache_ttl_seconds=_get_env_int("DOMAIN_CACHE_TTL_SECONDS", 300),
        domain_cache_retry_seconds=_get_env_int("DOMAIN_CACHE_RETRY_SECONDS", 30),
        log_level=_get_env_str("LOG_LEVEL", "INFO") or "INFO",
        log_json=_get_env_bool("LOG_JSON", True),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    env_file = Path(__file__).resolve().parents[2] / ".env"
    if env_file.exists():
        load_dotenv(dotenv_path=str(env_file), override=False)

    settings = load_settings()
    _logger.info("Settings loaded", settings=settings.safe_dict())
    return settings
