"""
Configuration for the esdocs client.

All configuration is validated at construction time, not per-call.
Environment variables are read once via ``ESConfig.from_env()`` and
the resulting object is immutable. The client threads it into every
index and type facade it hands out, so the autopopulation default is
an explicit value rather than ambient global state.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_DEFAULT_BASE_URL = "http://127.0.0.1:9200"
_DEFAULT_TIMEOUT_CONNECT = 5.0
_DEFAULT_TIMEOUT_READ = 30.0
_DEFAULT_TIMEOUT_POOL = 10.0
_DEFAULT_RETRIES = 0

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


@dataclass(frozen=True)
class ESConfig:
    """Validated, immutable configuration for :class:`~esdocs.client.ESClient`.

    Args:
        base_url: Search engine base URL (no trailing slash).
        timeout_connect: TCP connect timeout in seconds.
        timeout_read: HTTP read timeout in seconds.
        timeout_pool: Connection pool acquisition timeout in seconds.
        retries: Transport-level retries on connection failure. Requests
            that reached the server are never retried by this library.
        verify_ssl: TLS verification (True, False, or path to CA bundle).
        auto_populate: Write server-assigned ids back onto documents that
            were created without one. Documents can also opt in one by one
            with ``Document.auto_populate``.
        username: HTTP basic auth user (optional).
        password: HTTP basic auth password (optional).
    """

    base_url: str = _DEFAULT_BASE_URL
    timeout_connect: float = _DEFAULT_TIMEOUT_CONNECT
    timeout_read: float = _DEFAULT_TIMEOUT_READ
    timeout_pool: float = _DEFAULT_TIMEOUT_POOL
    retries: int = _DEFAULT_RETRIES
    verify_ssl: bool | str = True
    auto_populate: bool = False
    username: str | None = None
    password: str | None = None

    def __post_init__(self) -> None:
        errors: list[str] = []

        if not self.base_url:
            errors.append("base_url must be a non-empty string")
        elif not self.base_url.startswith(("http://", "https://")):
            errors.append(f"base_url must start with http:// or https://, got {self.base_url!r}")
        if self.timeout_connect <= 0:
            errors.append(f"timeout_connect must be > 0, got {self.timeout_connect}")
        if self.timeout_read <= 0:
            errors.append(f"timeout_read must be > 0, got {self.timeout_read}")
        if self.timeout_pool <= 0:
            errors.append(f"timeout_pool must be > 0, got {self.timeout_pool}")
        if self.retries < 0:
            errors.append(f"retries must be >= 0, got {self.retries}")
        if (self.username is None) != (self.password is None):
            errors.append("username and password must be set together")

        if errors:
            raise ValueError("Invalid esdocs configuration: " + "; ".join(errors))

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.username is None or self.password is None:
            return None
        return (self.username, self.password)

    @classmethod
    def from_env(cls, **overrides: object) -> ESConfig:
        """Build config from environment variables with optional overrides.

        Environment variables:
            ESDOCS_BASE_URL         -- Engine base URL (default http://127.0.0.1:9200)
            ESDOCS_TIMEOUT_CONNECT  -- Connect timeout seconds (default 5.0)
            ESDOCS_TIMEOUT_READ     -- Read timeout seconds (default 30.0)
            ESDOCS_TIMEOUT_POOL     -- Pool timeout seconds (default 10.0)
            ESDOCS_RETRIES          -- Transport connect retries (default 0)
            ESDOCS_VERIFY_SSL       -- "true", "false", or path to CA bundle
            ESDOCS_AUTO_POPULATE    -- Write server ids back onto documents (default false)
            ESDOCS_USERNAME         -- Basic auth user
            ESDOCS_PASSWORD         -- Basic auth password

        Explicit keyword arguments override environment variables.
        """

        def _env_float(key: str, default: float) -> float:
            raw = os.environ.get(key)
            if raw is None:
                return default
            try:
                return float(raw)
            except ValueError:
                raise ValueError(f"Environment variable {key}={raw!r} is not a valid number")

        def _env_int(key: str, default: int) -> int:
            raw = os.environ.get(key)
            if raw is None:
                return default
            try:
                return int(raw)
            except ValueError:
                raise ValueError(f"Environment variable {key}={raw!r} is not a valid integer")

        def _env_bool(key: str, default: bool) -> bool:
            raw = os.environ.get(key)
            if raw is None:
                return default
            low = raw.strip().lower()
            if low in _TRUE_VALUES:
                return True
            if low in _FALSE_VALUES:
                return False
            raise ValueError(f"Environment variable {key}={raw!r} is not a valid boolean")

        def _env_verify(key: str, default: bool | str) -> bool | str:
            raw = os.environ.get(key)
            if raw is None:
                return default
            low = raw.strip().lower()
            if low in _TRUE_VALUES:
                return True
            if low in _FALSE_VALUES:
                return False
            return raw  # CA bundle path

        kwargs: dict[str, object] = {
            "base_url": os.environ.get("ESDOCS_BASE_URL", _DEFAULT_BASE_URL).rstrip("/"),
            "timeout_connect": _env_float("ESDOCS_TIMEOUT_CONNECT", _DEFAULT_TIMEOUT_CONNECT),
            "timeout_read": _env_float("ESDOCS_TIMEOUT_READ", _DEFAULT_TIMEOUT_READ),
            "timeout_pool": _env_float("ESDOCS_TIMEOUT_POOL", _DEFAULT_TIMEOUT_POOL),
            "retries": _env_int("ESDOCS_RETRIES", _DEFAULT_RETRIES),
            "verify_ssl": _env_verify("ESDOCS_VERIFY_SSL", True),
            "auto_populate": _env_bool("ESDOCS_AUTO_POPULATE", False),
            "username": os.environ.get("ESDOCS_USERNAME"),
            "password": os.environ.get("ESDOCS_PASSWORD"),
        }
        kwargs.update({k: v for k, v in overrides.items() if v is not None})
        if isinstance(kwargs["base_url"], str):
            kwargs["base_url"] = kwargs["base_url"].rstrip("/")

        config = cls(**kwargs)  # type: ignore[arg-type]
        logger.info(
            "esdocs config: base_url=%s timeout_connect=%.1f timeout_read=%.1f"
            " retries=%d auto_populate=%s",
            config.base_url,
            config.timeout_connect,
            config.timeout_read,
            config.retries,
            config.auto_populate,
        )
        return config
