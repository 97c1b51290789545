"""Runtime settings read from the environment.

Environment Variables:
    WAF_SCOPE: "global" for CloudFront Web ACLs or a region name for waf-regional
    LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
    LOG_FORMAT: "text" for console output or "json" for CloudWatch-friendly lines
    WAF_MAX_ATTEMPTS: Attempts per mutation before giving up
    WAF_RETRY_BASE_DELAY: Backoff before the second attempt, in seconds
    WAF_RETRY_MAX_DELAY: Upper bound for a single backoff, in seconds
"""
import os
from dataclasses import dataclass, replace
from typing import Mapping

from webacl_manager.application.change_token_coordinator import (
    DEFAULT_BASE_DELAY,
    DEFAULT_MAX_ATTEMPTS,
    DEFAULT_MAX_DELAY,
)
from webacl_manager.domain.exceptions import ConfigurationError
from webacl_manager.domain.value_objects import GLOBAL_SCOPE

LOG_FORMATS = ("text", "json")


@dataclass(frozen=True)
class Settings:
    """Scope, logging and retry settings."""

    scope: str = GLOBAL_SCOPE
    log_level: str = "INFO"
    log_format: str = "text"
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    retry_base_delay: float = DEFAULT_BASE_DELAY
    retry_max_delay: float = DEFAULT_MAX_DELAY

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "Settings":
        """
        Load settings from environment variables, falling back to defaults.

        Raises:
            ConfigurationError: if a numeric variable cannot be parsed or is out of range
        """
        env = os.environ if environ is None else environ

        log_format = env.get("LOG_FORMAT", "text").lower()
        if log_format not in LOG_FORMATS:
            raise ConfigurationError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}")

        max_attempts = _parse_number(env, "WAF_MAX_ATTEMPTS", int, DEFAULT_MAX_ATTEMPTS)
        if max_attempts < 1:
            raise ConfigurationError("WAF_MAX_ATTEMPTS must be at least 1")

        return cls(
            scope=env.get("WAF_SCOPE", GLOBAL_SCOPE).strip() or GLOBAL_SCOPE,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
            max_attempts=max_attempts,
            retry_base_delay=_parse_number(env, "WAF_RETRY_BASE_DELAY", float, DEFAULT_BASE_DELAY),
            retry_max_delay=_parse_number(env, "WAF_RETRY_MAX_DELAY", float, DEFAULT_MAX_DELAY),
        )

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with the non-None overrides applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def _parse_number(env: Mapping[str, str], key: str, kind, default):
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = kind(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from None
    if value < 0:
        raise ConfigurationError(f"{key} must not be negative")
    return value
