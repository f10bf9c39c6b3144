"""Configuration loader for the lease schedule service."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .logging import LOG_FORMATS


def _get_env(key: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(key)
    if value is not None:
        value = value.strip()
        if value == "":
            return default
        return value
    return default


def _get_int(key: str, default: int) -> int:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be an integer") from exc


def _get_float(key: str, default: float) -> float:
    value = _get_env(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise ValueError(f"Environment variable {key} must be a number") from exc


def _get_choice(key: str, default: str, choices: tuple[str, ...]) -> str:
    value = (_get_env(key) or default).lower()
    if value not in choices:
        raise ValueError(f"Environment variable {key} must be one of {', '.join(choices)}")
    return value


@dataclass(slots=True)
class AppConfig:
    api_base_url: Optional[str]
    api_username: Optional[str]
    api_password: Optional[str]
    http_timeout: float
    http_retries: int
    http_user_agent: str
    cache_ttl: timedelta
    parser_max_workers: int
    log_level: str
    log_format: str

    def require_base_url(self) -> str:
        if not self.api_base_url:
            raise ValueError("SCHEDULE_API_BASE_URL must be set")
        return self.api_base_url


DEFAULT_USER_AGENT = "lease-schedule-parser/1.0"


def load_config() -> AppConfig:
    api_base_url = _get_env("SCHEDULE_API_BASE_URL")
    api_username = _get_env("SCHEDULE_API_USERNAME")
    api_password = _get_env("SCHEDULE_API_PASSWORD")

    http_timeout = _get_float("HTTP_TIMEOUT_SECONDS", 30.0)
    if http_timeout <= 0:
        raise ValueError("Environment variable HTTP_TIMEOUT_SECONDS must be positive")
    http_retries = max(1, _get_int("HTTP_RETRIES", 3))
    http_user_agent = _get_env("HTTP_USER_AGENT", DEFAULT_USER_AGENT)
    cache_ttl_seconds = max(1, _get_int("CACHE_TTL_SECONDS", 600))
    parser_max_workers = max(1, _get_int("PARSER_MAX_WORKERS", 1))
    log_level = _get_env("LOG_LEVEL", "INFO").upper()
    log_format = _get_choice("LOG_FORMAT", "json", LOG_FORMATS)

    return AppConfig(
        api_base_url=api_base_url,
        api_username=api_username,
        api_password=api_password,
        http_timeout=http_timeout,
        http_retries=http_retries,
        http_user_agent=http_user_agent,
        cache_ttl=timedelta(seconds=cache_ttl_seconds),
        parser_max_workers=parser_max_workers,
        log_level=log_level,
        log_format=log_format,
    )
