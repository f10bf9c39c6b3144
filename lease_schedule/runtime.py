"""Runtime wiring for CLI and service entrypoints."""

from __future__ import annotations

from dataclasses import dataclass

from .cache import TTLCache
from .client import ScheduleApiClient
from .config import AppConfig, load_config
from .logging import configure_logging
from .service import ScheduleService


@dataclass(slots=True)
class Runtime:
    config: AppConfig
    client: ScheduleApiClient
    cache: TTLCache
    service: ScheduleService

    def close(self) -> None:
        self.client.close()


def build_runtime(config: AppConfig | None = None) -> Runtime:
    cfg = config or load_config()
    configure_logging(cfg.log_level, cfg.log_format)

    client = ScheduleApiClient(
        base_url=cfg.require_base_url(),
        timeout=cfg.http_timeout,
        retries=cfg.http_retries,
        user_agent=cfg.http_user_agent,
        username=cfg.api_username,
        password=cfg.api_password,
    )
    cache = TTLCache(cfg.cache_ttl)
    service = ScheduleService(client, cache, max_workers=cfg.parser_max_workers)

    return Runtime(config=cfg, client=client, cache=cache, service=service)
