"""HTTP client for the upstream schedule API."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, List, Optional

import httpx

from .exceptions import UpstreamError
from .logging import get_logger
from .models import RawSchedule, ScheduleEntry

logger = get_logger(__name__)

SCHEDULES_PATH = "/schedules"
RESULTS_PATH = "/results"


class ScheduleApiClient:
    """Fetches raw register entries and reference results with basic auth."""

    def __init__(
        self,
        base_url: str,
        timeout: float,
        retries: int,
        user_agent: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.retries = max(1, retries)
        self._sleep = sleep
        auth = None
        if username is not None or password is not None:
            auth = httpx.BasicAuth(username or "", password or "")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            auth=auth,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            follow_redirects=True,
            transport=transport,
        )
        self._lock = threading.Lock()

    def close(self) -> None:
        with self._lock:
            self._client.close()

    def fetch_raw_schedules(self, retries: Optional[int] = None) -> List[RawSchedule]:
        payload = self._get_json(SCHEDULES_PATH, retries)
        return self._decode(SCHEDULES_PATH, payload, RawSchedule.from_payload)

    def fetch_results(self) -> List[ScheduleEntry]:
        payload = self._get_json(RESULTS_PATH)
        return self._decode(RESULTS_PATH, payload, ScheduleEntry.from_payload)

    def _decode(self, path: str, payload: Any, build: Callable[[Any], Any]) -> List[Any]:
        if payload is None:
            return []
        if not isinstance(payload, list):
            raise UpstreamError(f"{path} returned {type(payload).__name__}, expected a list")
        try:
            return [build(item) for item in payload]
        except (AttributeError, TypeError, ValueError) as exc:
            raise UpstreamError(f"{path} returned an invalid item: {exc}") from exc

    def _get_json(self, path: str, retries: Optional[int] = None) -> Any:
        attempts = max(1, retries) if retries is not None else self.retries
        for attempt in range(1, attempts + 1):
            try:
                with self._lock:
                    response = self._client.get(path)
                response.raise_for_status()
                return response.json()
            except (httpx.HTTPError, ValueError) as exc:
                logger.warning(
                    "http_retry",
                    path=path,
                    attempt=attempt,
                    retries=attempts,
                    error=str(exc),
                )
                if attempt == attempts:
                    raise UpstreamError(f"GET {path} failed: {exc}") from exc
                backoff = min(60.0, 2 ** (attempt - 1))
                self._sleep(backoff)
        raise UpstreamError(f"GET {path} failed")
