"""Fetch, parse, cache and verify schedules against the upstream API."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional, Tuple

from .cache import TTLCache
from .client import ScheduleApiClient
from .compare import compare_schedules, find_duplicates
from .exceptions import UpstreamError
from .logging import get_logger
from .models import DiffReport, ScheduleEntry
from .parser import parse_schedules

logger = get_logger(__name__)

PARSED_CACHE_KEY = "parsed_schedule_cache"

VERDICT_SAME = "YES"
VERDICT_CACHE_EMPTY = "NO - cache is empty"
VERDICT_FETCH_FAILED = "NO - failed to fetch external results"


@dataclass(slots=True)
class VerifyOutcome:
    same: bool
    summary: str
    report: Optional[DiffReport] = None


class ScheduleService:
    def __init__(
        self,
        client: ScheduleApiClient,
        cache: TTLCache,
        max_workers: int = 1,
    ) -> None:
        self.client = client
        self.cache = cache
        self.max_workers = max_workers

    def get_schedules(self) -> Tuple[ScheduleEntry, ...]:
        cached = self.cache.get(PARSED_CACHE_KEY)
        if cached is not None:
            logger.info("cache_hit", key=PARSED_CACHE_KEY, count=len(cached))
            return cached

        logger.info("cache_miss", key=PARSED_CACHE_KEY)
        started = time.perf_counter()
        try:
            raw = self.client.fetch_raw_schedules()
        except UpstreamError as exc:
            logger.error("fetch_schedules_failed", error=str(exc))
            raise
        logger.info(
            "schedules_fetched",
            count=len(raw),
            elapsed_ms=int((time.perf_counter() - started) * 1000),
        )

        started = time.perf_counter()
        parsed = tuple(parse_schedules(raw, max_workers=self.max_workers))
        logger.info(
            "schedules_parsed",
            parsed=len(parsed),
            raw=len(raw),
            elapsed_ms=int((time.perf_counter() - started) * 1000),
        )

        self.cache.set(PARSED_CACHE_KEY, parsed)
        logger.info(
            "schedules_cached",
            key=PARSED_CACHE_KEY,
            count=len(parsed),
            ttl_seconds=int(self.cache.ttl.total_seconds()),
        )
        return parsed

    def verify_against_results(self) -> VerifyOutcome:
        cached = self.cache.get(PARSED_CACHE_KEY)
        if cached is None:
            logger.warning("verify_cache_empty", key=PARSED_CACHE_KEY)
            return VerifyOutcome(same=False, summary=VERDICT_CACHE_EMPTY)

        logger.info("verify_started", cached=len(cached))
        try:
            external = self.client.fetch_results()
        except UpstreamError as exc:
            logger.error("fetch_results_failed", error=str(exc))
            return VerifyOutcome(same=False, summary=VERDICT_FETCH_FAILED)

        cached_dupes = find_duplicates(cached)
        external_dupes = find_duplicates(external)
        if cached_dupes or external_dupes:
            logger.warning(
                "duplicate_entry_numbers",
                cached=cached_dupes,
                external=external_dupes,
            )

        report = compare_schedules(cached, external)
        logger.info(
            "verify_finished",
            missing=len(report.missing),
            extra=len(report.extra),
            diffs=len(report.differing_entries()),
        )
        if report.is_empty:
            return VerifyOutcome(same=True, summary=VERDICT_SAME, report=report)
        return VerifyOutcome(
            same=False,
            summary="\n".join(["NO", *report.lines()]),
            report=report,
        )
