from datetime import timedelta

import httpx
import pytest

from lease_schedule.cache import TTLCache
from lease_schedule.exceptions import UpstreamError
from lease_schedule.service import (
    PARSED_CACHE_KEY,
    VERDICT_CACHE_EMPTY,
    VERDICT_FETCH_FAILED,
    VERDICT_SAME,
    ScheduleService,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class Upstream:
    """Answers /schedules and /results from in-memory payloads."""

    def __init__(self, schedules, results=None):
        self.schedules = schedules
        self.results = results
        self.calls = []

    def __call__(self, request):
        self.calls.append(request.url.path)
        if request.url.path == "/schedules":
            return httpx.Response(200, json=self.schedules)
        if request.url.path == "/results" and self.results is not None:
            return httpx.Response(200, json=self.results)
        return httpx.Response(404)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def build_service(make_client, clock):
    def factory(upstream, workers=1):
        cache = TTLCache(timedelta(minutes=10), clock=clock)
        return ScheduleService(make_client(upstream), cache, max_workers=workers)

    return factory


def test_get_schedules_fetches_parses_and_caches(build_service, raw_payload, clock):
    upstream = Upstream(raw_payload)
    service = build_service(upstream)

    first = service.get_schedules()
    second = service.get_schedules()

    assert [entry.entry_number for entry in first] == [1, 2, 3, 4, 5]
    assert second is first
    assert upstream.calls == ["/schedules"]
    assert service.cache.get(PARSED_CACHE_KEY) is first

    clock.now += 600
    service.get_schedules()
    assert upstream.calls == ["/schedules", "/schedules"]


def test_get_schedules_propagates_fetch_errors(build_service):
    service = build_service(lambda request: httpx.Response(500))

    with pytest.raises(UpstreamError):
        service.get_schedules()
    assert service.cache.get(PARSED_CACHE_KEY) is None


def test_verify_with_empty_cache_does_not_call_upstream(build_service, raw_payload):
    upstream = Upstream(raw_payload, results=[])
    service = build_service(upstream)

    outcome = service.verify_against_results()

    assert outcome.same is False
    assert outcome.summary == VERDICT_CACHE_EMPTY
    assert upstream.calls == []


def test_verify_matching_results(build_service, raw_payload):
    upstream = Upstream(raw_payload)
    service = build_service(upstream)
    parsed = service.get_schedules()
    upstream.results = [entry.to_payload() for entry in parsed]
    upstream.results[0]["propertyDescription"] = "Endeavour  House, 47 Cuba   Street, London"
    upstream.results[0]["notes"] = []

    outcome = service.verify_against_results()

    assert outcome.same is True
    assert outcome.summary == VERDICT_SAME
    assert outcome.report.is_empty


def test_verify_reports_differences(build_service, raw_payload):
    upstream = Upstream(raw_payload)
    service = build_service(upstream)
    parsed = service.get_schedules()
    results = [entry.to_payload() for entry in parsed if entry.entry_number != 5]
    results[0]["propertyDescription"] = "DIFFERENT"
    results.append({**results[1], "entryNumber": 6})
    upstream.results = results

    outcome = service.verify_against_results()

    assert outcome.same is False
    assert outcome.report.missing == [6]
    assert outcome.report.extra == [5]
    assert outcome.summary.splitlines()[:4] == [
        "NO",
        "Missing EntryNumber 6",
        "Extra EntryNumber 5",
        "Entry 1 - PropertyDescription differs:",
    ]


def test_verify_when_results_cannot_be_fetched(build_service, raw_payload):
    service = build_service(Upstream(raw_payload, results=None))
    service.get_schedules()

    outcome = service.verify_against_results()

    assert outcome.same is False
    assert outcome.summary == VERDICT_FETCH_FAILED
    assert outcome.report is None


def test_parallel_workers_produce_same_batch(build_service, raw_payload):
    sequential = build_service(Upstream(raw_payload)).get_schedules()
    parallel = build_service(Upstream(raw_payload), workers=3).get_schedules()

    assert parallel == sequential
