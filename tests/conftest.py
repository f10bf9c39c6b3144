import json
from pathlib import Path

import httpx
import pytest

from lease_schedule.client import ScheduleApiClient

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture()
def raw_payload():
    return json.loads((FIXTURES / "raw_schedules.json").read_text(encoding="utf-8"))


@pytest.fixture()
def make_client():
    """Build a client whose requests are answered by ``handler``."""
    clients = []

    def factory(handler, retries=1, sleeps=None, **kwargs):
        client = ScheduleApiClient(
            base_url="http://upstream.test",
            timeout=5.0,
            retries=retries,
            user_agent="tests",
            transport=httpx.MockTransport(handler),
            sleep=(sleeps.append if sleeps is not None else lambda _: None),
            **kwargs,
        )
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
