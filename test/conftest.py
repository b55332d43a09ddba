"""Shared fixtures: a fake Subscan API served through httpx.MockTransport."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from subscan_events.config import (
    FetchConfig,
    NodeConfig,
    SubscanConfig,
    SubscanEventsConfig,
)

LIST_PATH = "/api/v2/scan/events"
PARAMS_PATH = "/api/scan/event/params"


def make_event(block: int, ordinal: int = 1, timestamp: int = 1700000000) -> dict:
    """Build an event summary the way Subscan lists it."""
    return {
        "block_timestamp": timestamp,
        "event_id": "DidCreated",
        "event_index": f"{block}-{ordinal}",
        "extrinsic_hash": f"0x{block:064x}",
        "extrinsic_index": f"{block}-0",
        "finalized": True,
        "id": block * 100 + ordinal,
        "module_id": "did",
        "phase": 0,
    }


def make_params(event_index: str) -> list[dict]:
    """Build the parameters Subscan returns for an event."""
    return [
        {"name": "who", "type": "[U8; 32]", "type_name": "AccountId", "value": f"acc-{event_index}"},
        {"type_name": "DidIdentifierOf", "value": f"did-{event_index}"},
    ]


class FakeSubscan:
    """In-memory Subscan holding events per queried block range.

    Events are keyed by the `block_range` string of the list request,
    e.g. "0-100000". Requests are recorded in `requests`.
    """

    def __init__(self) -> None:
        self.events: dict[str, list[dict]] = {}
        self.params: dict[str, list[dict]] = {}
        self.requests: list[tuple[str, dict]] = []
        self.headers: list[httpx.Headers] = []

    def add_events(self, block_range: str, events: list[dict]) -> None:
        self.events.setdefault(block_range, []).extend(events)
        for event in events:
            self.params.setdefault(event["event_index"], make_params(event["event_index"]))

    def list_requests(self) -> list[dict]:
        return [payload for path, payload in self.requests if path == LIST_PATH]

    def params_requests(self) -> list[dict]:
        return [payload for path, payload in self.requests if path == PARAMS_PATH]

    def handler(self, request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        self.requests.append((request.url.path, payload))
        self.headers.append(request.headers)

        if request.url.path == LIST_PATH:
            events = self.events.get(payload["block_range"], [])
            row, page = payload["row"], payload["page"]
            page_events = events[page * row:(page + 1) * row]
            return httpx.Response(200, json={
                "code": 0,
                "message": "Success",
                "generated_at": 1700000000,
                "data": {"count": len(events), "events": page_events or None},
            })

        if request.url.path == PARAMS_PATH:
            data = [
                {"event_index": index, "params": self.params[index]}
                for index in payload["event_index"]
                if index in self.params
            ]
            return httpx.Response(200, json={
                "code": 0,
                "message": "Success",
                "generated_at": 1700000000,
                "data": data,
            })

        return httpx.Response(404, json={"code": 404, "message": "Not Found"})

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def fake_subscan():
    """Create an empty fake Subscan."""
    return FakeSubscan()


@pytest.fixture
def config():
    """Configuration for an enabled Subscan network without delays."""
    return SubscanEventsConfig(
        subscan=SubscanConfig(network="spiritnet", secret="test-secret"),
        node=NodeConfig(rpc_url="http://localhost:9933"),
        fetch=FetchConfig(query_interval=0)
    )


@pytest.fixture
def disabled_config():
    """Configuration with Subscan switched off."""
    return SubscanEventsConfig(subscan=SubscanConfig(network="NONE"))


@pytest.fixture
def sleeps():
    """List of the intervals passed to the recording sleep."""
    return []


@pytest.fixture
def recording_sleep(sleeps):
    """Async sleep replacement that records its argument and returns at once."""
    async def sleep(seconds: float) -> None:
        sleeps.append(seconds)
    return sleep


@pytest.fixture
def chain():
    """Block height source returning 150,000."""
    mock = AsyncMock()
    mock.get_block_number = AsyncMock(return_value=150_000)
    return mock
