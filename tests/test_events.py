import json
from datetime import datetime, timezone

import httpx
import pytest

from mediahub.core.events import EventProxyOrchestrator
from mediahub.errors import BackendError
from mediahub.schemas import Event
from mediahub.services.events_client import (
    GrupyEventsClient,
    build_query_params,
    build_sort_param,
    map_event,
)

API_BASE = "https://events.test/api/v1"


def _resource(event_id, starts_at="2025-10-03T19:00:00Z", **attributes):
    attrs = {
        "name": f"Event {event_id}",
        "starts-at": starts_at,
        "ends-at": "2025-10-03T22:00:00Z",
        "timezone": "America/Sao_Paulo",
        "location-name": "ICMC",
    }
    attrs.update(attributes)
    return {"type": "event", "id": event_id, "attributes": attrs}


class RecordingSource:
    def __init__(self, events):
        self.events = events
        self.calls = []

    async def get_events(self, limit, order_by, desc):
        self.calls.append((limit, order_by, desc))
        return self.events


def _event(event_id):
    start = datetime(2025, 10, 3, 19, tzinfo=timezone.utc)
    return Event(id=event_id, starts_at=start, ends_at=start)


@pytest.mark.parametrize("limit,expected", [(0, 10), (-5, 10), (101, 10), (1, 1), (100, 100)])
async def test_proxy_clamps_limit(limit, expected):
    source = RecordingSource([])
    await EventProxyOrchestrator(source, web_base_url="https://web.test").list_events(limit=limit)

    assert source.calls == [(expected, "starts-at", False)]


async def test_proxy_passes_order_and_direction():
    source = RecordingSource([])
    await EventProxyOrchestrator(source, web_base_url="https://web.test").list_events(5, "name", True)

    assert source.calls == [(5, "name", True)]


async def test_proxy_adds_public_links():
    proxy = EventProxyOrchestrator(RecordingSource([_event("42")]), web_base_url="https://web.test/")

    events = await proxy.list_events()

    assert events[0].link == "https://web.test/e/42"


def test_sort_param():
    assert build_sort_param("starts-at", False) == "starts-at"
    assert build_sort_param("starts-at", True) == "-starts-at"
    assert build_sort_param("", True) == "-starts-at"


def test_query_params_cap_page_size():
    params = build_query_params(sort="name", page_size=500, filters=[{"name": "state", "op": "eq", "val": "published"}])

    assert params["page[size]"] == "100"
    assert params["sort"] == "name"
    assert json.loads(params["filter"]) == [{"name": "state", "op": "eq", "val": "published"}]
    assert "page[number]" not in params


def test_map_event():
    event = map_event(_resource("7", **{"created-at": "2025-09-01T12:00:00+00:00"}))

    assert event.id == "7"
    assert event.location_name == "ICMC"
    assert event.starts_at == datetime(2025, 10, 3, 19, tzinfo=timezone.utc)
    assert event.created_at is not None


def test_map_event_requires_start():
    with pytest.raises(ValueError):
        map_event(_resource("7", starts_at="not a date"))


async def test_client_fetches_and_skips_malformed_events():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["accept"] = request.headers["accept"]
        return httpx.Response(200, json={"data": [_resource("1"), _resource("2", starts_at=None)]})

    client = GrupyEventsClient(base_url=API_BASE, transport=httpx.MockTransport(handler))

    events = await client.get_events(10, "starts-at", True)

    assert [e.id for e in events] == ["1"]
    assert seen["accept"] == "application/vnd.api+json"
    assert seen["url"].path == "/api/v1/events"
    assert seen["url"].params["sort"] == "-starts-at"
    assert seen["url"].params["page[size]"] == "10"


async def test_client_non_200_is_backend_error():
    transport = httpx.MockTransport(lambda request: httpx.Response(503, text="down"))

    with pytest.raises(BackendError):
        await GrupyEventsClient(base_url=API_BASE, transport=transport).get_events(10, "starts-at", False)


async def test_client_transport_error_is_backend_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(BackendError) as exc_info:
        await GrupyEventsClient(base_url=API_BASE, transport=httpx.MockTransport(handler)).get_events(10, "", False)

    assert isinstance(exc_info.value.__cause__, httpx.ConnectError)
