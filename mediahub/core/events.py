"""
Read-through proxy for the third-party events listing.
"""
from typing import List

from mediahub.config import settings
from mediahub.ports import EventsSource
from mediahub.schemas import Event

DEFAULT_LIMIT = 10
MAX_LIMIT = 100
DEFAULT_ORDER_BY = "starts-at"


class EventProxyOrchestrator:
    def __init__(self, source: EventsSource, web_base_url: str = ""):
        self._source = source
        self._web_base_url = (web_base_url or settings.EVENTS_WEB_BASE_URL).rstrip("/")

    async def list_events(self, limit: int = DEFAULT_LIMIT, order_by: str = "", desc: bool = False) -> List[Event]:
        """
        Fetch events, applying the default-parameter policy:
        out-of-range limits fall back to 10 and an empty order_by sorts by start date.
        """
        if limit <= 0 or limit > MAX_LIMIT:
            limit = DEFAULT_LIMIT
        if not order_by:
            order_by = DEFAULT_ORDER_BY

        events = await self._source.get_events(limit, order_by, desc)
        return [
            event.model_copy(update={"link": f"{self._web_base_url}/e/{event.id}"})
            for event in events
        ]
