"""
HTTP client for the Grupy Sanca events API (JSON:API).
Stateless read-through: no caching, no retries.
"""
import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx

from mediahub.config import settings
from mediahub.errors import BackendError
from mediahub.schemas import Event

logger = logging.getLogger(__name__)

JSON_API_ACCEPT = "application/vnd.api+json"
MAX_PAGE_SIZE = 100

# JSON:API attribute name -> Event field, for optional string attributes
_OPTIONAL_ATTRIBUTES = {
    "description": "description",
    "location-name": "location_name",
    "logo-url": "logo_url",
    "thumbnail-image-url": "thumbnail_image_url",
    "large-image-url": "large_image_url",
    "original-image-url": "original_image_url",
    "icon-image-url": "icon_image_url",
}


def _parse_timestamp(value: Optional[str]) -> datetime:
    if not value:
        raise ValueError("missing timestamp")
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def build_sort_param(order_by: str, desc: bool) -> str:
    """Grupy API field name, prefixed with "-" for descending order."""
    order_by = order_by or "starts-at"
    return f"-{order_by}" if desc else order_by


def build_query_params(
    sort: str = "",
    page_size: int = 0,
    page_number: int = 0,
    filters: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, str]:
    """
    Build query parameters for the events endpoint.

    Args:
        sort: Sort field (e.g., "starts-at", "-starts-at" for descending)
        page_size: Results per page, capped at the API maximum of 100
        page_number: 1-based page number
        filters: Filter conditions, e.g. {"name": "starts-at", "op": "lt", "val": "2025-10-03T21:00:00Z"}
    """
    params: Dict[str, str] = {}
    if filters:
        params["filter"] = json.dumps(filters)
    if sort:
        params["sort"] = sort
    if page_size > 0:
        params["page[size]"] = str(min(page_size, MAX_PAGE_SIZE))
    if page_number > 0:
        params["page[number]"] = str(page_number)
    return params


def map_event(data: Dict[str, Any]) -> Event:
    """
    Map one JSON:API resource object to an Event.

    Raises:
        ValueError: If starts-at or ends-at is missing or malformed
    """
    attrs = data.get("attributes") or {}

    try:
        created_at = _parse_timestamp(attrs.get("created-at"))
    except ValueError:
        # created-at is optional
        created_at = None

    event = Event(
        id=str(data.get("id", "")),
        identifier=attrs.get("identifier") or "",
        name=attrs.get("name") or "",
        starts_at=_parse_timestamp(attrs.get("starts-at")),
        ends_at=_parse_timestamp(attrs.get("ends-at")),
        timezone=attrs.get("timezone") or "",
        privacy=attrs.get("privacy") or "",
        state=attrs.get("state") or "",
        created_at=created_at,
    )

    optional = {
        field: attrs[attribute]
        for attribute, field in _OPTIONAL_ATTRIBUTES.items()
        if attrs.get(attribute) is not None
    }
    return event.model_copy(update=optional)


class GrupyEventsClient:
    """EventsSource backed by the Grupy Sanca events API."""

    def __init__(
        self,
        base_url: str = "",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = (base_url or settings.EVENTS_API_BASE_URL).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.EVENTS_API_TIMEOUT_SECONDS
        self._transport = transport

    async def get_events(self, limit: int, order_by: str, desc: bool) -> List[Event]:
        """
        Fetch one page of events.

        Events with malformed start or end timestamps are skipped.

        Raises:
            BackendError: If the request fails or the API answers with a non-200 status
        """
        params = build_query_params(sort=build_sort_param(order_by, desc), page_size=limit)

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(
                    f"{self._base_url}/events",
                    params=params,
                    headers={"Accept": JSON_API_ACCEPT},
                )
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch events: {str(e)}")
            raise BackendError(f"failed to fetch events: {str(e)}") from e

        if response.status_code != httpx.codes.OK:
            logger.error(f"Events API returned status {response.status_code}")
            raise BackendError(f"events API returned status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise BackendError(f"failed to decode events response: {str(e)}") from e

        events = []
        for data in payload.get("data") or []:
            try:
                events.append(map_event(data))
            except ValueError as e:
                logger.warning(f"Skipping event {data.get('id')}: {str(e)}")

        logger.info(f"Fetched {len(events)} event(s) (sort={params.get('sort')}, size={params.get('page[size]')})")
        return events
