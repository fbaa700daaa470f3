"""
Community events listing, proxied from the events platform API.
"""
from fastapi import APIRouter, Depends
from typing import List

from mediahub.core.events import EventProxyOrchestrator, DEFAULT_LIMIT
from mediahub.dependencies import get_event_proxy
from mediahub.schemas import Event

router = APIRouter(tags=["events"])


@router.get("/events", response_model=List[Event])
async def list_events(
    limit: int = DEFAULT_LIMIT,
    order_by: str = "",
    desc: bool = False,
    proxy: EventProxyOrchestrator = Depends(get_event_proxy),
):
    """
    List upcoming community events.

    Args:
        limit: Maximum number of events (1-100, anything else falls back to 10)
        order_by: Attribute to sort by (default: starts-at)
        desc: Sort descending
        proxy: Event proxy (injected by FastAPI dependency)

    Returns:
        List[Event]: Events with a link to their public page

    Raises:
        BackendError: 502 if the events platform cannot be reached
    """
    return await proxy.list_events(limit, order_by, desc)
