"""
Timeline entry routes.
"""
from fastapi import APIRouter, Depends, status
from typing import List
import logging

from mediahub.core.content import TimelineOrchestrator
from mediahub.dependencies import get_timeline_orchestrator
from mediahub.schemas import TimelineEntry, TimelineEntryCreateRequest, TimelineEntryUpdateRequest
from mediahub.utils.jwt_auth import require_auth

logger = logging.getLogger(__name__)

router = APIRouter(tags=["timeline"])


@router.get("/timelineentries", response_model=List[TimelineEntry])
async def list_timeline_entries(timeline: TimelineOrchestrator = Depends(get_timeline_orchestrator)):
    """List timeline entries, oldest first."""
    return await timeline.list()


@router.get("/timelineentries/{entry_id}", response_model=TimelineEntry)
async def get_timeline_entry(entry_id: str, timeline: TimelineOrchestrator = Depends(get_timeline_orchestrator)):
    return await timeline.get(entry_id)


@router.post("/timelineentries", response_model=TimelineEntry, status_code=status.HTTP_201_CREATED)
async def create_timeline_entry(
    payload: TimelineEntryCreateRequest,
    timeline: TimelineOrchestrator = Depends(get_timeline_orchestrator),
    claims: dict = Depends(require_auth),
):
    created = await timeline.create(TimelineEntry(**payload.model_dump(), last_updated_by=claims.get("sub", "")))
    logger.info(f"Created timeline entry {created.id}")
    return created


@router.put("/timelineentries/{entry_id}", response_model=TimelineEntry)
async def update_timeline_entry(
    entry_id: str,
    payload: TimelineEntryUpdateRequest,
    timeline: TimelineOrchestrator = Depends(get_timeline_orchestrator),
    claims: dict = Depends(require_auth),
):
    return await timeline.update(
        entry_id, TimelineEntry(**payload.model_dump(), last_updated_by=claims.get("sub", ""))
    )


@router.delete("/timelineentries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_timeline_entry(
    entry_id: str,
    timeline: TimelineOrchestrator = Depends(get_timeline_orchestrator),
    claims: dict = Depends(require_auth),
):
    await timeline.delete(entry_id)
    logger.info(f"Deleted timeline entry {entry_id}")
