"""
Text content routes.
Reads are public; create, update and delete require an admin token.
"""
from fastapi import APIRouter, Depends, status
from typing import List
import logging

from mediahub.core.content import TextOrchestrator
from mediahub.dependencies import get_text_orchestrator
from mediahub.schemas import TextCreateRequest, TextRecord, TextUpdateRequest
from mediahub.utils.jwt_auth import require_auth

logger = logging.getLogger(__name__)

router = APIRouter(tags=["texts"])


@router.get("/texts", response_model=List[TextRecord])
async def list_texts(texts: TextOrchestrator = Depends(get_text_orchestrator)):
    """List all text blocks in creation order."""
    return await texts.list()


@router.get("/texts/id/{text_id}", response_model=TextRecord)
async def get_text(text_id: str, texts: TextOrchestrator = Depends(get_text_orchestrator)):
    return await texts.get(text_id)


@router.get("/texts/page/{page_id}", response_model=List[TextRecord])
async def list_texts_by_page_id(page_id: str, texts: TextOrchestrator = Depends(get_text_orchestrator)):
    return await texts.list_by_page_id(page_id)


@router.get("/texts/page/slug/{page_slug}", response_model=List[TextRecord])
async def list_texts_by_page_slug(page_slug: str, texts: TextOrchestrator = Depends(get_text_orchestrator)):
    """
    List the texts of a page by its slug.

    Args:
        page_slug: Page slug (normalized before lookup)
        texts: Text orchestrator (injected by FastAPI dependency)

    Returns:
        List[TextRecord]: Matching texts, possibly empty
    """
    return await texts.list_by_page_slug(page_slug)


@router.get("/texts/{slug}", response_model=TextRecord)
async def get_text_by_slug(slug: str, texts: TextOrchestrator = Depends(get_text_orchestrator)):
    """
    Get a text block by slug.

    Raises:
        NotFound: 404 if no text has this slug
    """
    return await texts.get_by_slug(slug)


@router.post("/texts", response_model=TextRecord, status_code=status.HTTP_201_CREATED)
async def create_text(
    payload: TextCreateRequest,
    texts: TextOrchestrator = Depends(get_text_orchestrator),
    claims: dict = Depends(require_auth),
):
    """
    Create a text block.

    Args:
        payload: Slug, content and optional page references
        texts: Text orchestrator (injected by FastAPI dependency)
        claims: Token claims (injected by auth dependency)

    Returns:
        TextRecord: The stored text with its assigned id
    """
    created = await texts.create(TextRecord(
        **payload.model_dump(),
        last_updated_by=claims.get("sub", ""),
    ))
    logger.info(f"Created text {created.id} (slug: {created.slug})")
    return created


@router.put("/texts/{text_id}", response_model=TextRecord)
async def update_text(
    text_id: str,
    payload: TextUpdateRequest,
    texts: TextOrchestrator = Depends(get_text_orchestrator),
    claims: dict = Depends(require_auth),
):
    """Merge the non-empty fields of the payload into the stored text."""
    updated = await texts.update(text_id, TextRecord(
        **payload.model_dump(),
        last_updated_by=claims.get("sub", ""),
    ))
    logger.info(f"Updated text {text_id}")
    return updated


@router.delete("/texts/{text_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_text(
    text_id: str,
    texts: TextOrchestrator = Depends(get_text_orchestrator),
    claims: dict = Depends(require_auth),
):
    await texts.delete(text_id)
    logger.info(f"Deleted text {text_id}")
