"""
Pydantic schemas for domain records and request/response payloads.
Records double as merge patches: empty strings and None mean "no change".
"""
from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime, date as date_type
from typing import Optional, List


# ---------------------------------------------------------------------------
# Domain records
# ---------------------------------------------------------------------------


class TextRecord(BaseModel):
    """A text content block addressed by slug."""

    id: str = ""
    slug: str = ""
    content: str = ""
    page_id: str = ""
    page_slug: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_updated_by: str = ""

    model_config = ConfigDict(from_attributes=True)


class ImageRecord(BaseModel):
    """Image metadata. object_url is the locator returned by the object store."""

    id: str = ""
    slug: str = ""
    object_url: str = ""
    name: str = ""
    text: str = ""
    date: Optional[datetime] = None
    location: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_updated_by: str = ""

    model_config = ConfigDict(from_attributes=True)


class TimelineEntry(BaseModel):
    id: str = ""
    name: str = ""
    text: str = ""
    location: str = ""
    date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    last_updated_by: str = ""

    model_config = ConfigDict(from_attributes=True)


class GalleryEventRecord(BaseModel):
    """
    An event backed by several uploaded images.

    image_ids are back-references to ImageRecords, not ownership:
    deleting the event leaves the images in place.
    """

    id: str = ""
    name: str = ""
    location: str = ""
    date: Optional[datetime] = None
    image_urls: List[str] = Field(default_factory=list)
    image_ids: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class Event(BaseModel):
    """Third-party community event (proxied, never persisted)."""

    id: str
    identifier: str = ""
    name: str = ""
    description: str = ""
    starts_at: datetime
    ends_at: datetime
    timezone: str = ""
    location_name: str = ""
    logo_url: str = ""
    thumbnail_image_url: str = ""
    large_image_url: str = ""
    original_image_url: str = ""
    icon_image_url: str = ""
    privacy: str = ""
    state: str = ""
    created_at: Optional[datetime] = None
    link: str = ""


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class TextCreateRequest(BaseModel):
    slug: str
    content: str
    page_id: str = ""
    page_slug: str = ""


class TextUpdateRequest(BaseModel):
    slug: str = ""
    content: str = ""
    page_id: str = ""
    page_slug: str = ""


class ImageCreateRequest(BaseModel):
    """
    Request schema for uploading a single image.
    data is the base64-encoded binary payload; date is YYYY-MM-DD.
    """
    slug: str = ""
    name: str
    text: str = ""
    date: Optional[date_type] = None
    location: str = ""
    data: str


class ImageUpdateRequest(BaseModel):
    """Every field is optional; data replaces the stored binary when present."""
    slug: str = ""
    name: str = ""
    text: str = ""
    date: Optional[date_type] = None
    location: str = ""
    data: str = ""


class TimelineEntryCreateRequest(BaseModel):
    name: str
    text: str = ""
    location: str = ""
    date: datetime


class TimelineEntryUpdateRequest(BaseModel):
    name: str = ""
    text: str = ""
    location: str = ""
    date: Optional[datetime] = None


class GalleryEventCreateRequest(BaseModel):
    """
    Request schema for creating a gallery event.
    Field presence is checked by the orchestrator so every violation
    surfaces as the same domain ValidationError.
    """
    name: str = ""
    location: str = ""
    date: Optional[datetime] = None
    images_base64: List[str] = Field(default_factory=list)


class LoginRequest(BaseModel):
    password: str


# ---------------------------------------------------------------------------
# Response payloads
# ---------------------------------------------------------------------------


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class ErrorResponse(BaseModel):
    error: str
    detail: str
    field: Optional[str] = None
    index: Optional[int] = None
