"""
SQLAlchemy models for the application.
All database models inherit from Base (declarative base).
Primary keys are store-assigned uuid4 hex strings.
"""
import uuid

from sqlalchemy import Column, String, Text, DateTime, JSON
from mediahub.database import Base


def new_id() -> str:
    return uuid.uuid4().hex


class TextContent(Base):
    """Text content block, looked up by slug or by page."""
    __tablename__ = "texts"

    id = Column(String(32), primary_key=True, default=new_id)
    slug = Column(String, nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    page_id = Column(String, nullable=False, default="", index=True)
    page_slug = Column(String, nullable=False, default="", index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    last_updated_by = Column(String, nullable=False, default="")


class ImageMeta(Base):
    """
    Image metadata model.
    object_url points at the binary held by the object store.
    """
    __tablename__ = "images"

    id = Column(String(32), primary_key=True, default=new_id)
    slug = Column(String, nullable=False, default="", index=True)
    object_url = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")
    text = Column(Text, nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=True)
    location = Column(String, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    last_updated_by = Column(String, nullable=False, default="")


class TimelineEntryRow(Base):
    __tablename__ = "timeline_entries"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False, default="")
    text = Column(Text, nullable=False, default="")
    location = Column(String, nullable=False, default="")
    date = Column(DateTime(timezone=True), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
    last_updated_by = Column(String, nullable=False, default="")


class GalleryEvent(Base):
    """
    Gallery event model.
    image_urls and image_ids are parallel lists in render order.
    """
    __tablename__ = "gallery_events"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)
    image_urls = Column(JSON, nullable=False, default=list)
    image_ids = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
