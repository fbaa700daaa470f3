"""
Slug normalization and object storage key derivation.
Pure helpers: no I/O, no shared state.
"""
import uuid
from datetime import datetime, timezone
from typing import Optional

# Key segment for images uploaded without a slug
UNNAMED_SEGMENT = "image"


def normalize(raw: str) -> str:
    """
    Canonical form of a user-supplied name: trimmed, lowercased,
    internal spaces replaced with hyphens.

    An empty result means "no grouping key".
    """
    if not raw:
        return ""
    return raw.strip().lower().replace(" ", "-")


def derive_object_key(slug: str, sequence: Optional[int] = None, now: Optional[datetime] = None) -> str:
    """
    Build a storage key for a single image.

    Format: images/{slug}-{unix_seconds}[-{sequence}].jpg

    Two calls within the same second for the same slug (and sequence)
    produce the same key. An empty slug becomes "image-{unix}-{random}"
    so slugless uploads never share a key.
    """
    now = now or datetime.now(timezone.utc)
    segment = normalize(slug)
    suffix = "" if sequence is None else f"-{sequence}"
    if not segment:
        segment = UNNAMED_SEGMENT
        suffix += f"-{uuid.uuid4().hex[:8]}"
    return f"images/{segment}-{int(now.timestamp())}{suffix}.jpg"


def gallery_item_key(index: int, now: Optional[datetime] = None) -> str:
    """
    Build a storage key for one image of a gallery event.

    Format: gallery_events/{uuid}/{YYYYMMDD}_{index}.jpg
    The uuid is fresh per call, so items of one event never share a key.
    """
    now = now or datetime.now(timezone.utc)
    return f"gallery_events/{uuid.uuid4().hex}/{now.strftime('%Y%m%d')}_{index}.jpg"
