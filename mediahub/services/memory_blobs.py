"""
In-process Blobs implementation for local development and tests.
Objects live in a dict for the lifetime of the process.
"""
import logging
from typing import Dict

logger = logging.getLogger(__name__)


class MemoryBlobs:
    def __init__(self, base_url: str = "https://mock-storage.example.com"):
        self.base_url = base_url.rstrip("/")
        self.objects: Dict[str, bytes] = {}

    async def put(self, key: str, data: bytes) -> str:
        self.objects[key] = bytes(data)
        logger.debug(f"Stored {len(data):,} bytes under {key}")
        return f"{self.base_url}/{key}"

    async def delete(self, key: str) -> None:
        # Missing keys are fine
        self.objects.pop(key, None)

    async def signed_url(self, key: str) -> str:
        return f"{self.base_url}/{key}?signed=true"

    def key_from_url(self, locator: str) -> str:
        prefix = f"{self.base_url}/"
        if not locator.startswith(prefix):
            return ""
        return locator[len(prefix):].split("?", 1)[0]
