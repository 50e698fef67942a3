from __future__ import annotations

from typing import Protocol

from ...domain.models import PhotoRecord

DEFAULT_PAGE_SIZE = 30


class PhotoSourceError(RuntimeError):
    """Raised when photos cannot be fetched from the remote photo API."""


class PhotoSource(Protocol):
    async def fetch_page(self, page: int, page_size: int = DEFAULT_PAGE_SIZE) -> list[PhotoRecord]:
        """Fetch one page of remote photos, in the order the API returns them."""

    async def fetch_by_id(self, photo_id: str) -> PhotoRecord:
        """Fetch the metadata of a single remote photo."""

    def close(self) -> None:
        """Release the underlying transport."""
