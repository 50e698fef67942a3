from __future__ import annotations

import logging
import random
import time
from typing import Callable

from .domain.models import DEFAULT_IMAGE_SIZE, PICSUM_BASE_URL, PhotoRecord

LOGGER = logging.getLogger(__name__)

UPLOAD_AUTHOR = "You"
RANDOM_ID_MIN = 1000
RANDOM_ID_MAX = 2000


def _current_millis() -> int:
    return time.time_ns() // 1_000_000


class UploadStore:
    """In-memory list of photos "uploaded" during this process.

    Random uploads go to the front of the list, uploads by URL to the end.
    """

    def __init__(
        self,
        *,
        base_url: str = PICSUM_BASE_URL,
        clock: Callable[[], int] = _current_millis,
        rng: random.Random | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._clock = clock
        self._rng = rng or random.Random()
        self._photos: list[PhotoRecord] = []

    def __len__(self) -> int:
        return len(self._photos)

    def current(self) -> tuple[PhotoRecord, ...]:
        return tuple(self._photos)

    def submit_by_url(self, url: str) -> PhotoRecord | None:
        if not url or not url.strip():
            return None
        photo = PhotoRecord(
            id=f"user_{self._clock()}",
            author=UPLOAD_AUTHOR,
            url=url,
            download_url=url,
        )
        self._photos.append(photo)
        LOGGER.info("Stored upload '%s' from %s", photo.id, url)
        return photo

    def submit_random(self) -> PhotoRecord:
        random_id = self._rng.randint(RANDOM_ID_MIN, RANDOM_ID_MAX)
        photo = PhotoRecord(
            id=f"random_{random_id}",
            author=UPLOAD_AUTHOR,
            download_url=f"{self._base_url}/id/{random_id}/{DEFAULT_IMAGE_SIZE}/{DEFAULT_IMAGE_SIZE}",
        )
        self._photos.insert(0, photo)
        LOGGER.info("Stored random upload '%s'", photo.id)
        return photo
