from __future__ import annotations

import logging
from typing import Any, Callable

from .adapters.photos import DEFAULT_PAGE_SIZE, PhotoSource, PhotoSourceError
from .domain.models import GalleryState, PhotoRecord
from .uploads import UploadStore

LOGGER = logging.getLogger(__name__)

DEFAULT_LOAD_ERROR = "Failed to load photos"

StateListener = Callable[[GalleryState], None]


class GalleryStateManager:
    """Owns the gallery snapshot and the page cursor.

    All operations are expected to run on a single event loop. ``load_more``
    refuses to start while a fetch is in flight; other reloads may overlap and
    whichever fetch finishes last determines the published photos.
    """

    def __init__(
        self,
        *,
        source: PhotoSource,
        uploads: UploadStore,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        self._source = source
        self._uploads = uploads
        self._page_size = page_size
        self._current_page = 1
        self._state = GalleryState()
        self._listeners: list[StateListener] = []
        self._closed = False

    @property
    def state(self) -> GalleryState:
        return self._state

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def source(self) -> PhotoSource:
        return self._source

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, **changes: Any) -> GalleryState:
        self._state = self._state.model_copy(update=changes)
        snapshot = self._state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                LOGGER.exception("Gallery state listener failed")
        return snapshot

    async def load(self, refresh: bool = False) -> GalleryState:
        if refresh:
            self._current_page = 1

        page = self._current_page
        self._publish(is_loading=True, error=None)

        try:
            api_photos = await self._source.fetch_page(page, self._page_size)
        except PhotoSourceError as exc:
            LOGGER.warning("Loading page %s failed: %s", page, exc)
            return self._publish(is_loading=False, error=str(exc) or DEFAULT_LOAD_ERROR)
        except Exception as exc:
            LOGGER.exception("Loading page %s failed", page)
            return self._publish(is_loading=False, error=str(exc) or DEFAULT_LOAD_ERROR)

        # Later pages append only the API photos; uploads are merged on page 1.
        if refresh or self._current_page == 1:
            photos = self._uploads.current() + tuple(api_photos)
        else:
            photos = self._state.photos + tuple(api_photos)

        LOGGER.info("Loaded page %s with %s photos (%s total)", page, len(api_photos), len(photos))
        return self._publish(photos=photos, is_loading=False, error=None)

    async def load_more(self) -> GalleryState:
        if self._state.is_loading:
            LOGGER.debug("Ignoring load_more while page %s is loading", self._current_page)
            return self._state
        self._current_page += 1
        return await self.load(refresh=False)

    async def refresh(self) -> GalleryState:
        return await self.load(refresh=True)

    async def upload_random(self) -> GalleryState:
        self._uploads.submit_random()
        return await self.load(refresh=True)

    async def upload_from_url(self, url: str) -> GalleryState:
        if not url or not url.strip():
            return self._state
        self._uploads.submit_by_url(url)
        return await self.load(refresh=True)

    def select_photo(self, photo: PhotoRecord | None) -> GalleryState:
        return self._publish(selected_photo=photo)

    def find_photo(self, photo_id: str) -> PhotoRecord | None:
        for photo in self._state.photos:
            if photo.id == photo_id:
                return photo
        return None

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._source.close()
        LOGGER.info("Gallery closed")
