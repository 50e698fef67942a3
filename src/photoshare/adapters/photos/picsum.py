from __future__ import annotations

import asyncio
import http.client
import json
import logging
from typing import Any
from urllib.parse import quote, urlencode
from urllib.request import OpenerDirector, Request, build_opener

from pydantic import ValidationError

from ...domain.models import PICSUM_BASE_URL, PhotoRecord
from .base import DEFAULT_PAGE_SIZE, PhotoSourceError

LOGGER = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10
DEFAULT_USER_AGENT = "photoshare/0.1"


def _parse_photo(item: Any, *, context: str) -> PhotoRecord:
    if not isinstance(item, dict):
        raise PhotoSourceError(f"Unexpected Picsum {context} entry shape")
    try:
        return PhotoRecord.model_validate(item)
    except ValidationError as exc:
        raise PhotoSourceError(f"Invalid Picsum {context} entry") from exc


class PicsumPhotoSource:
    def __init__(
        self,
        *,
        base_url: str = PICSUM_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        opener: OpenerDirector | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._user_agent = user_agent
        self._opener = opener if opener is not None else build_opener()
        self._closed = False

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def closed(self) -> bool:
        return self._closed

    def _fetch_json(self, url: str) -> Any:
        request = Request(url, headers={"User-Agent": self._user_agent})
        try:
            with self._opener.open(request, timeout=self._timeout_seconds) as response:
                return json.loads(response.read().decode("utf-8"))
        except (OSError, http.client.HTTPException, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PhotoSourceError("Failed to fetch photos from Picsum") from exc

    def _get_page(self, page: int, page_size: int) -> list[PhotoRecord]:
        params = {"page": str(page), "limit": str(page_size)}
        url = f"{self._base_url}/v2/list?{urlencode(params)}"
        LOGGER.debug("Fetching Picsum page %s (limit %s)", page, page_size)
        payload = self._fetch_json(url)
        if not isinstance(payload, list):
            raise PhotoSourceError("Unexpected Picsum list response shape")
        return [_parse_photo(item, context="list") for item in payload]

    def _get_photo(self, photo_id: str) -> PhotoRecord:
        url = f"{self._base_url}/id/{quote(photo_id, safe='')}/info"
        payload = self._fetch_json(url)
        return _parse_photo(payload, context="info")

    async def fetch_page(self, page: int, page_size: int = DEFAULT_PAGE_SIZE) -> list[PhotoRecord]:
        if page < 1:
            raise ValueError("page must be >= 1")
        if page_size < 1:
            raise ValueError("page_size must be >= 1")
        return await asyncio.to_thread(self._get_page, page, page_size)

    async def fetch_by_id(self, photo_id: str) -> PhotoRecord:
        text = photo_id.strip()
        if not text:
            raise ValueError("photo_id must not be empty")
        return await asyncio.to_thread(self._get_photo, text)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._opener.close()
