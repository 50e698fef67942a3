"""Shared pytest fixtures for the gallery tests."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import pytest

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from photoshare.adapters.photos import PhotoSourceError  # noqa: E402
from photoshare.domain.models import PhotoRecord  # noqa: E402
from photoshare.settings import AppSettings, EnvSettings, PhotoShareYamlSettings  # noqa: E402
from photoshare.uploads import UploadStore  # noqa: E402


def make_photo(photo_id: str, author: str = "Alejandro Escamilla") -> PhotoRecord:
    return PhotoRecord(
        id=photo_id,
        author=author,
        width=5000,
        height=3333,
        download_url=f"https://picsum.photos/id/{photo_id}/5000/3333",
        url=f"https://unsplash.com/photos/{photo_id}",
    )


class StubResponse:
    def __init__(self, body: bytes, read_error: Exception | None = None) -> None:
        self._body = body
        self._read_error = read_error

    def read(self) -> bytes:
        if self._read_error is not None:
            raise self._read_error
        return self._body

    def __enter__(self) -> StubResponse:
        return self

    def __exit__(self, *exc_info: Any) -> bool:
        return False


class StubOpener:
    def __init__(
        self,
        payload: Any = None,
        *,
        body: bytes | None = None,
        error: Exception | None = None,
        read_error: Exception | None = None,
    ) -> None:
        self._body = body if body is not None else json.dumps(payload).encode("utf-8")
        self._error = error
        self._read_error = read_error
        self.requests: list[tuple[Any, float]] = []
        self.close_count = 0

    def open(self, request: Any, timeout: float = 0) -> StubResponse:
        self.requests.append((request, timeout))
        if self._error is not None:
            raise self._error
        return StubResponse(self._body, self._read_error)

    def close(self) -> None:
        self.close_count += 1


class FakePhotoSource:
    """In-memory stand-in for the Picsum source.

    Set ``hold`` to make every fetch wait until ``release()`` is called.
    """

    def __init__(self, pages: dict[int, list[PhotoRecord]] | None = None) -> None:
        self.pages = dict(pages or {})
        self.errors: dict[int, Exception] = {}
        self.photos_by_id: dict[str, PhotoRecord] = {}
        self.calls: list[tuple[int, int]] = []
        self.close_count = 0
        self.hold = False
        self._gate: asyncio.Event | None = None

    def release(self) -> None:
        if self._gate is not None:
            self._gate.set()

    async def fetch_page(self, page: int, page_size: int = 30) -> list[PhotoRecord]:
        self.calls.append((page, page_size))
        if self.hold:
            if self._gate is None:
                self._gate = asyncio.Event()
            await self._gate.wait()
        if page in self.errors:
            raise self.errors[page]
        return list(self.pages.get(page, []))

    async def fetch_by_id(self, photo_id: str) -> PhotoRecord:
        try:
            return self.photos_by_id[photo_id]
        except KeyError as exc:
            raise PhotoSourceError(f"Photo {photo_id} not found") from exc

    def close(self) -> None:
        self.close_count += 1


@pytest.fixture
def fake_source() -> FakePhotoSource:
    return FakePhotoSource(
        pages={
            1: [make_photo("0"), make_photo("1")],
            2: [make_photo("2")],
        }
    )


@pytest.fixture
def uploads() -> UploadStore:
    return UploadStore(clock=lambda: 1700000000000)


@pytest.fixture
def app_settings(tmp_path: Path) -> AppSettings:
    return AppSettings(
        env=EnvSettings(photoshare_env="test", photoshare_log_level="DEBUG"),
        yaml=PhotoShareYamlSettings(),
        project_root=tmp_path,
        config_path=tmp_path / "photoshare.yaml",
    )
