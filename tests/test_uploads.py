"""Tests for the in-memory upload store."""

from __future__ import annotations

import random

import pytest

from photoshare.uploads import UploadStore


def test_starts_empty() -> None:
    store = UploadStore()
    assert store.current() == ()
    assert len(store) == 0


def test_submit_by_url_appends_user_photo() -> None:
    store = UploadStore(clock=lambda: 1234)
    photo = store.submit_by_url("https://example.com/a.jpg")

    assert photo is not None
    assert photo.id == "user_1234"
    assert photo.author == "You"
    assert photo.url == "https://example.com/a.jpg"
    assert photo.download_url == "https://example.com/a.jpg"
    assert store.current() == (photo,)


@pytest.mark.parametrize("url", ["", "   ", "\t\n"])
def test_submit_by_blank_url_is_noop(url: str) -> None:
    store = UploadStore()
    assert store.submit_by_url(url) is None
    assert store.current() == ()


def test_submit_random_builds_resized_download_url() -> None:
    store = UploadStore(rng=random.Random(7))
    photo = store.submit_random()

    random_id = int(photo.id.removeprefix("random_"))
    assert 1000 <= random_id <= 2000
    assert photo.author == "You"
    assert photo.url == ""
    assert photo.download_url == f"https://picsum.photos/id/{random_id}/600/600"


def test_random_id_range_is_inclusive() -> None:
    store = UploadStore(rng=random.Random(0))
    ids = {int(store.submit_random().id.removeprefix("random_")) for _ in range(2000)}
    assert min(ids) >= 1000
    assert max(ids) <= 2000


def test_random_goes_first_and_url_goes_last() -> None:
    ticks = iter([1, 2, 3])
    store = UploadStore(clock=lambda: next(ticks))

    first_random = store.submit_random()
    by_url = store.submit_by_url("https://example.com/b.jpg")
    second_random = store.submit_random()

    assert store.current() == (second_random, first_random, by_url)


def test_current_returns_a_copy() -> None:
    store = UploadStore()
    snapshot = store.current()
    store.submit_random()
    assert snapshot == ()
    assert len(store.current()) == 1


def test_base_url_trailing_slash_is_stripped() -> None:
    store = UploadStore(base_url="http://localhost:8080/", rng=random.Random(1))
    photo = store.submit_random()
    assert photo.download_url.startswith("http://localhost:8080/id/")
