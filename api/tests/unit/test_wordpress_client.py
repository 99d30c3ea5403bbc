"""
Tests unitarios para el cliente del feed de WordPress.

Se usa httpx.MockTransport: no hay red.
"""
from __future__ import annotations

from typing import Callable

import httpx
import pytest

from horrorsite.infrastructure.external.wordpress.types import WordPressRecord
from horrorsite.infrastructure.external.wordpress.wordpress_client import WordPressClient
from horrorsite.shared.exceptions.sync import FetchError

BASE_URL = "https://wp.test/wp/v2/sites/horror.example"


class _SleepRecorder:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def _client(handler: Callable[[httpx.Request], httpx.Response], *, max_retries: int = 3, sleep=None) -> WordPressClient:
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return WordPressClient(
        BASE_URL,
        http_client=http_client,
        max_retries=max_retries,
        min_backoff_s=0.8,
        max_backoff_s=20.0,
        sleep=sleep or _SleepRecorder(),
    )


async def test_fetch_posts_page_sends_pagination_and_fields() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1, "slug": "a"}])

    client = _client(handler)
    posts = await client.fetch_posts_page(2, 20)

    assert posts == [{"id": 1, "slug": "a"}]
    params = seen[0].url.params
    assert seen[0].url.path.endswith("/posts")
    assert params["page"] == "2"
    assert params["per_page"] == "20"
    assert params["_fields"] == "id,date,title,content,excerpt,slug,categories"


async def test_page_out_of_range_400_ends_feed() -> None:
    client = _client(lambda request: httpx.Response(400, json={"code": "rest_post_invalid_page_number"}))
    assert await client.fetch_posts_page(99, 20) == []


async def test_retries_5xx_then_succeeds_with_backoff() -> None:
    responses = iter([httpx.Response(503), httpx.Response(200, json=[])])
    sleep = _SleepRecorder()
    client = _client(lambda request: next(responses), sleep=sleep)

    assert await client.fetch_posts_page(1, 20) == []
    assert sleep.calls == [pytest.approx(0.8 * 1.15)]


async def test_429_honours_retry_after() -> None:
    responses = iter([httpx.Response(429, headers={"Retry-After": "2"}), httpx.Response(200, json=[])])
    sleep = _SleepRecorder()
    client = _client(lambda request: next(responses), sleep=sleep)

    await client.fetch_posts_page(1, 20)
    assert sleep.calls == [2.0]


async def test_persistent_5xx_raises_fetch_error_after_bounded_retries() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(500, text="down")

    client = _client(handler, max_retries=2)
    with pytest.raises(FetchError) as exc_info:
        await client.fetch_posts_page(1, 20)

    assert calls["n"] == 3
    assert exc_info.value.http_status == 500
    assert exc_info.value.error_code == "FEED_FETCH_ERROR"


async def test_zero_retries_fails_fast() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(502)

    client = _client(handler, max_retries=0)
    with pytest.raises(FetchError):
        await client.fetch_posts_page(1, 20)
    assert calls["n"] == 1


async def test_non_retryable_4xx_fails_immediately() -> None:
    calls = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["n"] += 1
        return httpx.Response(404, text="not found")

    client = _client(handler)
    with pytest.raises(FetchError) as exc_info:
        await client.fetch_post(7)

    assert calls["n"] == 1
    assert exc_info.value.http_status == 404


async def test_transport_error_is_wrapped_in_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler, max_retries=1)
    with pytest.raises(FetchError):
        await client.fetch_posts_page(1, 20)


async def test_non_list_page_payload_is_a_fetch_error() -> None:
    client = _client(lambda request: httpx.Response(200, json={"unexpected": True}))
    with pytest.raises(FetchError):
        await client.fetch_posts_page(1, 20)


async def test_fetch_categories_page() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/categories")
        assert request.url.params["per_page"] == "100"
        return httpx.Response(200, json=[{"id": 3, "name": "Ghosts"}, {"id": 4, "name": "Cults"}])

    client = _client(handler)
    categories = await client.fetch_categories_page(1, 100)

    assert [(c.id, c.name) for c in categories] == [(3, "Ghosts"), (4, "Cults")]


async def test_fetch_single_post() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.endswith("/posts/42")
        return httpx.Response(200, json={"id": 42, "slug": "the-well"})

    client = _client(handler)
    assert (await client.fetch_post(42))["slug"] == "the-well"


# ---------------------------------------------------------------------------
# Parseo de registros
# ---------------------------------------------------------------------------

def test_record_from_api_unwraps_rendered_fields() -> None:
    record = WordPressRecord.from_api({
        "id": 10,
        "date": "2024-03-01T10:00:00",
        "title": {"rendered": "The Well"},
        "content": {"rendered": "<p>Deep</p>"},
        "excerpt": {"rendered": "<p>Hook</p>"},
        "slug": "the-well",
        "categories": [3, "4", "x"],
    })

    assert record.wordpress_id == 10
    assert record.title_markup == "The Well"
    assert record.content_markup == "<p>Deep</p>"
    assert record.slug == "the-well"
    assert record.category_ids == (3, 4)
    assert record.published_at is not None and record.published_at.tzinfo is not None


def test_record_slug_falls_back_to_wordpress_id() -> None:
    record = WordPressRecord.from_api({"id": 77, "slug": ""})
    assert record.slug == "wordpress-77"


def test_record_without_id_is_rejected() -> None:
    with pytest.raises(ValueError):
        WordPressRecord.from_api({"slug": "no-id"})
