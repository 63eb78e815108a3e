# tests/test_search_service.py

import asyncio

import httpx
import pytest

from showtime.exceptions import ValidationError
from showtime.services.search_service import SearchService
from showtime.services.tmdb_service import TMDBService
from tests.factories import search_response, search_result


def providers_for(name: str):
    return {"id": 1, "results": {"US": {"flatrate": [{"provider_id": 8, "provider_name": name}]}}}


async def test_keyword_search_is_normalized_enriched_and_cached(search_service, fake_tmdb):
    fake_tmdb.add(
        "search/multi",
        search_response(
            [search_result(603, title="The Matrix"), search_result(6384, "person"), search_result(1399, "tv")],
            total_results=3,
        ),
    )
    fake_tmdb.add("movie/603/watch/providers", providers_for("Netflix"))

    first = await search_service.search("matrix", "media", 0)

    assert first.served_from_cache is False
    assert first.page == 1
    assert [(i.id, i.source) for i in first.results] == [(603, "Netflix"), (1399, None)]
    assert first.total_results == 2

    calls = len(fake_tmdb.calls)
    second = await search_service.search("MATRIX", None, 1)

    assert second.served_from_cache is True
    assert second.results == first.results
    assert len(fake_tmdb.calls) == calls


async def test_single_character_keyword_is_empty(search_service, fake_tmdb):
    page = await search_service.search("a", "movie", 1)

    assert page.results == ()
    assert page.total_pages == 1
    assert fake_tmdb.calls == []


async def test_empty_query_is_trending(search_service, fake_tmdb):
    fake_tmdb.add("trending/all/week", search_response([search_result(1), search_result(2, "person")]))

    page = await search_service.search("", None, 1)

    assert [i.id for i in page.results] == [1]
    assert "trending/all/week" in fake_tmdb.paths()


@pytest.mark.parametrize("query", ["k", "ke", "kea"])
async def test_short_person_query_is_rejected(search_service, fake_tmdb, query):
    with pytest.raises(ValidationError):
        await search_service.search(query, "person", 1)

    assert fake_tmdb.calls == []


async def test_person_search_ignores_page(search_service, fake_tmdb):
    fake_tmdb.add("search/person", {"page": 1, "total_pages": 1, "results": [{"id": 6384, "name": "Keanu Reeves"}]})
    fake_tmdb.add("person/6384/movie_credits", {"cast": [{"id": 603, "title": "The Matrix", "character": "Neo"}]})

    page = await search_service.search("keanu", "person", 4)

    assert page.page == 1
    assert page.results[0].subtitle == "Movie • Keanu Reeves (Neo)"
    assert search_service.search_cache.get("tmdb:people:keanu:en-US") is not None


def slow_tmdb(settings, fake_tmdb, slow_path: str, started: asyncio.Event, calls=None) -> TMDBService:
    """slow_path를 포함한 요청만 지연시키는 TMDB 대역"""

    async def handler(request: httpx.Request):
        if slow_path in request.url.path:
            if calls is not None:
                calls.append(request.url.path)
            started.set()
            await asyncio.sleep(0.05)
        return fake_tmdb.handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TMDBService(settings, http_client=client)


async def test_cancelled_search_does_not_affect_other_requests(settings, fake_tmdb):
    fake_tmdb.add("search/multi", search_response([search_result(i) for i in range(1, 6)]))
    fake_tmdb.add("search/movie", search_response([search_result(10), search_result(11)]))
    for i in (1, 2, 3, 4, 5, 10, 11):
        fake_tmdb.add(f"movie/{i}/watch/providers", providers_for("Netflix"))

    started = asyncio.Event()
    service = SearchService(slow_tmdb(settings, fake_tmdb, "/watch/providers", started), settings)

    cancelled = asyncio.create_task(service.search("matrix", None, 1))
    other = asyncio.create_task(service.search("other", "movie", 1))
    await started.wait()
    cancelled.cancel()

    with pytest.raises(asyncio.CancelledError):
        await cancelled

    result = await other
    assert [i.source for i in result.results] == ["Netflix", "Netflix"]
    assert service.search_cache.get(service.cache_key("matrix", "multi", 1)) is None

    again = await service.search("matrix", None, 1)
    assert again.served_from_cache is False
    assert [i.source for i in again.results] == ["Netflix"] * 5


async def test_cancelled_image_configuration_fetch_releases_waiters(settings, fake_tmdb):
    started = asyncio.Event()
    calls = []
    tmdb_service = slow_tmdb(settings, fake_tmdb, "/configuration", started, calls)

    first = asyncio.create_task(tmdb_service.get_image_configuration())
    await started.wait()
    waiting = asyncio.create_task(tmdb_service.get_image_configuration())
    await asyncio.sleep(0)
    first.cancel()

    with pytest.raises(asyncio.CancelledError):
        await first

    images = await waiting
    assert images.secure_base_url == "https://image.tmdb.org/t/p/"
    assert len(calls) == 2
