# tests/test_source_enrichment.py

import asyncio

import httpx

from showtime.schemas.search import SearchItem, SearchPage
from showtime.schemas.tmdb import TmdbWatchProviders
from showtime.services.source_enrichment import SourceEnricher, select_primary_provider


def providers(data) -> TmdbWatchProviders:
    return TmdbWatchProviders.model_validate({"results": data})


def offer(name: str):
    return [{"provider_id": 1, "provider_name": name}]


def item(id: int, media_type: str = "movie", source=None) -> SearchItem:
    return SearchItem(id=id, media_type=media_type, title=f"Title {id}", subtitle="Movie", source=source)


def page_of(*items: SearchItem) -> SearchPage:
    return SearchPage(results=items, total_results=len(items))


class StubTmdb:
    """get_watch_providers만 흉내 내는 대역. 동시 실행 수를 기록한다"""

    def __init__(self, reply=None, delay: float = 0.01):
        self.reply = reply or (lambda tmdb_id, media_type: providers({"US": {"flatrate": offer(f"P{tmdb_id}")}}))
        self.delay = delay
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_watch_providers(self, tmdb_id, media_type):
        self.calls.append((media_type, tmdb_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            return self.reply(tmdb_id, media_type)
        finally:
            self.in_flight -= 1


def test_priority_country_wins_over_alphabetical():
    result = select_primary_provider(
        providers({"DE": {"flatrate": offer("Netflix")}, "US": {"rent": offer("Apple TV")}})
    )

    assert result == "Apple TV"


def test_offer_type_preference_within_country():
    result = select_primary_provider(
        providers({"US": {"buy": offer("Vudu"), "ads": offer("Tubi"), "rent": offer("Apple TV")}})
    )

    assert result == "Tubi"


def test_priority_order_between_countries():
    result = select_primary_provider(
        providers({"GB": {"flatrate": offer("BBC iPlayer")}, "CA": {"buy": offer("Crave")}})
    )

    assert result == "Crave"


def test_fallback_uses_any_country_in_code_order():
    result = select_primary_provider(
        providers({"JP": {"flatrate": offer("U-Next")}, "DE": {"buy": offer("Sky")}})
    )

    assert result == "Sky"


def test_no_offers_is_none():
    assert select_primary_provider(providers({"US": {"link": "https://tmdb"}})) is None
    assert select_primary_provider(None) is None


async def test_enrich_fills_sources_and_keeps_order():
    stub = StubTmdb()
    enricher = SourceEnricher(stub, cache={})

    result = await enricher.enrich(page_of(item(1), item(2, "tv"), item(3, "person")))

    assert [i.id for i in result.results] == [1, 2, 3]
    assert [i.source for i in result.results] == ["P1", "P2", None]
    assert ("person", 3) not in stub.calls


async def test_concurrency_is_bounded_to_three():
    stub = StubTmdb()
    enricher = SourceEnricher(stub, cache={}, concurrency=3)

    result = await enricher.enrich(page_of(*[item(i) for i in range(1, 61)]))

    assert len(stub.calls) == 60
    assert stub.max_in_flight <= 3
    assert stub.max_in_flight == 3
    assert all(i.source == f"P{i.id}" for i in result.results)


async def test_results_are_cached_including_no_provider():
    stub = StubTmdb(reply=lambda tmdb_id, media_type: providers({}) if tmdb_id == 2 else providers({"US": {"flatrate": offer("Netflix")}}))
    cache = {}
    enricher = SourceEnricher(stub, cache=cache)

    await enricher.enrich(page_of(item(1), item(2)))
    second = await enricher.enrich(page_of(item(1), item(2)))

    assert len(stub.calls) == 2
    assert cache == {"tmdb:source:movie:1": "Netflix", "tmdb:source:movie:2": ""}
    assert [i.source for i in second.results] == ["Netflix", None]


async def test_failures_are_swallowed_and_not_cached():
    def reply(tmdb_id, media_type):
        if tmdb_id == 2:
            raise RuntimeError("boom")
        return providers({"US": {"flatrate": offer("Netflix")}})

    cache = {}
    enricher = SourceEnricher(StubTmdb(reply=reply), cache=cache)

    result = await enricher.enrich(page_of(item(1), item(2), item(3)))

    assert [i.source for i in result.results] == ["Netflix", None, "Netflix"]
    assert "tmdb:source:movie:2" not in cache


async def test_provider_outage_leaves_every_source_empty(tmdb_service, fake_tmdb):
    for i in range(1, 6):
        fake_tmdb.add(f"movie/{i}/watch/providers", httpx.Response(503))
    enricher = SourceEnricher(tmdb_service, cache={})

    result = await enricher.enrich(page_of(*[item(i) for i in range(1, 6)]))

    assert all(i.source is None for i in result.results)
    assert len(result.results) == 5


async def test_input_page_is_not_mutated():
    original = page_of(item(1))
    enricher = SourceEnricher(StubTmdb(), cache={})

    result = await enricher.enrich(original)

    assert original.results[0].source is None
    assert result.results[0].source == "P1"
