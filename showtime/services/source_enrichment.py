# showtime/services/source_enrichment.py

import asyncio
import logging
from typing import Iterable, MutableMapping, Optional, Sequence

from showtime.exceptions import EnrichmentFailure
from showtime.schemas.search import SearchItem, SearchPage
from showtime.schemas.tmdb import TmdbWatchProviderCountry, TmdbWatchProviders
from showtime.services.tmdb_service import DETAIL_TYPES, TMDBService

logger = logging.getLogger(__name__)

PRIORITY_COUNTRIES = ("US", "CA", "GB", "AU")
OFFER_TYPES = ("flatrate", "ads", "rent", "buy")

# 조회 결과 "제공처 없음"은 빈 문자열로 캐시한다
NO_PROVIDER = ""


def build_source_cache_key(media_type: str, tmdb_id: int) -> str:
    return f"tmdb:source:{media_type}:{tmdb_id}"


def _first_offer(country: Optional[TmdbWatchProviderCountry]) -> Optional[str]:
    if country is None:
        return None

    for offer_type in OFFER_TYPES:
        for entry in getattr(country, offer_type):
            if entry.provider_name and entry.provider_name.strip():
                return entry.provider_name
    return None


def select_primary_provider(
    providers: Optional[TmdbWatchProviders],
    countries: Iterable[str] = PRIORITY_COUNTRIES,
) -> Optional[str]:
    """우선 국가 순서로 대표 시청 제공처를 고른다. 없으면 나머지 국가(코드순)에서 찾는다."""
    if providers is None or not providers.results:
        return None

    for code in countries:
        name = _first_offer(providers.results.get(code))
        if name:
            return name

    for code in sorted(providers.results):
        name = _first_offer(providers.results[code])
        if name:
            return name
    return None


class SourceEnricher:
    """검색 결과 항목마다 대표 시청 제공처(source)를 채운다.

    동시 조회 수는 페이지 단위 세마포어로 제한하며, 항목별 실패는 로그만 남기고 무시한다.
    """

    def __init__(
        self,
        tmdb_service: TMDBService,
        cache: MutableMapping[str, str],
        concurrency: int = 3,
        countries: Sequence[str] = PRIORITY_COUNTRIES,
    ):
        self.tmdb_service = tmdb_service
        self.cache = cache
        self.concurrency = max(1, concurrency)
        self.countries = tuple(countries)

    async def lookup_source(self, item: SearchItem) -> Optional[str]:
        """TMDB에서 제공처 조회 후 캐시에 저장. 실패는 EnrichmentFailure로 감싼다."""
        try:
            providers = await self.tmdb_service.get_watch_providers(item.id, item.media_type)
        except Exception as e:
            raise EnrichmentFailure(item.media_type, item.id, str(e)) from e

        source = select_primary_provider(providers, self.countries)
        self.cache[build_source_cache_key(item.media_type, item.id)] = source or NO_PROVIDER
        return source

    async def _enrich_item(self, item: SearchItem, semaphore: asyncio.Semaphore) -> SearchItem:
        if item.media_type not in DETAIL_TYPES:
            return item if item.source is None else item.model_copy(update={"source": None})

        cached = self.cache.get(build_source_cache_key(item.media_type, item.id))
        if cached is not None:
            return item.model_copy(update={"source": cached or None})

        async with semaphore:
            try:
                source = await self.lookup_source(item)
            except EnrichmentFailure as e:
                logger.warning(e.detail)
                return item.model_copy(update={"source": None})

        return item.model_copy(update={"source": source})

    async def enrich(self, page: SearchPage) -> SearchPage:
        """페이지 전체 항목의 source를 채운 새 페이지를 반환 (순서 유지)"""
        if not page.results:
            return page

        semaphore = asyncio.Semaphore(self.concurrency)
        items = await asyncio.gather(*(self._enrich_item(item, semaphore) for item in page.results))
        return page.model_copy(update={"results": tuple(items)})
