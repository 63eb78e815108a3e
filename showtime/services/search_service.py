# showtime/services/search_service.py

import logging
import time
from typing import MutableMapping, Optional

from cachetools import TTLCache

from showtime.core.config import Settings, get_settings
from showtime.schemas.search import SearchPage
from showtime.services.person_search import PersonSearchAggregator
from showtime.services.response_cache import SearchCache, build_search_cache_key, normalize_search_type
from showtime.services.search_aggregator import PageAggregator
from showtime.services.source_enrichment import SourceEnricher
from showtime.services.tmdb_mappings import to_search_page
from showtime.services.tmdb_service import TMDBService

logger = logging.getLogger(__name__)


class SearchService:
    """검색 요청 처리: 캐시 확인 -> 집계 -> 정규화 -> 제공처 보강 -> 캐시 저장"""

    def __init__(
        self,
        tmdb_service: TMDBService,
        settings: Optional[Settings] = None,
        search_cache: Optional[SearchCache] = None,
        source_cache: Optional[MutableMapping[str, str]] = None,
    ):
        self.settings = settings or get_settings()
        self.tmdb_service = tmdb_service
        self.search_cache = search_cache or SearchCache(
            maxsize=self.settings.search_cache_size, ttl=self.settings.search_cache_ttl
        )
        self.source_cache = (
            source_cache
            if source_cache is not None
            else TTLCache(maxsize=self.settings.source_cache_size, ttl=self.settings.source_cache_ttl)
        )
        self.page_aggregator = PageAggregator(
            tmdb_service,
            page_size=self.settings.search_page_size,
            provider_page_size=self.settings.tmdb_page_size,
        )
        self.person_aggregator = PersonSearchAggregator(
            tmdb_service,
            max_pages=self.settings.person_search_max_pages,
            max_people=self.settings.person_search_max_people,
            provider_page_size=self.settings.tmdb_page_size,
        )
        self.enricher = SourceEnricher(
            tmdb_service,
            self.source_cache,
            concurrency=self.settings.enrichment_concurrency,
            countries=self.settings.watch_provider_countries,
        )

    def cache_key(self, query: str, media_type: str, page: int) -> str:
        return build_search_cache_key(
            query,
            media_type,
            page,
            self.tmdb_service.default_language,
            self.tmdb_service.default_region,
        )

    async def search(self, query: Optional[str], media_type: Optional[str] = None, page: int = 1) -> SearchPage:
        """검색 (빈 query는 트렌딩, person은 인물 참여작 검색)"""
        query = (query or "").strip()
        media_type = normalize_search_type(media_type)

        if media_type == "person":
            query = self.person_aggregator.validate_query(query)
            if not query:
                return SearchPage.empty()
            page = 1
        elif len(query) == 1:
            return SearchPage.empty()
        else:
            page = page if page and page > 0 else 1

        key = self.cache_key(query, media_type, page)
        cached = self.search_cache.get(key)
        if cached is not None:
            logger.debug(f"검색 캐시 HIT: {key}")
            return cached

        started = time.perf_counter()
        images = await self.tmdb_service.get_image_configuration()

        if media_type == "person":
            result = await self.person_aggregator.search(query, images)
        else:
            response = await self.page_aggregator.fetch(query, media_type, page)
            result = to_search_page(response, images)

        result = await self.enricher.enrich(result)
        self.search_cache.set(key, result)

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"검색 캐시 MISS: {key} ({len(result.results)}건, {elapsed_ms:.0f}ms)"
        )
        return result.model_copy(update={"served_from_cache": False})
