# showtime/services/search_aggregator.py

import logging
import math
from typing import List, Optional

from showtime.schemas.tmdb import TmdbSearchResponse, TmdbSearchResult
from showtime.services.tmdb_service import MAX_PROVIDER_PAGE, TMDBService

logger = logging.getLogger(__name__)


class PageAggregator:
    """TMDB 페이지(20개)를 모아 내부 페이지(200개) 하나를 만든다.

    내부 페이지 p는 TMDB 페이지 (p - 1) * pages_per_batch + 1 부터 순서대로 요청하며
    TMDB 페이지가 끝나거나 내부 페이지가 채워지면 중단한다.
    전체 결과/페이지 수는 첫 응답 기준으로 계산한다.
    """

    def __init__(self, tmdb_service: TMDBService, page_size: int = 200, provider_page_size: int = 20):
        self.tmdb_service = tmdb_service
        self.page_size = page_size
        self.pages_per_batch = max(1, page_size // max(1, provider_page_size))

    def provider_start_page(self, page: int) -> int:
        return (max(page, 1) - 1) * self.pages_per_batch + 1

    async def _fetch_provider_page(self, query: str, media_type: str, provider_page: int) -> TmdbSearchResponse:
        if not query:
            return await self.tmdb_service.get_trending(provider_page)
        return await self.tmdb_service.search(query, media_type, provider_page)

    async def fetch(self, query: str, media_type: str = "multi", page: int = 1) -> TmdbSearchResponse:
        """내부 페이지 하나에 해당하는 TMDB 결과를 모아서 반환 (빈 query는 트렌딩)"""
        query = (query or "").strip()
        page = max(page, 1)
        start_page = self.provider_start_page(page)

        results: List[TmdbSearchResult] = []
        first: Optional[TmdbSearchResponse] = None
        fetched = 0

        for provider_page in range(start_page, start_page + self.pages_per_batch):
            if provider_page > MAX_PROVIDER_PAGE:
                break
            if first is not None and provider_page > first.total_pages:
                break

            response = await self._fetch_provider_page(query, media_type, provider_page)
            fetched += 1
            if first is None:
                first = response

            results.extend(response.results)

            if len(results) >= self.page_size:
                break
            if not response.results or provider_page >= response.total_pages:
                break

        if fetched == 0 or first is None:
            return TmdbSearchResponse(page=1, total_pages=1, total_results=0, results=[])

        if first.total_results > 0:
            total_pages = math.ceil(first.total_results / self.page_size)
        else:
            total_pages = math.ceil(first.total_pages / self.pages_per_batch)

        logger.debug(
            f"TMDB 페이지 집계 완료 (query='{query}', page={page}, "
            f"provider_pages={fetched}, results={len(results)})"
        )

        return TmdbSearchResponse(
            page=page,
            total_pages=max(total_pages, 1),
            total_results=first.total_results,
            results=results[: self.page_size],
        )
