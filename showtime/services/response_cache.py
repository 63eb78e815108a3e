# showtime/services/response_cache.py
# 검색 결과 캐시와 ETag 계산

import hashlib
import time
from typing import Callable, Optional

from cachetools import TTLCache

from showtime.schemas.search import SearchPage

SEARCH_TYPE_ALIASES = {
    "movie": "movie",
    "tv": "tv",
    "tvshow": "tv",
    "television": "tv",
    "person": "person",
    "multi": "multi",
}


def normalize_search_type(media_type: Optional[str]) -> str:
    """요청 type 파라미터 정규화. 빈 값, media, 알 수 없는 값은 multi"""
    if not media_type or not media_type.strip():
        return "multi"
    return SEARCH_TYPE_ALIASES.get(media_type.strip().lower(), "multi")


def build_search_cache_key(query: str, media_type: str, page: int, language: str, region: str) -> str:
    normalized = query.strip().lower()
    if media_type == "person":
        return f"tmdb:people:{normalized}:{language}"
    if not normalized:
        return f"tmdb:trending:{page}:{language}:{region}"
    return f"tmdb:search:{media_type}:{normalized}:{page}:{language}:{region}"


class SearchCache:
    """조립된 검색 페이지 캐시 (TTL 10분)"""

    def __init__(self, maxsize: int = 200, ttl: float = 600, timer: Callable[[], float] = time.monotonic):
        self._cache: TTLCache = TTLCache(maxsize=maxsize, ttl=ttl, timer=timer)

    def get(self, key: str) -> Optional[SearchPage]:
        page = self._cache.get(key)
        if page is None:
            return None
        return page.model_copy(update={"served_from_cache": True})

    def set(self, key: str, page: SearchPage) -> None:
        self._cache[key] = page.model_copy(update={"served_from_cache": False})


def _text(value) -> str:
    return "" if value is None else str(value)


def compute_search_etag(page: SearchPage) -> str:
    """페이지 내용 기반 강한 ETag. served_from_cache는 제외한다."""
    parts = [f"{page.page}|{page.total_pages}|{page.total_results}"]
    for item in page.results:
        parts.append(
            ";"
            + "|".join(
                _text(value)
                for value in (
                    item.id,
                    item.media_type,
                    item.title,
                    item.subtitle,
                    item.source,
                    item.release_date,
                    item.popularity,
                )
            )
        )

    digest = hashlib.sha256("".join(parts).encode("utf-8")).hexdigest()
    return f'"{digest}"'


def etag_matches(if_none_match: Optional[str], etag: str) -> bool:
    """If-None-Match 헤더가 etag와 일치하는지 확인 (*, 목록, W/ 지원)"""
    if not if_none_match or not if_none_match.strip():
        return False

    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate == "*":
            return True
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate == etag:
            return True
    return False
