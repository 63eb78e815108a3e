# showtime/services/tmdb_mappings.py
# TMDB 원본 검색 결과 -> SearchItem / SearchPage 변환 (순수 함수)

from datetime import date, datetime
from typing import List, Optional

from showtime.schemas.search import SearchItem, SearchPage
from showtime.schemas.tmdb import TmdbImageConfiguration, TmdbSearchResponse, TmdbSearchResult

DEFAULT_POSTER_SIZE = "w342"
MAX_PAGE_ITEMS = 200

MEDIA_LABELS = {"movie": "Movie", "tv": "TV", "person": "Person"}

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S")


def first_non_empty(*values: Optional[str]) -> str:
    for value in values:
        if value and value.strip():
            return value
    return ""


def normalize_media_type(media_type: Optional[str]) -> Optional[str]:
    if not media_type or not media_type.strip():
        return None
    return media_type.strip().lower()


def parse_date(value: Optional[str]) -> Optional[date]:
    if not value or not value.strip():
        return None

    text = value.strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass

    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def normalize_date(value: Optional[str]) -> Optional[str]:
    """날짜 문자열을 YYYY-MM-DD로 정규화. 파싱 불가 시 None"""
    parsed = parse_date(value)
    return parsed.isoformat() if parsed else None


def extract_year(value: Optional[str]) -> Optional[int]:
    parsed = parse_date(value)
    return parsed.year if parsed else None


def select_poster_size(images: TmdbImageConfiguration) -> str:
    if images.poster_sizes:
        if DEFAULT_POSTER_SIZE in images.poster_sizes:
            return DEFAULT_POSTER_SIZE
        return images.poster_sizes[-1]
    return DEFAULT_POSTER_SIZE


def build_poster_url(base_url: Optional[str], size: str, path: Optional[str]) -> Optional[str]:
    if not base_url or not base_url.strip() or not path or not path.strip():
        return None

    base = base_url.strip().rstrip("/")
    size = size.strip("/")
    path = path.strip().lstrip("/")
    return f"{base}/{size}/{path}"


def create_poster_url(images: TmdbImageConfiguration, path: Optional[str]) -> Optional[str]:
    base_url = images.secure_base_url or images.base_url
    return build_poster_url(base_url, select_poster_size(images), path)


def media_label(media_type: str) -> str:
    return MEDIA_LABELS.get(media_type, media_type.upper())


def build_subtitle(media_type: str, release_date: Optional[str]) -> str:
    if media_type == "person":
        return "Person"

    label = media_label(media_type)
    year = extract_year(release_date)
    return f"{label} • {year}" if year is not None else label


def resolve_title(result: TmdbSearchResult, media_type: str) -> str:
    if media_type == "tv":
        return first_non_empty(result.name, result.title) or "Untitled"
    if media_type == "person":
        return first_non_empty(result.name, result.title) or "Unknown"
    return first_non_empty(result.title, result.name) or "Untitled"


def resolve_release_date(result: TmdbSearchResult, media_type: str) -> Optional[str]:
    if media_type == "person":
        return None
    if media_type == "tv":
        return normalize_date(result.first_air_date or result.release_date)
    return normalize_date(result.release_date)


def to_search_item(result: TmdbSearchResult, images: TmdbImageConfiguration) -> Optional[SearchItem]:
    """TMDB 검색 결과 1건 변환. id나 타입이 유효하지 않으면 None"""
    media_type = normalize_media_type(result.media_type)
    if result.id <= 0 or media_type is None:
        return None

    release_date = resolve_release_date(result, media_type)
    poster_path = result.profile_path if media_type == "person" else result.poster_path

    return SearchItem(
        id=result.id,
        media_type=media_type,
        title=resolve_title(result, media_type),
        subtitle=build_subtitle(media_type, release_date),
        overview=result.overview,
        poster_url=create_poster_url(images, poster_path),
        popularity=result.popularity,
        source=None,
        release_date=release_date,
    )


def to_search_page(
    response: TmdbSearchResponse,
    images: TmdbImageConfiguration,
    include_people: bool = False,
    served_from_cache: bool = False,
) -> SearchPage:
    """TMDB 검색 응답을 내부 SearchPage로 변환"""
    items: List[SearchItem] = []
    removed = 0
    for result in response.results:
        item = to_search_item(result, images)
        if item is None:
            continue
        if not include_people and item.media_type == "person":
            removed += 1
            continue
        items.append(item)

    total_results = max(0, response.total_results - removed)
    if total_results < len(items):
        total_results = len(items)

    return SearchPage(
        results=tuple(items[:MAX_PAGE_ITEMS]),
        page=max(response.page, 1),
        total_pages=max(response.total_pages, 1),
        total_results=total_results,
        served_from_cache=served_from_cache,
    )
