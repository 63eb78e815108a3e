# showtime/services/person_search.py

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from showtime.exceptions import ValidationError
from showtime.schemas.search import SearchItem, SearchPage
from showtime.schemas.tmdb import (
    TmdbImageConfiguration,
    TmdbMovieCreditRole,
    TmdbPersonMovieCredits,
    TmdbPersonResult,
)
from showtime.services.tmdb_mappings import (
    MAX_PAGE_ITEMS,
    build_subtitle,
    create_poster_url,
    first_non_empty,
    normalize_date,
)
from showtime.services.tmdb_service import TMDBService

logger = logging.getLogger(__name__)

MIN_PERSON_QUERY_LENGTH = 4
MAX_LISTED_CONTRIBUTORS = 3


class PersonMovieAggregation:
    """인물 검색 중 영화 id별로 참여자 정보를 모으는 임시 누적 객체"""

    def __init__(self, movie_id: int, title: str):
        self.id = movie_id
        self.title = title
        self.release_date: Optional[str] = None
        self.overview: Optional[str] = None
        self.poster_path: Optional[str] = None
        self.popularity: float = 0.0
        self._contributors: Dict[str, str] = {}

    @property
    def contributors(self) -> List[str]:
        return list(self._contributors.values())

    def update(
        self,
        release_date: Optional[str],
        overview: Optional[str],
        poster_path: Optional[str],
        popularity: float,
    ) -> None:
        if not self.release_date and release_date:
            self.release_date = release_date
        if not self.overview and overview and overview.strip():
            self.overview = overview
        if not self.poster_path and poster_path and poster_path.strip():
            self.poster_path = poster_path
        if popularity > self.popularity:
            self.popularity = popularity

    def add_contribution(self, person_name: str, role: Optional[str]) -> None:
        contribution = f"{person_name} ({role})" if role and role.strip() else person_name
        # 대소문자 무시 중복 제거, 먼저 들어온 표기를 유지
        self._contributors.setdefault(contribution.lower(), contribution)


def cast_role(entry: TmdbMovieCreditRole) -> str:
    return first_non_empty(entry.character) or "Cast"


def crew_role(entry: TmdbMovieCreditRole) -> str:
    return first_non_empty(entry.job, entry.department) or "Crew"


def format_contributors(contributors: List[str]) -> str:
    ordered = sorted(contributors, key=str.lower)
    text = ", ".join(ordered[:MAX_LISTED_CONTRIBUTORS])
    if len(ordered) > MAX_LISTED_CONTRIBUTORS:
        text += f" +{len(ordered) - MAX_LISTED_CONTRIBUTORS} more"
    return text


class PersonSearchAggregator:
    """인물 이름으로 검색해 참여 영화 목록을 만든다"""

    def __init__(
        self,
        tmdb_service: TMDBService,
        max_pages: int = 5,
        max_people: int = 10,
        provider_page_size: int = 20,
    ):
        self.tmdb_service = tmdb_service
        self.max_pages = max_pages
        self.max_people = max_people
        self.provider_page_size = provider_page_size

    @staticmethod
    def validate_query(query: str) -> str:
        query = (query or "").strip()
        if 0 < len(query) < MIN_PERSON_QUERY_LENGTH:
            raise ValidationError("인물 검색은 최소 4자 이상 입력해야 합니다")
        return query

    async def find_people(self, query: str) -> List[TmdbPersonResult]:
        """인물 검색 결과를 최대 max_pages 페이지, max_people 명까지 수집"""
        people: List[TmdbPersonResult] = []

        for page in range(1, self.max_pages + 1):
            response = await self.tmdb_service.search_people(query, page)
            for person in response.results:
                if person.id > 0:
                    people.append(person)
                if len(people) >= self.max_people:
                    return people

            if len(response.results) < self.provider_page_size or page >= response.total_pages:
                break

        return people

    async def _get_credits(self, person: TmdbPersonResult) -> Optional[TmdbPersonMovieCredits]:
        try:
            return await self.tmdb_service.get_person_movie_credits(person.id)
        except Exception as e:
            logger.warning(f"인물 출연작 조회 실패: {person.name} (ID: {person.id}) - {str(e)}")
            return None

    @staticmethod
    def merge_credits(
        people_credits: List[Tuple[TmdbPersonResult, Optional[TmdbPersonMovieCredits]]],
    ) -> Dict[int, PersonMovieAggregation]:
        movies: Dict[int, PersonMovieAggregation] = {}

        def process(entries: List[TmdbMovieCreditRole], person_name: str, is_cast: bool) -> None:
            for entry in entries:
                if entry.id <= 0:
                    continue

                title = first_non_empty(entry.title, entry.original_title)
                if not title:
                    continue

                aggregation = movies.get(entry.id)
                if aggregation is None:
                    aggregation = PersonMovieAggregation(entry.id, title)
                    movies[entry.id] = aggregation

                aggregation.update(
                    normalize_date(entry.release_date),
                    entry.overview,
                    entry.poster_path,
                    entry.popularity,
                )
                aggregation.add_contribution(
                    person_name, cast_role(entry) if is_cast else crew_role(entry)
                )

        for person, credits in people_credits:
            if credits is None:
                continue
            process(credits.cast, person.name, True)
            process(credits.crew, person.name, False)

        return movies

    @staticmethod
    def to_search_item(aggregation: PersonMovieAggregation, images: TmdbImageConfiguration) -> SearchItem:
        subtitle = build_subtitle("movie", aggregation.release_date)
        if aggregation.contributors:
            subtitle = f"{subtitle} • {format_contributors(aggregation.contributors)}"

        return SearchItem(
            id=aggregation.id,
            media_type="movie",
            title=aggregation.title,
            subtitle=subtitle,
            overview=aggregation.overview,
            poster_url=create_poster_url(images, aggregation.poster_path),
            popularity=aggregation.popularity,
            source=None,
            release_date=aggregation.release_date,
        )

    async def search(self, query: str, images: TmdbImageConfiguration) -> SearchPage:
        """인물 검색 -> 출연/참여작 병합 -> 인기도 순 정렬"""
        query = self.validate_query(query)
        if not query:
            return SearchPage.empty()

        people = await self.find_people(query)
        if not people:
            return SearchPage.empty()

        credits = await asyncio.gather(*(self._get_credits(person) for person in people))
        movies = self.merge_credits(list(zip(people, credits)))
        if not movies:
            return SearchPage.empty()

        ordered = sorted(movies.values(), key=lambda m: (-m.popularity, m.title.lower()))
        items = tuple(self.to_search_item(m, images) for m in ordered[:MAX_PAGE_ITEMS])

        return SearchPage(
            results=items,
            page=1,
            total_pages=1,
            total_results=len(items),
            served_from_cache=False,
        )
