# showtime/schemas/search.py

from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SearchItem(BaseModel):
    """검색 결과 항목 (불변)"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    id: int = Field(description="TMDB ID")
    media_type: str = Field(description="미디어 타입 (movie, tv, person)")
    title: str = Field(description="제목")
    subtitle: str = Field(description="부제 (타입 • 연도)")
    overview: Optional[str] = Field(default=None, description="줄거리")
    poster_url: Optional[str] = Field(default=None, description="포스터 URL")
    popularity: float = Field(default=0.0, description="인기도")
    source: Optional[str] = Field(default=None, description="주 시청 제공처")
    release_date: Optional[str] = Field(default=None, description="개봉일 (YYYY-MM-DD)")


class SearchPage(BaseModel):
    """내부 페이지 단위 검색 응답 (불변)"""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    results: Tuple[SearchItem, ...] = Field(default=(), description="검색 결과")
    page: int = Field(default=1, ge=1, description="페이지 번호")
    total_pages: int = Field(default=1, ge=1, description="전체 페이지 수")
    total_results: int = Field(default=0, ge=0, description="전체 결과 수")
    served_from_cache: bool = Field(default=False, description="캐시 응답 여부")

    @classmethod
    def empty(cls) -> "SearchPage":
        return cls(results=(), page=1, total_pages=1, total_results=0, served_from_cache=False)
