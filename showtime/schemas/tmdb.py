# showtime/schemas/tmdb.py
# TMDB 응답 원본 스키마. null 값은 누락으로 취급한다.

from typing import Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, model_validator


class TmdbModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data):
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class TmdbSearchResult(TmdbModel):
    id: int = 0
    media_type: Optional[str] = None
    title: Optional[str] = None
    name: Optional[str] = None
    original_title: Optional[str] = None
    original_name: Optional[str] = None
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    profile_path: Optional[str] = None
    popularity: float = 0.0
    release_date: Optional[str] = None
    first_air_date: Optional[str] = None


class TmdbSearchResponse(TmdbModel):
    page: int = 1
    total_pages: int = 0
    total_results: int = 0
    results: List[TmdbSearchResult] = Field(default_factory=list)


class TmdbPersonResult(TmdbModel):
    id: int = 0
    name: str = ""
    popularity: float = 0.0


class TmdbPersonSearchResponse(TmdbModel):
    page: int = 1
    total_pages: int = 0
    total_results: int = 0
    results: List[TmdbPersonResult] = Field(default_factory=list)


class TmdbMovieCreditRole(TmdbModel):
    id: int = 0
    title: Optional[str] = None
    original_title: Optional[str] = None
    overview: Optional[str] = None
    release_date: Optional[str] = None
    poster_path: Optional[str] = None
    popularity: float = 0.0
    character: Optional[str] = None
    job: Optional[str] = None
    department: Optional[str] = None


class TmdbPersonMovieCredits(TmdbModel):
    cast: List[TmdbMovieCreditRole] = Field(default_factory=list)
    crew: List[TmdbMovieCreditRole] = Field(default_factory=list)


class TmdbImageConfiguration(TmdbModel):
    """이미지 URL 구성 정보 (프로세스 수명 동안 캐시)"""

    base_url: str = ""
    secure_base_url: str = ""
    poster_sizes: List[str] = Field(default_factory=list)


class TmdbConfiguration(TmdbModel):
    images: TmdbImageConfiguration = Field(default_factory=TmdbImageConfiguration)


class TmdbWatchProviderEntry(TmdbModel):
    provider_id: int = 0
    provider_name: str = ""


class TmdbWatchProviderCountry(TmdbModel):
    link: Optional[str] = None
    flatrate: List[TmdbWatchProviderEntry] = Field(default_factory=list)
    ads: List[TmdbWatchProviderEntry] = Field(default_factory=list)
    rent: List[TmdbWatchProviderEntry] = Field(default_factory=list)
    buy: List[TmdbWatchProviderEntry] = Field(default_factory=list)


class TmdbWatchProviders(TmdbModel):
    results: Dict[str, TmdbWatchProviderCountry] = Field(default_factory=dict)


class TmdbGenre(TmdbModel):
    id: int = 0
    name: str = ""


class TmdbCastMember(TmdbModel):
    id: int = 0
    name: str = ""
    character: Optional[str] = None
    order: int = 0


class TmdbCredits(TmdbModel):
    cast: List[TmdbCastMember] = Field(default_factory=list)


class TmdbSeasonInfo(TmdbModel):
    season_number: int = 0
    episode_count: int = 0
    air_date: Optional[str] = None


class TmdbEpisode(TmdbModel):
    id: int = 0
    name: str = ""
    overview: Optional[str] = None
    air_date: Optional[str] = None
    season_number: int = 0
    episode_number: int = 0
    still_path: Optional[str] = None


class TmdbSeasonDetails(TmdbModel):
    id: int = 0
    season_number: int = 0
    episodes: List[TmdbEpisode] = Field(default_factory=list)


class TmdbMovieDetails(TmdbModel):
    id: int = 0
    title: str = ""
    overview: Optional[str] = None
    release_date: Optional[str] = None
    poster_path: Optional[str] = None
    genres: List[TmdbGenre] = Field(default_factory=list)
    credits: TmdbCredits = Field(default_factory=TmdbCredits)
    watch_providers: TmdbWatchProviders = Field(
        default_factory=TmdbWatchProviders, alias="watch/providers"
    )


class TmdbTvDetails(TmdbModel):
    id: int = 0
    name: str = ""
    overview: Optional[str] = None
    first_air_date: Optional[str] = None
    poster_path: Optional[str] = None
    genres: List[TmdbGenre] = Field(default_factory=list)
    credits: TmdbCredits = Field(default_factory=TmdbCredits)
    aggregate_credits: Optional[TmdbCredits] = None
    seasons: List[TmdbSeasonInfo] = Field(default_factory=list)
    watch_providers: TmdbWatchProviders = Field(
        default_factory=TmdbWatchProviders, alias="watch/providers"
    )
