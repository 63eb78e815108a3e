# showtime/schemas/__init__.py

from .search import SearchItem, SearchPage
from .media import (
    MediaType,
    WatchState,
    MediaDetail,
    MediaSummary,
    Episode,
    ImportMediaRequest,
)
from .tmdb import (
    TmdbImageConfiguration,
    TmdbSearchResponse,
    TmdbSearchResult,
    TmdbPersonResult,
    TmdbPersonSearchResponse,
    TmdbPersonMovieCredits,
    TmdbMovieCreditRole,
    TmdbWatchProviders,
    TmdbMovieDetails,
    TmdbTvDetails,
    TmdbSeasonDetails,
)

__all__ = [
    "SearchItem",
    "SearchPage",
    "MediaType",
    "WatchState",
    "MediaDetail",
    "MediaSummary",
    "Episode",
    "ImportMediaRequest",
    "TmdbImageConfiguration",
    "TmdbSearchResponse",
    "TmdbSearchResult",
    "TmdbPersonResult",
    "TmdbPersonSearchResponse",
    "TmdbPersonMovieCredits",
    "TmdbMovieCreditRole",
    "TmdbWatchProviders",
    "TmdbMovieDetails",
    "TmdbTvDetails",
    "TmdbSeasonDetails",
]
