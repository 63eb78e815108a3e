# showtime/services/__init__.py

from .tmdb_service import TMDBService
from .search_aggregator import PageAggregator
from .person_search import PersonSearchAggregator, PersonMovieAggregation
from .source_enrichment import SourceEnricher, select_primary_provider
from .response_cache import SearchCache, build_search_cache_key, compute_search_etag, etag_matches
from .search_service import SearchService
from .media_service import MediaService

__all__ = [
    "TMDBService",
    "PageAggregator",
    "PersonSearchAggregator",
    "PersonMovieAggregation",
    "SourceEnricher",
    "select_primary_provider",
    "SearchCache",
    "build_search_cache_key",
    "compute_search_etag",
    "etag_matches",
    "SearchService",
    "MediaService",
]
