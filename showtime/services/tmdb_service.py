# showtime/services/tmdb_service.py

import asyncio
import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from showtime.core.config import Settings, get_settings
from showtime.exceptions import ConfigurationError, ProviderUnavailable, TransientProviderError
from showtime.schemas.tmdb import (
    TmdbConfiguration,
    TmdbImageConfiguration,
    TmdbMovieDetails,
    TmdbPersonMovieCredits,
    TmdbPersonSearchResponse,
    TmdbSearchResponse,
    TmdbSeasonDetails,
    TmdbTvDetails,
    TmdbWatchProviders,
)

logger = logging.getLogger(__name__)

# TMDB는 500 페이지를 넘는 요청을 거부한다
MAX_PROVIDER_PAGE = 500

SEARCH_TYPES = ("multi", "movie", "tv")
DETAIL_TYPES = ("movie", "tv")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _clamp_page(page: int) -> int:
    return min(max(page, 1), MAX_PROVIDER_PAGE)


class TMDBService:
    """TMDB API 클라이언트.

    프로세스 단위로 한 번 생성하고 종료 시 aclose()로 정리한다.
    재시도(429, 5xx, 네트워크 오류)는 _get에서만 수행한다.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or get_settings()
        self.timeout = httpx.Timeout(self.settings.tmdb_timeout)
        self.default_language = self.settings.tmdb_language
        self.default_region = self.settings.tmdb_region
        self._client = http_client or httpx.AsyncClient(timeout=self.timeout)
        self._owns_client = http_client is None
        self._image_configuration: Optional[TmdbImageConfiguration] = None
        self._image_configuration_lock = asyncio.Lock()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _build_params(self, params: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if not self.settings.tmdb_configured:
            raise ConfigurationError()

        query: Dict[str, Any] = {"language": self.default_language}
        query.update(params or {})
        if self.settings.tmdb_api_key:
            query["api_key"] = self.settings.tmdb_api_key
        return query

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            retry=retry_if_exception_type(TransientProviderError),
            stop=stop_after_attempt(self.settings.tmdb_max_retries + 1),
            wait=wait_exponential(multiplier=self.settings.tmdb_retry_base_delay, exp_base=2)
            + wait_random(0, self.settings.tmdb_retry_jitter),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    async def _send(self, url: str, params: Dict[str, Any]) -> httpx.Response:
        try:
            response = await self._client.get(
                url,
                params=params,
                headers=self.settings.tmdb_headers,
            )
        except httpx.TransportError as e:
            raise TransientProviderError(f"TMDB 요청 실패: {str(e)}") from e

        if response.status_code == 429 or response.status_code >= 500:
            raise TransientProviderError(f"TMDB API 오류: {response.status_code}")
        return response

    async def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> Optional[dict]:
        url = f"{self.settings.tmdb_base_url.rstrip('/')}/{path}"
        query = self._build_params(params)

        async for attempt in self._retrying():
            with attempt:
                response = await self._send(url, query)

        if response.status_code == 404 and allow_not_found:
            logger.debug(f"TMDB 리소스 없음: {path}")
            return None

        if response.is_error:
            raise ProviderUnavailable(f"TMDB API 오류: {response.status_code} ({path})")

        try:
            return response.json()
        except ValueError as e:
            raise ProviderUnavailable(f"TMDB 응답 파싱 실패 ({path})") from e

    @staticmethod
    def _parse(model: Type[ModelT], data: Any, path: str) -> ModelT:
        try:
            return model.model_validate(data)
        except PydanticValidationError as e:
            raise ProviderUnavailable(f"TMDB 응답 형식 오류 ({path})") from e

    async def search(self, query: str, media_type: str = "multi", page: int = 1) -> TmdbSearchResponse:
        """TMDB 키워드 검색 (multi, movie, tv)"""
        query = (query or "").strip()
        if not query:
            return TmdbSearchResponse()

        if media_type not in SEARCH_TYPES:
            media_type = "multi"

        path = f"search/{media_type}"
        data = await self._get(
            path,
            {
                "query": query,
                "page": _clamp_page(page),
                "include_adult": "false",
                "region": self.default_region,
            },
        )
        response = self._parse(TmdbSearchResponse, data, path)

        # 타입 지정 검색 결과에는 media_type이 없다
        if media_type != "multi":
            response = response.model_copy(
                update={
                    "results": [
                        result if result.media_type else result.model_copy(update={"media_type": media_type})
                        for result in response.results
                    ]
                }
            )
        return response

    async def get_trending(self, page: int = 1) -> TmdbSearchResponse:
        """주간 트렌딩 조회"""
        path = "trending/all/week"
        data = await self._get(path, {"page": _clamp_page(page), "region": self.default_region})
        return self._parse(TmdbSearchResponse, data, path)

    async def search_people(self, query: str, page: int = 1) -> TmdbPersonSearchResponse:
        """TMDB에서 인물 검색"""
        query = (query or "").strip()
        if not query:
            return TmdbPersonSearchResponse()

        path = "search/person"
        data = await self._get(
            path,
            {"query": query, "page": _clamp_page(page), "include_adult": "false"},
        )
        return self._parse(TmdbPersonSearchResponse, data, path)

    async def get_person_movie_credits(self, person_id: int) -> Optional[TmdbPersonMovieCredits]:
        """TMDB에서 인물의 영화 출연/참여작 조회"""
        if person_id <= 0:
            return None

        path = f"person/{person_id}/movie_credits"
        data = await self._get(path, allow_not_found=True)
        if data is None:
            return None
        return self._parse(TmdbPersonMovieCredits, data, path)

    async def get_movie_details(self, movie_id: int) -> Optional[TmdbMovieDetails]:
        """영화 상세 정보 (출연진, 시청 제공처 포함)"""
        if movie_id <= 0:
            return None

        path = f"movie/{movie_id}"
        data = await self._get(
            path,
            {"append_to_response": "credits,watch/providers"},
            allow_not_found=True,
        )
        if data is None:
            return None
        return self._parse(TmdbMovieDetails, data, path)

    async def get_tv_details(self, tv_id: int) -> Optional[TmdbTvDetails]:
        """TV 상세 정보 (출연진, 시즌, 시청 제공처 포함)"""
        if tv_id <= 0:
            return None

        path = f"tv/{tv_id}"
        data = await self._get(
            path,
            {"append_to_response": "credits,aggregate_credits,watch/providers"},
            allow_not_found=True,
        )
        if data is None:
            return None
        return self._parse(TmdbTvDetails, data, path)

    async def get_tv_season(self, tv_id: int, season_number: int) -> Optional[TmdbSeasonDetails]:
        """시즌 상세 정보 (에피소드 목록)"""
        if tv_id <= 0 or season_number < 0:
            return None

        path = f"tv/{tv_id}/season/{season_number}"
        data = await self._get(path, allow_not_found=True)
        if data is None:
            return None
        return self._parse(TmdbSeasonDetails, data, path)

    async def get_watch_providers(self, tmdb_id: int, media_type: str) -> Optional[TmdbWatchProviders]:
        """국가별 시청 제공처 조회"""
        if tmdb_id <= 0 or media_type not in DETAIL_TYPES:
            return None

        path = f"{media_type}/{tmdb_id}/watch/providers"
        data = await self._get(path, allow_not_found=True)
        if data is None:
            return None
        return self._parse(TmdbWatchProviders, data, path)

    async def get_image_configuration(self) -> TmdbImageConfiguration:
        """이미지 구성 정보 조회. 최초 1회만 요청하고 동시 호출은 같은 요청을 기다린다."""
        if self._image_configuration is not None:
            return self._image_configuration

        async with self._image_configuration_lock:
            if self._image_configuration is None:
                data = await self._get("configuration")
                configuration = self._parse(TmdbConfiguration, data, "configuration")
                self._image_configuration = configuration.images
                logger.info(
                    f"TMDB 이미지 구성 로드: {self._image_configuration.secure_base_url} "
                    f"({len(self._image_configuration.poster_sizes)} sizes)"
                )

        return self._image_configuration

    async def initialize(self) -> None:
        await self.get_image_configuration()
