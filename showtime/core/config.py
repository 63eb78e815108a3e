# showtime/core/config.py

from functools import lru_cache
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """설정 클래스"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # 애플리케이션 설정
    app_name: str = Field(default="MyShowtime API", description="애플리케이션 이름")
    debug: bool = Field(default=False, description="디버그 모드")
    log_level: str = Field(default="INFO", description="로그 레벨")
    database_url: str = Field(default="sqlite:///./showtime.db", description="데이터베이스 URL")
    root_path: str = Field(default="", description="리버스 프록시 경로 (예: /api)")
    allowed_origins: List[str] = Field(
        default=["http://localhost:5173"], description="CORS 허용 출처"
    )

    # JWT 인증 설정
    secret_key: str = Field(default="secret-jwt-key", description="JWT 토큰 암호화 키")
    algorithm: str = Field(default="HS256", description="JWT 알고리즘")

    # TMDB API 설정
    tmdb_api_key: str = Field(default="", description="TMDB API Key (v3)")
    tmdb_access_token: str = Field(default="", description="TMDB Access Token (v4)")
    tmdb_base_url: str = Field(default="https://api.themoviedb.org/3", description="TMDB API URL")
    tmdb_language: str = Field(default="en-US", description="TMDB 기본 언어")
    tmdb_region: str = Field(default="US", description="TMDB 기본 지역")
    tmdb_timeout: float = Field(default=20.0, description="요청 타임아웃")

    # 재시도 설정
    tmdb_max_retries: int = Field(default=3, description="일시적 오류 재시도 횟수")
    tmdb_retry_base_delay: float = Field(default=0.25, description="재시도 기본 대기(초)")
    tmdb_retry_jitter: float = Field(default=0.15, description="재시도 최대 지터(초)")

    # 검색 설정
    search_page_size: int = Field(default=200, description="내부 페이지 크기")
    tmdb_page_size: int = Field(default=20, description="TMDB 페이지 크기")
    person_search_max_pages: int = Field(default=5, description="인물 검색 최대 페이지")
    person_search_max_people: int = Field(default=10, description="인물 검색 최대 인원")
    enrichment_concurrency: int = Field(default=3, description="시청 제공처 동시 조회 수")
    watch_provider_countries: List[str] = Field(
        default=["US", "CA", "GB", "AU"], description="시청 제공처 우선 국가"
    )

    # 캐시 설정
    search_cache_ttl: int = Field(default=600, description="검색 결과 캐시 TTL(초)")
    search_cache_size: int = Field(default=200, description="검색 결과 캐시 최대 항목 수")
    source_cache_ttl: int = Field(default=6 * 60 * 60, description="시청 제공처 캐시 TTL(초)")
    source_cache_size: int = Field(default=5000, description="시청 제공처 캐시 최대 항목 수")

    @property
    def tmdb_configured(self) -> bool:
        return bool(self.tmdb_api_key or self.tmdb_access_token)

    @property
    def tmdb_headers(self) -> dict[str, str]:
        """TMDB API 요청 헤더"""
        headers = {"Accept": "application/json"}
        if self.tmdb_access_token:
            headers["Authorization"] = f"Bearer {self.tmdb_access_token}"
        return headers


@lru_cache()
def get_settings() -> Settings:
    return Settings()
