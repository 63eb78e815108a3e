# showtime/schemas/media.py

from typing import List, Optional
from pydantic import BaseModel, Field
from datetime import date, datetime
from enum import Enum


class MediaType(str, Enum):
    movie = "movie"
    tv = "tv"


class WatchState(str, Enum):
    unwatched = "unwatched"
    watching = "watching"
    watched = "watched"


class MediaDetail(BaseModel):
    """미디어 상세 정보 (미리보기 및 라이브러리 공용)"""

    id: Optional[str] = Field(default=None, description="라이브러리 ID (미리보기는 None)")
    tmdb_id: int = Field(description="TMDB ID")
    media_type: MediaType = Field(description="미디어 타입")
    title: str = Field(description="제목")
    release_date: Optional[date] = Field(default=None, description="개봉일/첫 방영일")
    priority: int = Field(default=3, ge=0, le=10, description="우선순위")
    source: Optional[str] = Field(default=None, description="시청 출처")
    watch_state: WatchState = Field(default=WatchState.unwatched, description="시청 상태")
    hidden: bool = Field(default=False, description="숨김 여부")
    synopsis: Optional[str] = Field(default=None, description="줄거리")
    poster_path: Optional[str] = Field(default=None, description="포스터 경로")
    genres: List[str] = Field(default_factory=list, description="장르")
    cast: List[str] = Field(default_factory=list, description="출연진")
    notes: Optional[str] = Field(default=None, description="메모")
    available_on: Optional[str] = Field(default=None, description="주 시청 제공처")
    created_at: datetime = Field(description="생성일시")
    updated_at: Optional[datetime] = Field(default=None, description="수정일시")
    last_synced_at: Optional[datetime] = Field(default=None, description="마지막 동기화 일시")

    class Config:
        from_attributes = True


class MediaSummary(BaseModel):
    """라이브러리 목록용 미디어 정보"""

    id: str = Field(description="라이브러리 ID")
    tmdb_id: int = Field(description="TMDB ID")
    media_type: MediaType = Field(description="미디어 타입")
    title: str = Field(description="제목")
    release_date: Optional[date] = Field(default=None, description="개봉일/첫 방영일")
    priority: int = Field(description="우선순위")
    available_on: Optional[str] = Field(default=None, description="주 시청 제공처")
    watch_state: WatchState = Field(description="시청 상태")
    hidden: bool = Field(description="숨김 여부")
    poster_path: Optional[str] = Field(default=None, description="포스터 경로")

    class Config:
        from_attributes = True


class Episode(BaseModel):
    id: str = Field(description="에피소드 ID")
    media_id: str = Field(description="미디어 ID")
    tmdb_episode_id: int = Field(description="TMDB 에피소드 ID")
    season_number: int = Field(description="시즌 번호")
    episode_number: int = Field(description="에피소드 번호")
    title: str = Field(description="에피소드 제목")
    air_date: Optional[date] = Field(default=None, description="방영일")
    synopsis: Optional[str] = Field(default=None, description="줄거리")
    is_special: bool = Field(default=False, description="스페셜 여부")
    watch_state: WatchState = Field(description="시청 상태")

    class Config:
        from_attributes = True


class ImportMediaRequest(BaseModel):
    tmdb_id: int = Field(description="TMDB ID", ge=1)
    media_type: MediaType = Field(description="미디어 타입")
    priority: Optional[int] = Field(default=None, ge=0, le=10, description="우선순위")
