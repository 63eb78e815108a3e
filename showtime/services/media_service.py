# showtime/services/media_service.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from showtime.exceptions import MediaNotFound, ProviderUnavailable
from showtime.models import EpisodeModel, MediaModel
from showtime.schemas.media import Episode, ImportMediaRequest, MediaDetail, MediaSummary, MediaType, WatchState
from showtime.schemas.tmdb import TmdbCredits, TmdbMovieDetails, TmdbTvDetails
from showtime.services.source_enrichment import select_primary_provider
from showtime.services.tmdb_mappings import first_non_empty, parse_date
from showtime.services.tmdb_service import TMDBService

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 3
MAX_GENRES = 5
MAX_MOVIE_CAST = 6
MAX_TV_CAST = 8


def _cast_names(credits: Optional[TmdbCredits], limit: int) -> List[str]:
    if credits is None:
        return []
    members = sorted(credits.cast, key=lambda member: member.order)
    return [member.name for member in members if member.name and member.name.strip()][:limit]


def _genre_names(genres) -> List[str]:
    return [genre.name for genre in genres if genre.name and genre.name.strip()][:MAX_GENRES]


def movie_fields(details: TmdbMovieDetails, countries) -> Dict[str, Any]:
    provider = select_primary_provider(details.watch_providers, countries)
    return {
        "title": first_non_empty(details.title) or "Untitled",
        "release_date": parse_date(details.release_date),
        "synopsis": details.overview,
        "poster_path": details.poster_path,
        "genres": _genre_names(details.genres),
        "cast": _cast_names(details.credits, MAX_MOVIE_CAST),
        "available_on": provider,
        "source": provider,
    }


def tv_fields(details: TmdbTvDetails, countries) -> Dict[str, Any]:
    # 시리즈 전체 출연진(aggregate_credits)이 있으면 우선 사용
    credits = details.aggregate_credits if details.aggregate_credits and details.aggregate_credits.cast else details.credits
    provider = select_primary_provider(details.watch_providers, countries)
    return {
        "title": first_non_empty(details.name) or "Untitled",
        "release_date": parse_date(details.first_air_date),
        "synopsis": details.overview,
        "poster_path": details.poster_path,
        "genres": _genre_names(details.genres),
        "cast": _cast_names(credits, MAX_TV_CAST),
        "available_on": provider,
        "source": provider,
    }


class MediaService:
    """TMDB 상세 미리보기와 라이브러리 가져오기/동기화"""

    def __init__(self, db: Session, tmdb_service: TMDBService):
        self.db = db
        self.tmdb_service = tmdb_service
        self.countries = tmdb_service.settings.watch_provider_countries

    async def _fetch_details(self, tmdb_id: int, media_type: MediaType):
        if media_type == MediaType.tv:
            return await self.tmdb_service.get_tv_details(tmdb_id)
        return await self.tmdb_service.get_movie_details(tmdb_id)

    def _fields(self, details, media_type: MediaType) -> Dict[str, Any]:
        if media_type == MediaType.tv:
            return tv_fields(details, self.countries)
        return movie_fields(details, self.countries)

    async def get_preview(self, tmdb_id: int, media_type: MediaType) -> Optional[MediaDetail]:
        """라이브러리에 저장하지 않고 TMDB 상세 정보만 조회"""
        details = await self._fetch_details(tmdb_id, media_type)
        if details is None:
            return None

        return MediaDetail(
            tmdb_id=tmdb_id,
            media_type=media_type,
            priority=DEFAULT_PRIORITY,
            watch_state=WatchState.unwatched,
            hidden=False,
            created_at=datetime.now(timezone.utc),
            **self._fields(details, media_type),
        )

    def _get_model(self, media_id: str) -> MediaModel:
        media = self.db.get(MediaModel, media_id)
        if media is None:
            raise MediaNotFound(media_id)
        return media

    async def _replace_episodes(self, media: MediaModel, details: TmdbTvDetails) -> int:
        """시즌별 에피소드를 다시 받아 기존 목록을 교체"""
        episodes: List[EpisodeModel] = []

        for season in sorted(details.seasons, key=lambda s: s.season_number):
            if season.season_number < 0:
                continue

            season_details = await self.tmdb_service.get_tv_season(media.tmdb_id, season.season_number)
            if season_details is None:
                logger.warning(f"시즌 정보 없음: TV {media.tmdb_id} 시즌 {season.season_number}")
                continue

            for episode in season_details.episodes:
                season_number = episode.season_number or season.season_number
                episodes.append(
                    EpisodeModel(
                        tmdb_episode_id=episode.id,
                        season_number=season_number,
                        episode_number=episode.episode_number,
                        title=first_non_empty(episode.name) or f"Episode {episode.episode_number}",
                        air_date=parse_date(episode.air_date),
                        synopsis=episode.overview,
                        is_special=season_number == 0,
                        watch_state=WatchState.unwatched.value,
                    )
                )

        media.episodes = episodes
        return len(episodes)

    async def _refresh(self, media: MediaModel) -> MediaModel:
        media_type = MediaType(media.media_type)
        details = await self._fetch_details(media.tmdb_id, media_type)
        if details is None:
            raise ProviderUnavailable(f"TMDB에서 상세 정보를 가져올 수 없습니다 ({media_type.value}:{media.tmdb_id})")

        for key, value in self._fields(details, media_type).items():
            setattr(media, key, value)

        if media_type == MediaType.tv:
            count = await self._replace_episodes(media, details)
            logger.info(f"에피소드 {count}개 저장: {media.title}")
        else:
            # 영화로 다시 가져오면 이전 TV 에피소드는 삭제
            media.episodes = []

        media.last_synced_at = datetime.now(timezone.utc)
        return media

    async def import_media(self, request: ImportMediaRequest) -> MediaDetail:
        """TMDB에서 가져와 라이브러리에 추가 (이미 있으면 갱신)"""
        stmt = select(MediaModel).where(MediaModel.tmdb_id == request.tmdb_id)
        media = self.db.execute(stmt).scalar_one_or_none()

        if media is None:
            media = MediaModel(
                tmdb_id=request.tmdb_id,
                media_type=request.media_type.value,
                priority=request.priority if request.priority is not None else DEFAULT_PRIORITY,
                watch_state=WatchState.unwatched.value,
                hidden=False,
            )
            self.db.add(media)
        else:
            media.media_type = request.media_type.value
            if request.priority is not None:
                media.priority = request.priority

        try:
            await self._refresh(media)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(media)
        logger.info(f"미디어 가져오기 완료: {media.title} ({media.media_type}:{media.tmdb_id})")
        return MediaDetail.model_validate(media)

    async def sync_media(self, media_id: str) -> MediaDetail:
        """라이브러리 항목을 TMDB 최신 정보로 갱신"""
        media = self._get_model(media_id)

        try:
            await self._refresh(media)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(media)
        logger.info(f"미디어 동기화 완료: {media.title}")
        return MediaDetail.model_validate(media)

    def list_media(self, include_hidden: bool = False) -> List[MediaSummary]:
        stmt = select(MediaModel)
        if not include_hidden:
            stmt = stmt.where(MediaModel.hidden.is_(False))
        stmt = stmt.order_by(MediaModel.priority, MediaModel.title)

        return [MediaSummary.model_validate(media) for media in self.db.execute(stmt).scalars()]

    def get_media(self, media_id: str) -> MediaDetail:
        return MediaDetail.model_validate(self._get_model(media_id))

    def get_episodes(self, media_id: str) -> List[Episode]:
        self._get_model(media_id)
        stmt = (
            select(EpisodeModel)
            .where(EpisodeModel.media_id == media_id)
            .order_by(EpisodeModel.season_number, EpisodeModel.episode_number)
        )
        return [Episode.model_validate(episode) for episode in self.db.execute(stmt).scalars()]
