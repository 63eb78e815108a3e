# showtime/api/v1/media.py

from typing import List
from fastapi import APIRouter, Depends, Path, Query
from showtime.core.dependencies import get_current_user_id, get_media_service
from showtime.schemas.media import Episode, ImportMediaRequest, MediaDetail, MediaSummary
from showtime.services.media_service import MediaService

router = APIRouter()


@router.get(
    "",
    response_model=List[MediaSummary],
    summary="라이브러리 목록",
    description="우선순위, 제목 순으로 라이브러리 미디어를 조회합니다.",
)
def list_media(
    include_hidden: bool = Query(default=False, description="숨김 항목 포함 여부"),
    media_service: MediaService = Depends(get_media_service),
):
    return media_service.list_media(include_hidden)


@router.post(
    "/import",
    response_model=MediaDetail,
    summary="TMDB에서 가져오기",
    description="TMDB 상세 정보로 라이브러리 항목을 만들거나 갱신합니다. TV는 에피소드도 가져옵니다.",
)
async def import_media(
    request: ImportMediaRequest,
    user_id: str = Depends(get_current_user_id),
    media_service: MediaService = Depends(get_media_service),
):
    return await media_service.import_media(request)


@router.get("/{media_id}", response_model=MediaDetail, summary="미디어 상세")
def get_media(
    media_id: str = Path(description="라이브러리 ID"),
    media_service: MediaService = Depends(get_media_service),
):
    return media_service.get_media(media_id)


@router.post(
    "/{media_id}/sync",
    response_model=MediaDetail,
    summary="TMDB 동기화",
    description="라이브러리 항목을 TMDB 최신 정보로 갱신합니다.",
)
async def sync_media(
    media_id: str = Path(description="라이브러리 ID"),
    user_id: str = Depends(get_current_user_id),
    media_service: MediaService = Depends(get_media_service),
):
    return await media_service.sync_media(media_id)


@router.get("/{media_id}/episodes", response_model=List[Episode], summary="에피소드 목록")
def get_episodes(
    media_id: str = Path(description="라이브러리 ID"),
    media_service: MediaService = Depends(get_media_service),
):
    """시즌, 에피소드 순 정렬"""
    return media_service.get_episodes(media_id)
