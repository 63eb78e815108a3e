# showtime/api/v1/search.py

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request, Response, status
from fastapi.responses import JSONResponse
from showtime.core.dependencies import get_media_service, get_search_service
from showtime.exceptions import ProviderUnavailable, ValidationError
from showtime.schemas.media import MediaDetail, MediaType
from showtime.schemas.search import SearchPage
from showtime.services.media_service import MediaService
from showtime.services.response_cache import compute_search_etag, etag_matches, normalize_search_type
from showtime.services.search_service import SearchService

router = APIRouter()

CACHE_CONTROL = "public,max-age=300"


@router.get(
    "/search",
    response_model=SearchPage,
    summary="TMDB 검색",
    description="키워드/트렌딩/인물 검색 결과를 200개 단위 페이지로 반환합니다. If-None-Match를 지원합니다.",
)
async def search(
    request: Request,
    q: Optional[str] = Query(default=None, description="검색어 (비어 있으면 트렌딩)"),
    type: Optional[str] = Query(default=None, description="검색 타입 (multi, movie, tv, person)"),
    page: int = Query(default=1, description="페이지 번호"),
    search_service: SearchService = Depends(get_search_service),
):
    """TMDB 검색"""
    result = await search_service.search(q, type, page)

    etag = compute_search_etag(result)
    headers = {
        "Cache-Control": CACHE_CONTROL,
        "ETag": etag,
        "X-Cache": "HIT" if result.served_from_cache else "MISS",
    }

    if etag_matches(request.headers.get("if-none-match"), etag):
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)

    return JSONResponse(content=result.model_dump(mode="json", by_alias=True), headers=headers)


@router.get(
    "/details",
    response_model=MediaDetail,
    summary="TMDB 상세 미리보기",
    description="라이브러리에 추가하기 전 TMDB 상세 정보를 조회합니다.",
)
async def get_details(
    id: int = Query(description="TMDB ID"),
    type: Optional[str] = Query(default=None, description="미디어 타입 (movie, tv)"),
    media_service: MediaService = Depends(get_media_service),
):
    """TMDB 상세 미리보기"""
    media_type = normalize_search_type(type)
    if id <= 0:
        raise ValidationError("id는 1 이상이어야 합니다")
    if media_type == "person":
        raise ValidationError("인물은 상세 미리보기를 지원하지 않습니다")

    preview = await media_service.get_preview(
        id, MediaType.tv if media_type == "tv" else MediaType.movie
    )
    if preview is None:
        raise ProviderUnavailable(f"TMDB에서 상세 정보를 가져올 수 없습니다 ({media_type}:{id})")
    return preview
