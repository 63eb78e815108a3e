# showtime/core/dependencies.py

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from showtime.core.auth import verify_token
from showtime.database import get_db
from showtime.exceptions import Unauthorized
from showtime.services.media_service import MediaService
from showtime.services.search_service import SearchService
from showtime.services.tmdb_service import TMDBService

security = HTTPBearer(auto_error=False)


def get_tmdb_service(request: Request) -> TMDBService:
    return request.app.state.tmdb_service


def get_search_service(request: Request) -> SearchService:
    return request.app.state.search_service


def get_media_service(
    db: Session = Depends(get_db),
    tmdb_service: TMDBService = Depends(get_tmdb_service),
) -> MediaService:
    return MediaService(db, tmdb_service)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> str:
    """Bearer 토큰에서 현재 사용자 ID 추출"""
    if not credentials:
        raise Unauthorized("토큰이 필요합니다")

    user_id = verify_token(credentials.credentials)
    if not user_id:
        raise Unauthorized("유효하지 않은 토큰입니다")

    return user_id
