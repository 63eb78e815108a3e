# showtime/exceptions/tmdb.py

from fastapi import status

from .base import AppError


class ConfigurationError(AppError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail = "TMDB API 키가 설정되지 않았습니다. TMDB_API_KEY 또는 TMDB_ACCESS_TOKEN을 설정하세요."


class ProviderUnavailable(AppError):
    status_code = status.HTTP_502_BAD_GATEWAY
    detail = "TMDB 요청에 실패했습니다"


class TransientProviderError(ProviderUnavailable):
    """재시도 대상 오류 (429, 5xx, 네트워크 오류)"""


class EnrichmentFailure(AppError):
    """시청 제공처 조회 실패 - 호출자에게 노출되지 않음"""

    def __init__(self, media_type: str, tmdb_id: int, reason: str):
        self.media_type = media_type
        self.tmdb_id = tmdb_id
        super().__init__(f"시청 제공처 조회 실패 ({media_type}:{tmdb_id}): {reason}")
