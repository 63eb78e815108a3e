# showtime/exceptions/base.py

from fastapi import status


class AppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    detail: str = "예상치 못한 오류가 발생했습니다"

    def __init__(self, detail: str | None = None):
        if detail:
            self.detail = detail
        super().__init__(self.detail)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "잘못된 요청입니다"


class Unauthorized(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "인증이 필요합니다"
