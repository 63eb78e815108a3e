# showtime/exceptions/media.py

from fastapi import status

from .base import AppError


class MediaNotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, media_id: str):
        self.media_id = media_id
        super().__init__(f"미디어를 찾을 수 없습니다 (ID: {media_id})")
