# showtime/api/v1/system.py

from fastapi import APIRouter
from showtime.core.config import get_settings

router = APIRouter()


@router.get("/health")
def health_check():
    """서비스 헬스체크"""
    return {"status": "healthy", "service": get_settings().app_name}
