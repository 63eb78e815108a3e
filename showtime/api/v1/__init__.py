# showtime/api/v1/__init__.py

from fastapi import APIRouter
from . import search, media, system

api_router = APIRouter()

api_router.include_router(search.router, tags=["검색"])
api_router.include_router(media.router, prefix="/media", tags=["미디어"])
api_router.include_router(system.router, prefix="/system", tags=["시스템"])
