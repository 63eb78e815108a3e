# showtime/main.py

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from showtime.api.v1 import api_router
from showtime.core.config import get_settings
from showtime.core.logging import setup_logging
from showtime.database import Base, engine
from showtime.exceptions import AppError, register_exception_handlers
from showtime.services.search_service import SearchService
from showtime.services.tmdb_service import TMDBService
import showtime.models  # noqa: F401  테이블 메타데이터 등록

# 설정 로드
settings = get_settings()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 시작 시
    setup_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)

    tmdb_service = TMDBService(settings)
    app.state.tmdb_service = tmdb_service
    app.state.search_service = SearchService(tmdb_service, settings)

    try:
        await tmdb_service.initialize()
    except AppError as e:
        logger.warning(f"TMDB 초기화 실패, 첫 요청 시 다시 시도합니다: {e.detail}")

    yield

    # 종료 시
    await tmdb_service.aclose()
    logger.info("TMDB 클라이언트 종료됨")


# FastAPI 앱 생성
app = FastAPI(
    title=settings.app_name,
    description="Personal media tracker - TMDB search and library",
    version="1.0.0",
    docs_url="/docs",
    openapi_url="/openapi.json",
    root_path=settings.root_path,
    lifespan=lifespan,
)

# CORS 미들웨어
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "X-Cache"],
)

register_exception_handlers(app)

# API 라우터 등록
app.include_router(api_router)


@app.get("/")
def read_root():
    """서비스 루트"""
    return {
        "service": settings.app_name,
        "version": "1.0.0",
        "docs": "/docs",
    }
