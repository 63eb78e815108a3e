# tests/conftest.py

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Union

import httpx
import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from showtime.core.config import Settings, get_settings
from showtime.database import Base, get_db
from showtime.main import app
from showtime.services.search_service import SearchService
from showtime.services.tmdb_service import TMDBService

IMAGE_CONFIGURATION = {
    "images": {
        "base_url": "http://image.tmdb.org/t/p/",
        "secure_base_url": "https://image.tmdb.org/t/p/",
        "poster_sizes": ["w92", "w154", "w342", "w500", "original"],
    }
}

Reply = Union[httpx.Response, Dict[str, Any], Callable[[httpx.Request], Any]]


class FakeTmdb:
    """경로별 응답을 등록해 두는 TMDB 대역. 등록되지 않은 경로는 404"""

    def __init__(self):
        self.routes: Dict[str, List[Reply]] = {}
        self.calls: List[httpx.Request] = []
        self.add("configuration", IMAGE_CONFIGURATION)

    def add(self, path: str, *replies: Reply) -> "FakeTmdb":
        """같은 경로에 여러 응답을 등록하면 순서대로 소비하고 마지막 응답을 반복한다"""
        self.routes[path] = list(replies)
        return self

    def paths(self) -> List[str]:
        return [self._path(request) for request in self.calls]

    @staticmethod
    def _path(request: httpx.Request) -> str:
        return request.url.path.split("/3/", 1)[-1]

    def handler(self, request: httpx.Request):
        self.calls.append(request)
        replies = self.routes.get(self._path(request))
        if not replies:
            return httpx.Response(404, json={"status_message": "not found"})

        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if callable(reply):
            reply = reply(request)
        if isinstance(reply, httpx.Response):
            return reply
        return httpx.Response(200, json=reply)


def make_settings(**overrides) -> Settings:
    values = dict(
        tmdb_api_key="test-key",
        tmdb_access_token="",
        tmdb_retry_base_delay=0,
        tmdb_retry_jitter=0,
        database_url="sqlite://",
    )
    values.update(overrides)
    return Settings(**values)


def make_token(user_id: str = "user-1", minutes: int = 30) -> str:
    """테스트용 JWT 발급 (API는 검증만 한다)"""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    return jwt.encode({"sub": user_id, "exp": expire}, settings.secret_key, algorithm=settings.algorithm)


@pytest.fixture
def auth_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def fake_tmdb() -> FakeTmdb:
    return FakeTmdb()


@pytest.fixture
def tmdb_service(settings, fake_tmdb) -> TMDBService:
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_tmdb.handler))
    return TMDBService(settings, http_client=client)


@pytest.fixture
def search_service(tmdb_service, settings) -> SearchService:
    return SearchService(tmdb_service, settings)


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    session = TestingSession()
    yield session
    session.close()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(tmdb_service, search_service, db_session):
    def override_get_db():
        yield db_session

    app.state.tmdb_service = tmdb_service
    app.state.search_service = search_service
    app.dependency_overrides[get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()
