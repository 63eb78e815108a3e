# showtime/database.py

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from showtime.core.config import get_settings

settings = get_settings()

DATABASE_URL = settings.database_url

# SQLite는 스레드 간 연결 공유를 허용해야 한다
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# 엔진 생성
engine = create_engine(
    DATABASE_URL,
    echo=settings.debug,
    pool_pre_ping=True,
    connect_args=connect_args,
)

# 세션 팩토리 생성
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base 클래스 생성
Base = declarative_base()


# 의존성 주입용 함수
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
