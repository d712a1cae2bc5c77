# app/database.py
from sqlalchemy import create_engine
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from app.config import settings

# SQLite는 스레드 체크 해제 필요 (FastAPI 스레드풀에서 세션 사용)
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

# 데이터베이스 엔진 생성
engine = create_engine(
    settings.database_url,
    echo=settings.debug,  # SQL 쿼리 로그 출력
    pool_pre_ping=True,
    connect_args=connect_args
)

# 세션 팩토리
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base 클래스 (모든 모델의 부모)
Base = declarative_base()

# DB 세션 의존성 (FastAPI에서 사용)
def get_db():
    """DB 세션 생성 및 종료"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None):
    """테이블 생성 (앱 시작 시 호출)"""
    # 모델 등록을 위해 import
    from app.models import photo, couple_photo  # noqa: F401
    Base.metadata.create_all(bind=bind or engine)
