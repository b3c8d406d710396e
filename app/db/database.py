"""
SQLAlchemy 데이터베이스 설정

SQLAlchemy 엔진, 세션, Base 클래스를 정의합니다.
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import Settings, get_settings

Base = declarative_base()


def create_db_engine(settings: Settings) -> Engine:
    """
    설정에 맞는 SQLAlchemy 엔진을 생성합니다.

    SQLite는 요청마다 다른 스레드에서 세션을 사용하므로
    check_same_thread를 비활성화합니다.
    """
    if settings.is_sqlite:
        return create_engine(
            settings.database_url,
            connect_args={"check_same_thread": False},
        )

    return create_engine(
        settings.database_url,
        pool_size=20,
        max_overflow=40,
        pool_timeout=30,
        pool_pre_ping=True,  # connection 유효성 자동 체크
        pool_recycle=3600,  # 1시간마다 connection 재생성 (stale connection 방지)
    )


engine = create_db_engine(get_settings())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """모든 테이블을 생성합니다 (이미 존재하면 건너뜀)."""
    # 모델 모듈을 import 해야 Base.metadata에 테이블이 등록됨
    import app.models  # noqa: F401

    Base.metadata.create_all(bind=bind)


def get_db():
    """
    FastAPI 의존성 주입용 데이터베이스 세션 제너레이터

    사용 예:
        @router.get("/products")
        def list_products(db: Session = Depends(get_db)):
            return ProductService.list_products(db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
