from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, async_sessionmaker

from app.core.config import settings
from app.models.base import Base
# 모든 모델을 import하여 테이블 생성 보장
from app.models import board, board_attachment  # noqa: F401


def build_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    """데이터베이스 URL에 맞는 비동기 엔진 생성"""
    if database_url.startswith("sqlite"):
        return create_async_engine(
            database_url,
            echo=echo,
            connect_args={"timeout": 30},
        )

    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_recycle=300,  # 5분마다 연결 갱신
        pool_timeout=30,
        pool_size=10,
        max_overflow=20,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=True,
        autocommit=False,
    )


async_engine = build_engine(settings.get_database_url, echo=settings.SQL_ECHO)

# 세션 생성기
AsyncSessionLocal = build_sessionmaker(async_engine)


async def get_async_db():
    """비동기 데이터베이스 세션 의존성"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def create_tables(engine: AsyncEngine = async_engine):
    """데이터베이스 테이블 생성"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
