from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from app.api.response import failure
from app.api.router import api_router
from app.core.config import settings
from app.core.exceptions import BoardError
from app.core.file_upload import file_storage
from app.core.logging import setup_application_logging
from app.db.database import AsyncSessionLocal, create_tables
from app.db.init_data import init_database_data
from app.middleware.simple_performance import SimplePerformanceMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_application_logging(logging.DEBUG if settings.DEBUG else logging.INFO)
    logger.info("Starting multi-board API...")

    await create_tables()
    logger.info("Database tables created successfully")

    async with AsyncSessionLocal() as db:
        await init_database_data(db)

    await file_storage.ensure_upload_dir()
    logger.info(f"Upload directory initialized: {file_storage.upload_dir}")

    yield
    # Shutdown
    logger.info("Multi-board server shutdown completed")


app = FastAPI(
    title="Multi Board API",
    description="공지사항/자유게시판 API",
    version="1.0.0",
    lifespan=lifespan,
)

# 성능 모니터링 미들웨어 추가
app.add_middleware(SimplePerformanceMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,  # JWT 토큰 인증을 위해 필수
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "Accept", "Origin", "X-Requested-With"],
    expose_headers=["Content-Disposition"],
)


@app.exception_handler(BoardError)
async def board_error_handler(request: Request, exc: BoardError):
    """게시판 서비스 예외를 응답 본문으로 변환"""
    if exc.status_code >= 500:
        logger.error(f"[ERROR] {request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} - {type(exc).__name__}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=failure(exc.response_status, exc.message, exc.data),
    )


app.include_router(api_router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
