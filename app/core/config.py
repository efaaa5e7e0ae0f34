from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    # Database Configuration
    DATABASE_URL: str = "sqlite+aiosqlite:///./board.db"
    SQL_ECHO: bool = False

    @property
    def get_database_url(self) -> str:
        """비동기 드라이버용 데이터베이스 URL 반환"""
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Security
    SECRET_KEY: str = "multi-board-secret-key-change-this-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Application settings
    DEBUG: bool = False

    # 게시판 목록
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    # True면 검색 결과에서 알림 표시(고정)된 공지를 제외
    EXCLUDE_PINNED_FROM_SEARCH: bool = False

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:8082",
        "http://127.0.0.1:8082",
        "http://localhost:5173",
    ]

    # File Upload
    UPLOAD_DIR: str = "/app/data/uploads" if os.getenv("RAILWAY_ENVIRONMENT") else "./uploads"
    MAX_FILE_SIZE: int = 10485760  # 10MB
    UPLOAD_CHUNK_SIZE: int = 64 * 1024

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # 추가 필드 무시


settings = Settings()
