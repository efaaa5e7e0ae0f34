"""Shared test fixtures: per-test sqlite database and upload directory."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_board.db")
os.environ.setdefault("UPLOAD_DIR", "./test_uploads")

from datetime import datetime, timedelta

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.deps import get_board_service
from app.core.file_upload import FileStorage
from app.core.security import create_access_token
from app.db.database import build_engine, build_sessionmaker, create_tables
from app.db.init_data import init_database_data
from app.main import app
from app.models.board import BoardPost, BoardType, Category
from app.services.board_repository import BoardRepository
from app.services.board_service import BoardService
from app.services.search_query import SearchQueryComposer


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'board.db'}")
    await create_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def storage(tmp_path):
    # 작은 청크로 여러 번 나눠 쓰도록
    return FileStorage(str(tmp_path / "uploads"), max_file_size=1024 * 1024, chunk_size=4)


@pytest.fixture
def composer():
    return SearchQueryComposer(default_page_size=10, max_page_size=50, exclude_pinned=False)


@pytest_asyncio.fixture
async def categories(session_factory):
    """게시판 타입별 기본 카테고리"""
    async with session_factory() as session:
        await init_database_data(session)
        result = {}
        for board_type in BoardType:
            result[board_type] = await BoardRepository(session).get_categories(board_type)
        return result


@pytest.fixture
def service(db, storage, composer):
    return BoardService(db, storage, composer=composer)


@pytest_asyncio.fixture
async def make_post(session_factory):
    """게시글을 직접 저장하는 헬퍼"""
    base_time = datetime(2024, 1, 1, 9, 0, 0)
    created = []

    async def _make_post(
        board_type: BoardType,
        category: Category,
        title: str,
        content: str = "본문",
        is_pinned: bool = False,
        author_id: str = "u1",
    ) -> int:
        async with session_factory() as session:
            post = BoardPost(
                board_type=board_type,
                category_id=category.id,
                author_id=author_id,
                title=title,
                content=content,
                is_pinned=is_pinned,
                view_count=0,
                created_at=base_time + timedelta(minutes=len(created)),
            )
            session.add(post)
            await session.commit()
            created.append(post.id)
            return post.id

    return _make_post


@pytest_asyncio.fixture
async def api_client(session_factory, storage, composer):
    async def _service():
        async with session_factory() as session:
            yield BoardService(session, storage, composer=composer)

    app.dependency_overrides[get_board_service] = _service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _auth_headers(user_id: str = "u1") -> dict:
        return {"Authorization": f"Bearer {create_access_token(user_id)}"}

    return _auth_headers
