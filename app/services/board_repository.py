from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func, and_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
from typing import List, Optional

from app.core.exceptions import PersistenceError
from app.models.board import BoardPost, BoardType, Category
from app.models.board_attachment import BoardPostAttachment
from app.services.search_query import QueryDescriptor


class BoardRepository:
    """게시글/첨부파일 저장소"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def search(self, descriptor: QueryDescriptor) -> List[BoardPost]:
        """검색 조건에 해당하는 현재 페이지 게시글"""
        result = await self.db.execute(descriptor.page_query)
        return list(result.scalars().all())

    async def count(self, descriptor: QueryDescriptor) -> int:
        """검색 조건에 해당하는 전체 게시글 수"""
        return await self.db.scalar(descriptor.count_query) or 0

    async def get_pinned(self, board_type: BoardType) -> List[BoardPost]:
        """알림 표시된 게시글 (페이지 없이 전부)"""
        query = select(BoardPost).where(
            and_(
                BoardPost.board_type == board_type,
                BoardPost.is_pinned == True  # noqa: E712
            )
        ).order_by(BoardPost.created_at.desc(), BoardPost.id.desc())
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_pinned(self, board_type: BoardType) -> int:
        """알림 표시된 게시글 수"""
        query = select(func.count(BoardPost.id)).where(
            and_(
                BoardPost.board_type == board_type,
                BoardPost.is_pinned == True  # noqa: E712
            )
        )
        return await self.db.scalar(query) or 0

    async def get_detail(self, board_type: BoardType, board_id: int) -> Optional[BoardPost]:
        """게시글 상세 (첨부파일 포함)"""
        query = select(BoardPost).options(
            selectinload(BoardPost.attachments)
        ).where(
            and_(
                BoardPost.id == board_id,
                BoardPost.board_type == board_type
            )
        ).execution_options(populate_existing=True)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def increment_visit_count(self, board_type: BoardType, board_id: int) -> int:
        """조회수 1 증가. 단일 UPDATE 문으로 처리하며 변경된 행 수 반환"""
        statement = update(BoardPost).where(
            and_(
                BoardPost.id == board_id,
                BoardPost.board_type == board_type
            )
        ).values(view_count=BoardPost.view_count + 1)
        result = await self.db.execute(statement)
        return result.rowcount

    async def get_categories(self, board_type: BoardType) -> List[Category]:
        query = select(Category).where(Category.board_type == board_type).order_by(Category.id)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get_category(self, category_id: int) -> Optional[Category]:
        return await self.db.get(Category, category_id)

    async def insert_entry(self, post: BoardPost) -> int:
        """게시글 저장 후 생성된 ID 반환"""
        try:
            self.db.add(post)
            await self.db.commit()
            await self.db.refresh(post)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"게시글 저장 실패: {str(e)}") from e
        return post.id

    async def insert_attachment(self, attachment: BoardPostAttachment) -> BoardPostAttachment:
        """첨부파일 기록 저장"""
        try:
            self.db.add(attachment)
            await self.db.commit()
            await self.db.refresh(attachment)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"첨부파일 정보 저장 실패: {str(e)}") from e
        return attachment

    async def get_attachment(self, attachment_id: int) -> Optional[BoardPostAttachment]:
        return await self.db.get(BoardPostAttachment, attachment_id)
