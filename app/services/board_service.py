from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, AsyncIterator, List, Optional, Sequence, Tuple
import logging

from app.core.exceptions import (
    BoardError, Forbidden, InvalidArgument, NotFound, PersistenceWarning,
)
from app.core.file_upload import FileStorage
from app.core.logging import security_logger
from app.models.board import BoardPost, BoardType, Category
from app.schemas.board import BoardEntryDraft, SearchCriteria
from app.services.attachment_store import AttachmentStore
from app.services.board_repository import BoardRepository
from app.services.notice_pinning import AggregatedListing, NoticePinningAggregator
from app.services.search_query import SearchQueryComposer
from app.services.visit_counter import VisitCounter

logger = logging.getLogger(__name__)

# (원본 파일명, 파일 객체 또는 UploadFile)
UploadedFile = Tuple[Optional[str], Optional[Any]]


def parse_board_type(board_type) -> BoardType:
    try:
        return BoardType(board_type)
    except ValueError:
        raise InvalidArgument(f"지원하지 않는 게시판 타입입니다: {board_type}")


class BoardService:
    """게시판 서비스 (공지사항/자유게시판)"""

    def __init__(
        self,
        db: AsyncSession,
        storage: FileStorage,
        composer: Optional[SearchQueryComposer] = None,
    ):
        self.db = db
        self.repository = BoardRepository(db)
        self.composer = composer or SearchQueryComposer()
        self.aggregator = NoticePinningAggregator()
        self.visit_counter = VisitCounter(self.repository)
        self.attachments = AttachmentStore(self.repository, storage)

    async def list_boards(self, board_type, criteria: SearchCriteria) -> AggregatedListing:
        """검색 조건에 해당하는 게시글 목록 + 알림 표시 게시글"""
        descriptor = self.composer.compose(criteria, board_type)

        paged = await self.repository.search(descriptor)
        paged_count = await self.repository.count(descriptor)

        if descriptor.board_type == BoardType.ANNOUNCEMENT:
            pinned = await self.repository.get_pinned(descriptor.board_type)
            pinned_count = await self.repository.count_pinned(descriptor.board_type)
        else:
            pinned, pinned_count = [], 0

        return self.aggregator.merge(paged, paged_count, pinned, pinned_count)

    async def count_pinned(self, board_type) -> int:
        """알림 표시된 게시글 수"""
        board_type = parse_board_type(board_type)
        if board_type != BoardType.ANNOUNCEMENT:
            return 0
        return await self.repository.count_pinned(board_type)

    async def get_detail(self, board_type, board_id: int) -> Tuple[BoardPost, Optional[PersistenceWarning]]:
        """게시글 상세 조회 (조회수 증가)

        조회수 반영에 실패하면 게시글과 함께 경고를 반환한다.
        """
        board_type = parse_board_type(board_type)
        if board_id is None or board_id <= 0:
            raise InvalidArgument(f"잘못된 게시글 ID입니다: {board_id}")

        warning = await self.visit_counter.increment(board_type, board_id)

        post = await self.repository.get_detail(board_type, board_id)
        if post is None:
            raise NotFound("게시글을 찾을 수 없습니다.")
        return post, warning

    async def list_categories(self, board_type) -> List[Category]:
        """게시판 카테고리 목록"""
        return await self.repository.get_categories(parse_board_type(board_type))

    async def create_entry(
        self,
        caller_id: Optional[str],
        draft: BoardEntryDraft,
        files: Sequence[UploadedFile] = (),
    ) -> int:
        """게시글 저장 후 첨부파일을 순서대로 저장

        첨부파일 처리에 실패하면 남은 파일은 건너뛰고, 저장된 게시글 ID를 담아 예외를 올린다.
        이미 저장된 게시글과 첨부파일은 그대로 남는다.
        """
        if not caller_id or caller_id != draft.author_id:
            security_logger.log_permission_denied(
                str(caller_id), f"boards/{draft.board_type.value}", "create"
            )
            raise Forbidden("유효한 사용자가 아닙니다.")

        category = await self.repository.get_category(draft.category_id)
        if category is None or category.board_type != draft.board_type:
            raise InvalidArgument(f"게시판에 없는 카테고리입니다: {draft.category_id}")

        board_id = await self.repository.insert_entry(
            BoardPost(
                board_type=draft.board_type,
                category_id=draft.category_id,
                author_id=draft.author_id,
                title=draft.title,
                content=draft.content,
                is_pinned=draft.is_pinned,
                view_count=0,
            )
        )
        logger.info(f"Created {draft.board_type.value} board {board_id} by {draft.author_id}")

        for original_name, stream in files:
            try:
                await self.attachments.store(board_id, original_name, stream)
            except BoardError as e:
                logger.error(f"Attachment upload aborted for board {board_id}: {e.message}")
                raise type(e)(e.message, board_id=board_id) from e

        return board_id

    async def download_attachment(self, attachment_id: int) -> Tuple[AsyncIterator[bytes], str]:
        """첨부파일 다운로드"""
        return await self.attachments.retrieve(attachment_id)
