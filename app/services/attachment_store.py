"""
첨부파일 저장소
파일 바이트(FileStorage)와 첨부파일 기록(BoardPostAttachment)을 짝지어 관리한다.
"""

from typing import Any, AsyncIterator, Optional, Tuple
import logging

from app.core.exceptions import InvalidArgument, NotFound, PersistenceError
from app.core.file_upload import FileStorage
from app.models.board_attachment import BoardPostAttachment
from app.services.board_repository import BoardRepository

logger = logging.getLogger(__name__)


class AttachmentStore:
    """첨부파일 저장/조회"""

    def __init__(self, repository: BoardRepository, storage: FileStorage):
        self.repository = repository
        self.storage = storage

    async def store(
        self,
        board_id: int,
        original_name: Optional[str],
        stream: Optional[Any],
    ) -> Optional[BoardPostAttachment]:
        """파일을 저장하고 첨부파일 기록 생성. 빈 파일이면 None"""
        if not original_name or stream is None:
            return None
        if len(original_name) > 255:
            raise InvalidArgument("파일명이 너무 깁니다. (최대 255자)")

        stored = await self.storage.save(stream)
        if stored is None:
            logger.info(f"Skipped empty upload '{original_name}' for board {board_id}")
            return None

        attachment = BoardPostAttachment(
            post_id=board_id,
            storage_name=stored.storage_name,
            original_name=original_name,
            file_size=stored.size,
        )
        try:
            return await self.repository.insert_attachment(attachment)
        except PersistenceError:
            # 기록되지 않은 파일은 어떤 ID로도 조회되지 않으므로 바로 제거
            await self.storage.delete(stored.storage_name)
            raise

    async def retrieve(self, attachment_id: int) -> Tuple[AsyncIterator[bytes], str]:
        """첨부파일 ID로 (바이트 스트림, 원본 파일명) 반환"""
        if attachment_id is None or attachment_id <= 0:
            raise InvalidArgument(f"잘못된 첨부파일 ID입니다: {attachment_id}")

        attachment = await self.repository.get_attachment(attachment_id)
        if attachment is None:
            raise NotFound("첨부파일을 찾을 수 없습니다.")

        if not await self.storage.exists(attachment.storage_name):
            logger.error(f"Attachment {attachment_id} has no backing file")
            raise NotFound("첨부파일을 찾을 수 없습니다.")

        return self.storage.iter_bytes(attachment.storage_name), attachment.original_name
