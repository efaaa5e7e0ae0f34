from typing import Optional
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.core.exceptions import PersistenceWarning
from app.models.board import BoardType
from app.services.board_repository import BoardRepository

logger = logging.getLogger(__name__)


class VisitCounter:
    """게시글 조회수 카운터"""

    def __init__(self, repository: BoardRepository):
        self.repository = repository

    async def increment(self, board_type: BoardType, board_id: int) -> Optional[PersistenceWarning]:
        """조회수 1 증가

        실패해도 예외를 올리지 않고 경고를 반환한다. 이후 상세 조회는 그대로 진행된다.
        """
        db = self.repository.db
        try:
            await self.repository.increment_visit_count(board_type, board_id)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            logger.warning(f"Visit count increment failed for board {board_id}: {e}")
            return PersistenceWarning(f"조회수 반영에 실패했습니다: {board_id}")
        return None
