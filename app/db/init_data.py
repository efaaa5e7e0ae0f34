from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging

from app.models.board import BoardType, Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = {
    BoardType.ANNOUNCEMENT: ["일반", "점검", "이벤트"],
    BoardType.DISCUSSION: ["자유", "질문", "정보"],
}


async def create_default_categories(db: AsyncSession):
    """게시판별 기본 카테고리 생성"""
    for board_type, names in DEFAULT_CATEGORIES.items():
        count = await db.scalar(
            select(func.count(Category.id)).where(Category.board_type == board_type)
        )
        if count:
            logger.info(f"{board_type.value} 카테고리가 이미 존재합니다. ({count}개)")
            continue

        db.add_all([Category(board_type=board_type, name=name) for name in names])
        logger.info(f"{board_type.value} 기본 카테고리 {len(names)}개를 생성했습니다.")

    await db.flush()


async def init_database_data(db: AsyncSession):
    """초기 데이터 생성"""
    await create_default_categories(db)
    await db.commit()
