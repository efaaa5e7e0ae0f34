"""
게시글 검색 쿼리 구성
검색 조건을 목록 쿼리와 개수 쿼리로 변환한다. 두 쿼리는 같은 조건 목록에서 만들어지므로
페이지 정보와 실제 목록이 항상 일치한다.
"""

from dataclasses import dataclass
from typing import List, Optional

from sqlalchemy import Select, and_, func, or_, select
from sqlalchemy.sql.elements import ColumnElement

from app.core.config import settings
from app.core.exceptions import InvalidArgument
from app.models.board import BoardPost, BoardType
from app.schemas.board import SearchCriteria

LIKE_ESCAPE = "\\"


def escape_like(keyword: str) -> str:
    """LIKE 패턴 문자(%, _)를 일반 문자로 취급하도록 이스케이프"""
    return (
        keyword.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


@dataclass(frozen=True)
class QueryDescriptor:
    """저장소가 실행할 검색 쿼리 묶음"""
    board_type: BoardType
    page_query: Select
    count_query: Select
    offset: int
    limit: int


class SearchQueryComposer:
    """검색 조건 -> 쿼리 변환기"""

    def __init__(
        self,
        default_page_size: int = settings.DEFAULT_PAGE_SIZE,
        max_page_size: int = settings.MAX_PAGE_SIZE,
        exclude_pinned: bool = settings.EXCLUDE_PINNED_FROM_SEARCH,
    ):
        self.default_page_size = default_page_size
        self.max_page_size = max_page_size
        self.exclude_pinned = exclude_pinned

    def normalize_page_size(self, page_size: Optional[int]) -> int:
        """0 이하는 거부, 상한을 넘으면 상한으로 자름"""
        if page_size is None:
            return self.default_page_size
        if page_size <= 0:
            raise InvalidArgument(f"페이지 크기는 1 이상이어야 합니다: {page_size}")
        return min(page_size, self.max_page_size)

    def conditions(self, criteria: SearchCriteria, board_type: BoardType) -> List[ColumnElement]:
        """검색 조건 목록"""
        conditions = [BoardPost.board_type == board_type]

        if criteria.category_id is not None:
            conditions.append(BoardPost.category_id == criteria.category_id)

        if criteria.keyword:
            pattern = f"%{escape_like(criteria.keyword)}%"
            conditions.append(
                or_(
                    BoardPost.title.ilike(pattern, escape=LIKE_ESCAPE),
                    BoardPost.content.ilike(pattern, escape=LIKE_ESCAPE)
                )
            )

        if self.exclude_pinned and board_type == BoardType.ANNOUNCEMENT:
            conditions.append(BoardPost.is_pinned == False)  # noqa: E712

        return conditions

    def compose(self, criteria: SearchCriteria, board_type) -> QueryDescriptor:
        """검색 조건을 목록/개수 쿼리로 변환"""
        try:
            board_type = BoardType(board_type)
        except ValueError:
            raise InvalidArgument(f"지원하지 않는 게시판 타입입니다: {board_type}")

        limit = self.normalize_page_size(criteria.page_size)
        offset = max(criteria.page, 0) * limit

        where = and_(*self.conditions(criteria, board_type))

        # 정렬: 최신순, 같은 시각이면 ID 역순
        page_query = (
            select(BoardPost)
            .where(where)
            .order_by(BoardPost.created_at.desc(), BoardPost.id.desc())
            .offset(offset)
            .limit(limit)
        )
        count_query = select(func.count(BoardPost.id)).where(where)

        return QueryDescriptor(
            board_type=board_type,
            page_query=page_query,
            count_query=count_query,
            offset=offset,
            limit=limit,
        )
