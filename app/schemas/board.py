from pydantic import BaseModel, Field, ConfigDict, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from app.models.board import BoardType


class SearchCriteria(BaseModel):
    """게시글 검색 조건 (요청마다 생성되는 불변 값)"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    category_id: Optional[int] = Field(None, alias="categoryId")
    keyword: Optional[str] = None
    page: int = 0  # 0부터 시작
    page_size: Optional[int] = Field(None, alias="pageSize")  # None이면 기본값

    @field_validator("keyword")
    @classmethod
    def blank_keyword_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None


class BoardEntryDraft(BaseModel):
    """게시글 작성 요청"""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    board_type: BoardType = Field(alias="boardType")
    author_id: str = Field(alias="userId", min_length=1, max_length=50)
    category_id: int = Field(alias="categoryId")
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    is_pinned: bool = Field(False, alias="isPinned")

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("빈 값은 허용되지 않습니다.")
        return value

    @model_validator(mode="after")
    def pinned_only_for_announcements(self):
        if self.is_pinned and self.board_type != BoardType.ANNOUNCEMENT:
            raise ValueError("알림 표시는 공지사항에만 설정할 수 있습니다.")
        return self


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    board_type: BoardType = Field(serialization_alias="boardType")
    name: str


class AttachmentResponse(BaseModel):
    """첨부파일 정보 (저장 파일명은 노출하지 않음)"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    board_id: int = Field(validation_alias="post_id", serialization_alias="boardId")
    original_name: str = Field(serialization_alias="originFileName")
    file_size: Optional[int] = Field(None, serialization_alias="fileSize")


class BoardPostSummary(BaseModel):
    """목록용 게시글"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    board_type: BoardType = Field(serialization_alias="boardType")
    category_id: int = Field(serialization_alias="categoryId")
    title: str
    author_id: str = Field(serialization_alias="userId")
    view_count: int = Field(serialization_alias="visitCount")
    is_pinned: bool = Field(serialization_alias="isPinned")
    created_at: datetime = Field(serialization_alias="createdAt")


class BoardPostResponse(BoardPostSummary):
    """상세 조회용 게시글"""
    content: str
    attachments: List[AttachmentResponse] = []


class BoardSearchResponse(BaseModel):
    """검색 결과 + 알림 표시된 게시글"""
    model_config = ConfigDict(populate_by_name=True)

    search_boards: List[BoardPostSummary] = Field(serialization_alias="searchBoards")
    count_search_boards: int = Field(serialization_alias="countSearchBoards")
    mark_noticed_boards: List[BoardPostSummary] = Field(serialization_alias="markNoticedBoards")
    count_marked_noticed_boards: int = Field(serialization_alias="countMarkedNoticedBoards")
