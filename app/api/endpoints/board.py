"""
게시판 API 엔드포인트
"""
from fastapi import APIRouter, Depends, UploadFile, File, Form, Query, Response
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from typing import List, Optional
from urllib.parse import quote
import mimetypes

from app.api.deps import get_board_service, get_current_user_id
from app.api.response import success_with_data
from app.core.exceptions import InvalidArgument
from app.core.logging import log_api_call
from app.schemas.board import (
    BoardEntryDraft, BoardPostResponse, BoardPostSummary,
    BoardSearchResponse, CategoryResponse, SearchCriteria,
)
from app.services.board_service import BoardService

router = APIRouter(prefix="/api", tags=["board"])

BOARD_NAMES = {"notice": "공지", "free": "자유"}


def board_name(board_type: str) -> str:
    return BOARD_NAMES.get(board_type, board_type)


def content_disposition(filename: str) -> str:
    """원본 파일명을 담은 Content-Disposition 헤더 (한글 파일명 지원)"""
    quoted = quote(filename)
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


@router.get("/boards/notice/cnt/noticed")
@log_api_call
async def get_marked_noticed_board_count(
    service: BoardService = Depends(get_board_service)
):
    """알림 표시된 공지 게시글 개수"""
    count = await service.count_pinned("notice")
    if count == 0:
        return Response(status_code=204)
    return success_with_data("알림 표시된 게시글 목록 개수입니다.", count)


@router.get("/boards/{board_type}/categories")
@log_api_call
async def get_board_categories(
    board_type: str,
    service: BoardService = Depends(get_board_service)
):
    """게시판 카테고리 목록"""
    categories = await service.list_categories(board_type)
    if not categories:
        return Response(status_code=204)

    return success_with_data(
        f"{board_name(board_type)}게시판 카테고리 목록입니다.",
        [CategoryResponse.model_validate(c).model_dump(mode="json", by_alias=True) for c in categories]
    )


@router.get("/boards/{board_type}")
@log_api_call
async def search_boards(
    board_type: str,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    keyword: Optional[str] = None,
    page: int = 0,
    page_size: Optional[int] = Query(None, alias="pageSize"),
    service: BoardService = Depends(get_board_service)
):
    """
    검색 조건에 해당하는 게시글 목록
    - 공지사항은 알림 표시된 게시글을 페이지와 무관하게 함께 반환
    - 두 목록이 모두 비어 있으면 204
    """
    criteria = SearchCriteria(category_id=category_id, keyword=keyword, page=page, page_size=page_size)
    listing = await service.list_boards(board_type, criteria)

    if not listing.has_content:
        return Response(status_code=204)

    body = BoardSearchResponse(
        search_boards=[BoardPostSummary.model_validate(p) for p in listing.paged_entries],
        count_search_boards=listing.paged_count,
        mark_noticed_boards=[BoardPostSummary.model_validate(p) for p in listing.pinned_entries],
        count_marked_noticed_boards=listing.pinned_count,
    )
    return success_with_data(
        f"검색조건에 해당하는 {board_name(board_type)} 게시글 목록입니다.",
        body.model_dump(mode="json", by_alias=True)
    )


@router.get("/boards/{board_type}/{board_id}")
@log_api_call
async def get_board_detail(
    board_type: str,
    board_id: int,
    service: BoardService = Depends(get_board_service)
):
    """게시글 상세 조회 (조회수 증가)"""
    post, warning = await service.get_detail(board_type, board_id)

    data = BoardPostResponse.model_validate(post).model_dump(mode="json", by_alias=True)
    data["warning"] = str(warning) if warning else None
    return success_with_data(f"{board_name(board_type)}게시글 상세 내용입니다.", data)


@router.post("/boards/{board_type}")
@log_api_call
async def create_board(
    board_type: str,
    user_id: str = Form(..., alias="userId"),
    category_id: int = Form(..., alias="categoryId"),
    title: str = Form(...),
    content: str = Form(...),
    is_pinned: bool = Form(False, alias="isPinned"),
    files: List[UploadFile] = File([]),
    current_user_id: str = Depends(get_current_user_id),
    service: BoardService = Depends(get_board_service)
):
    """
    게시글 저장
    - 작성자 ID가 인증된 사용자와 같아야 함
    - 다중 파일 업로드 지원 (빈 파일은 건너뜀)
    """
    try:
        draft = BoardEntryDraft(
            board_type=board_type,
            author_id=user_id,
            category_id=category_id,
            title=title,
            content=content,
            is_pinned=is_pinned,
        )
    except ValidationError as e:
        raise InvalidArgument("게시글 입력값이 올바르지 않습니다.", data=e.errors(include_url=False, include_context=False))

    board_id = await service.create_entry(
        current_user_id,
        draft,
        [(f.filename, f) for f in files],
    )

    return success_with_data("게시글 저장에 성공하였습니다.", {"boardId": board_id})


@router.get("/attachments/{attachment_id}")
@log_api_call
async def download_attachment(
    attachment_id: int,
    service: BoardService = Depends(get_board_service)
):
    """첨부파일 다운로드"""
    stream, original_name = await service.download_attachment(attachment_id)
    media_type, _ = mimetypes.guess_type(original_name)

    return StreamingResponse(
        stream,
        media_type=media_type or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(original_name)},
    )
