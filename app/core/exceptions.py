"""
게시판 서비스 예외 정의
"""
from typing import Any, Optional


class BoardError(Exception):
    """게시판 서비스 예외의 기본 클래스

    게시글 저장 이후 발생한 경우 board_id에 이미 저장된 게시글 ID가 담긴다.
    """
    status_code = 500
    response_status = "error"

    def __init__(self, message: str, data: Optional[Any] = None, board_id: Optional[int] = None):
        super().__init__(message)
        if data is None and board_id is not None:
            data = {"boardId": board_id}
        self.message = message
        self.data = data
        self.board_id = board_id


class InvalidArgument(BoardError):
    """잘못된 검색 조건, ID, 입력값"""
    status_code = 400
    response_status = "fail"


class NotFound(BoardError):
    """존재하지 않는 게시글 또는 첨부파일"""
    status_code = 404
    response_status = "fail"


class Forbidden(BoardError):
    """작성자와 인증된 사용자가 일치하지 않음"""
    status_code = 403
    response_status = "fail"


class PersistenceError(BoardError):
    """저장소 쓰기 실패"""
    status_code = 500


class StorageWriteError(BoardError):
    """첨부파일 바이트 저장 실패"""
    status_code = 500

    def __init__(self, message: str, board_id: Optional[int] = None):
        super().__init__(message, board_id=board_id)


class PersistenceWarning(UserWarning):
    """조회수 증가 실패 (상세 조회는 계속 진행)"""
