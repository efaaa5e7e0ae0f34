from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from app.db.database import get_async_db
from app.core.file_upload import file_storage
from app.core.logging import security_logger
from app.core.security import verify_token
from app.services.board_service import BoardService

security = HTTPBearer(auto_error=False)


def _get_client_ip(request: Request) -> str:
    """클라이언트 IP 추출"""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


async def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Bearer 토큰의 subject를 인증된 사용자 ID로 반환"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="인증 정보를 확인할 수 없습니다.",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    payload = verify_token(credentials.credentials)
    if payload is None:
        security_logger.log_invalid_token("verification_failed", _get_client_ip(request))
        raise credentials_exception

    user_id = payload.get("sub")
    if not user_id:
        raise credentials_exception
    return str(user_id)


async def get_board_service(db: AsyncSession = Depends(get_async_db)) -> BoardService:
    """게시판 서비스 의존성"""
    return BoardService(db, file_storage)
