from fastapi import APIRouter

from app.api.endpoints import board

api_router = APIRouter()

# 게시판 / 첨부파일 라우터
api_router.include_router(board.router)
