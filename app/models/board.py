"""
게시판 모델
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from .base import Base


class BoardType(str, enum.Enum):
    """게시판 타입"""
    ANNOUNCEMENT = "notice"  # 공지사항
    DISCUSSION = "free"  # 자유게시판


class Category(Base):
    """게시판별 카테고리"""
    __tablename__ = "board_categories"

    id = Column(Integer, primary_key=True, index=True)
    board_type = Column(SQLEnum(BoardType), nullable=False, index=True, comment="게시판 타입")
    name = Column(String(50), nullable=False, comment="카테고리명")

    def __repr__(self):
        return f"<Category(id={self.id}, board_type='{self.board_type}', name='{self.name}')>"


class BoardPost(Base):
    """게시판 게시글 모델"""
    __tablename__ = "board_posts"

    id = Column(Integer, primary_key=True, index=True)
    board_type = Column(SQLEnum(BoardType), nullable=False, index=True, comment="게시판 타입")

    # 게시글 정보
    category_id = Column(Integer, ForeignKey("board_categories.id"), nullable=False, comment="카테고리 ID")
    category = relationship("Category")
    title = Column(String(200), nullable=False, comment="제목")
    content = Column(Text, nullable=False, comment="내용")

    # 공지사항 알림 표시 (목록 상단 고정)
    is_pinned = Column(Boolean, default=False, nullable=False, comment="알림 표시 여부")

    # 통계
    view_count = Column(Integer, default=0, nullable=False, comment="조회수")

    # 작성자 정보 (인증 토큰의 subject)
    author_id = Column(String(50), nullable=False, index=True, comment="작성자 ID")

    # 첨부파일 관계 (다중 파일 지원)
    attachments = relationship(
        "BoardPostAttachment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="BoardPostAttachment.id",
    )

    # 타임스탬프
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False, comment="생성일시")
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False, comment="수정일시")

    def __repr__(self):
        return f"<BoardPost(id={self.id}, title='{self.title}', type='{self.board_type}')>"
