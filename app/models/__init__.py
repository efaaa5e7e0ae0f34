# SQLAlchemy 모델들을 여기서 import
# 순서가 중요합니다: 의존성이 없는 모델부터 import
from .board import BoardPost, BoardType, Category
from .board_attachment import BoardPostAttachment
