# Pydantic 스키마들을 여기서 import
from .board import (
    SearchCriteria, BoardEntryDraft, CategoryResponse, AttachmentResponse,
    BoardPostSummary, BoardPostResponse, BoardSearchResponse,
)
