"""
검색 결과와 알림 표시(고정) 게시글 병합
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from app.models.board import BoardPost


@dataclass(frozen=True)
class AggregatedListing:
    """페이지 검색 결과와 알림 표시 게시글. 개수는 각각 따로 보고한다."""
    paged_entries: List[BoardPost] = field(default_factory=list)
    paged_count: int = 0
    pinned_entries: List[BoardPost] = field(default_factory=list)
    pinned_count: int = 0

    @property
    def has_content(self) -> bool:
        # 두 개수가 모두 0일 때만 빈 응답
        return self.paged_count > 0 or self.pinned_count > 0


class NoticePinningAggregator:
    """알림 표시 게시글 병합기

    알림 표시 게시글은 페이지와 무관하게 전부 포함된다. 검색 조건에도 해당하는 고정 게시글은
    두 그룹 모두에 나타날 수 있으며, 화면에서는 고정 그룹을 상단에 별도로 표시한다.
    """

    def merge(
        self,
        paged_result: Sequence[BoardPost],
        paged_count: int,
        pinned_result: Sequence[BoardPost],
        pinned_count: int,
    ) -> AggregatedListing:
        seen = set()
        pinned_entries = []
        for entry in pinned_result:
            if entry.id not in seen:
                seen.add(entry.id)
                pinned_entries.append(entry)

        return AggregatedListing(
            paged_entries=list(paged_result),
            paged_count=paged_count,
            pinned_entries=pinned_entries,
            pinned_count=pinned_count,
        )
