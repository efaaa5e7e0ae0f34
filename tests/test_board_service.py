"""게시판 서비스 테스트"""

import io

import pytest
from sqlalchemy import func, select

from app.core.exceptions import (
    Forbidden, InvalidArgument, NotFound, PersistenceError, StorageWriteError,
)
from app.core.file_upload import FileStorage
from app.models.board import BoardPost, BoardType
from app.models.board_attachment import BoardPostAttachment
from app.schemas.board import BoardEntryDraft, SearchCriteria
from app.services.board_service import BoardService
from app.services.search_query import SearchQueryComposer


class FailingStorage(FileStorage):
    """fail_on번째 저장에서 쓰기 실패"""

    def __init__(self, upload_dir, fail_on):
        super().__init__(upload_dir)
        self.fail_on = fail_on
        self.calls = 0

    async def save(self, stream):
        self.calls += 1
        if self.calls == self.fail_on:
            raise StorageWriteError("파일 저장 실패: No space left on device")
        return await super().save(stream)


def _draft(category, board_type=BoardType.DISCUSSION, author_id="u1", **kwargs):
    values = dict(
        board_type=board_type,
        author_id=author_id,
        category_id=category.id,
        title="제목",
        content="내용",
    )
    values.update(kwargs)
    return BoardEntryDraft(**values)


async def _count(session_factory, model):
    async with session_factory() as session:
        return await session.scalar(select(func.count(model.id)))


@pytest.fixture
async def notice_fixture(categories, make_post):
    """공지 5개 (점검 카테고리 2개, 알림 표시 2개) + 자유글 1개"""
    general, maintenance = categories[BoardType.ANNOUNCEMENT][:2]
    ids = {
        "n1": await make_post(BoardType.ANNOUNCEMENT, general, "정기 공지", "이번 달 일정"),
        "n2": await make_post(BoardType.ANNOUNCEMENT, maintenance, "서버 점검", "새벽 점검", is_pinned=True),
        "n3": await make_post(BoardType.ANNOUNCEMENT, general, "이벤트 안내", "점검 이후 이벤트"),
        "n4": await make_post(BoardType.ANNOUNCEMENT, maintenance, "DB 점검", "야간 작업"),
        "n5": await make_post(BoardType.ANNOUNCEMENT, general, "필독", "이용 규칙", is_pinned=True),
        "f1": await make_post(BoardType.DISCUSSION, categories[BoardType.DISCUSSION][0], "자유글", "점검 언제?"),
    }
    return ids


async def test_listing_without_filter(service, notice_fixture):
    listing = await service.list_boards(BoardType.ANNOUNCEMENT, SearchCriteria(page=0, page_size=10))

    assert listing.paged_count == 5
    assert [p.id for p in listing.paged_entries] == [
        notice_fixture[k] for k in ("n5", "n4", "n3", "n2", "n1")
    ]
    assert {p.id for p in listing.pinned_entries} == {notice_fixture["n2"], notice_fixture["n5"]}
    assert listing.pinned_count == 2


async def test_page_never_exceeds_page_size(service, notice_fixture):
    first = await service.list_boards("notice", SearchCriteria(page=0, page_size=2))
    last = await service.list_boards("notice", SearchCriteria(page=2, page_size=2))
    beyond = await service.list_boards("notice", SearchCriteria(page=3, page_size=2))

    assert len(first.paged_entries) == 2
    assert len(last.paged_entries) == 1
    assert beyond.paged_entries == []
    assert first.paged_count == last.paged_count == beyond.paged_count == 5


async def test_keyword_matches_title_or_body(service, notice_fixture):
    listing = await service.list_boards("notice", SearchCriteria(keyword="점검"))

    assert {p.id for p in listing.paged_entries} == {
        notice_fixture["n2"], notice_fixture["n3"], notice_fixture["n4"]
    }
    assert listing.paged_count == 3


async def test_pinned_set_is_independent_of_filter(service, notice_fixture, categories):
    maintenance = categories[BoardType.ANNOUNCEMENT][1]
    listing = await service.list_boards(
        "notice", SearchCriteria(category_id=maintenance.id, keyword="야간")
    )

    assert [p.id for p in listing.paged_entries] == [notice_fixture["n4"]]
    assert {p.id for p in listing.pinned_entries} == {notice_fixture["n2"], notice_fixture["n5"]}


async def test_no_match_still_has_content_when_pinned_exist(service, notice_fixture):
    listing = await service.list_boards("notice", SearchCriteria(keyword="존재하지 않는 단어"))

    assert listing.paged_count == 0
    assert listing.pinned_count == 2
    assert listing.has_content


async def test_exclude_pinned_from_search(db, storage, notice_fixture):
    service = BoardService(db, storage, composer=SearchQueryComposer(exclude_pinned=True))

    listing = await service.list_boards("notice", SearchCriteria())

    paged_ids = {p.id for p in listing.paged_entries}
    pinned_ids = {p.id for p in listing.pinned_entries}
    assert paged_ids.isdisjoint(pinned_ids)
    assert listing.paged_count == 3


async def test_discussion_board_has_no_pinned_entries(service, notice_fixture):
    listing = await service.list_boards("free", SearchCriteria())

    assert listing.paged_count == 1
    assert listing.pinned_entries == []
    assert listing.pinned_count == 0
    assert await service.count_pinned("free") == 0
    assert await service.count_pinned("notice") == 2


async def test_empty_board_has_no_content(service, categories):
    listing = await service.list_boards(
        BoardType.ANNOUNCEMENT, SearchCriteria(category_id=None, keyword=None, page=0, page_size=10)
    )

    assert listing.paged_count == 0
    assert listing.pinned_count == 0
    assert not listing.has_content


async def test_detail_of_unknown_id_is_not_found(service, notice_fixture):
    with pytest.raises(NotFound):
        await service.get_detail("notice", 9999)


async def test_detail_of_other_board_type_is_not_found(service, notice_fixture):
    with pytest.raises(NotFound):
        await service.get_detail("free", notice_fixture["n1"])


async def test_detail_rejects_invalid_ids(service):
    with pytest.raises(InvalidArgument):
        await service.get_detail("notice", 0)
    with pytest.raises(InvalidArgument):
        await service.get_detail("qna", 1)


async def test_list_categories(service, categories):
    names = [c.name for c in await service.list_categories("free")]

    assert names == ["자유", "질문", "정보"]


async def test_create_announcement_with_identical_file_names(service, categories, session_factory):
    draft = _draft(categories[BoardType.ANNOUNCEMENT][0], board_type=BoardType.ANNOUNCEMENT, is_pinned=True)

    board_id = await service.create_entry(
        "u1", draft, [("a.txt", io.BytesIO(b"one")), ("a.txt", io.BytesIO(b"two"))]
    )

    post, _ = await service.get_detail("notice", board_id)
    assert post.author_id == "u1"
    assert post.is_pinned
    assert [a.original_name for a in post.attachments] == ["a.txt", "a.txt"]
    assert post.attachments[0].storage_name != post.attachments[1].storage_name

    contents = []
    for attachment in post.attachments:
        stream, name = await service.download_attachment(attachment.id)
        assert name == "a.txt"
        contents.append(b"".join([chunk async for chunk in stream]))
    assert contents == [b"one", b"two"]


async def test_create_skips_empty_files(service, categories):
    board_id = await service.create_entry(
        "u1",
        _draft(categories[BoardType.DISCUSSION][0]),
        [("empty.txt", io.BytesIO(b"")), ("", io.BytesIO(b"x")), ("b.txt", io.BytesIO(b"data"))],
    )

    post, _ = await service.get_detail("free", board_id)
    assert [a.original_name for a in post.attachments] == ["b.txt"]


async def test_create_with_mismatched_author_is_forbidden(service, categories, session_factory):
    draft = _draft(categories[BoardType.DISCUSSION][0], author_id="u2")

    with pytest.raises(Forbidden):
        await service.create_entry("u1", draft, [("a.txt", io.BytesIO(b"data"))])

    assert await _count(session_factory, BoardPost) == 0
    assert await _count(session_factory, BoardPostAttachment) == 0


async def test_create_without_caller_is_forbidden(service, categories):
    with pytest.raises(Forbidden):
        await service.create_entry(None, _draft(categories[BoardType.DISCUSSION][0]))


async def test_create_with_category_of_other_board_is_invalid(service, categories, session_factory):
    draft = _draft(categories[BoardType.ANNOUNCEMENT][0], board_type=BoardType.DISCUSSION)

    with pytest.raises(InvalidArgument):
        await service.create_entry("u1", draft)

    assert await _count(session_factory, BoardPost) == 0


async def test_pinned_discussion_draft_is_rejected(categories):
    with pytest.raises(ValueError):
        _draft(categories[BoardType.DISCUSSION][0], is_pinned=True)


async def test_write_failure_keeps_entry_and_earlier_files(db, categories, session_factory, tmp_path):
    storage = FailingStorage(str(tmp_path / "failing"), fail_on=2)
    service = BoardService(db, storage)
    files = [(f"{i}.txt", io.BytesIO(f"file {i}".encode())) for i in range(3)]

    with pytest.raises(StorageWriteError) as exc_info:
        await service.create_entry("u1", _draft(categories[BoardType.DISCUSSION][0]), files)

    board_id = exc_info.value.board_id
    assert board_id is not None
    post, _ = await service.get_detail("free", board_id)
    assert [a.original_name for a in post.attachments] == ["0.txt"]
    # 실패 이후 파일은 시도하지 않음
    assert storage.calls == 2


async def test_entry_persistence_failure_starts_no_attachment_work(service, categories, storage, monkeypatch):
    async def broken_insert(post):
        raise PersistenceError("게시글 저장 실패")

    monkeypatch.setattr(service.repository, "insert_entry", broken_insert)

    with pytest.raises(PersistenceError):
        await service.create_entry(
            "u1", _draft(categories[BoardType.DISCUSSION][0]), [("a.txt", io.BytesIO(b"data"))]
        )

    assert not storage.upload_dir.exists()


async def test_oversized_attachment_reports_persisted_entry(db, categories, session_factory, tmp_path):
    storage = FileStorage(str(tmp_path / "small"), max_file_size=8, chunk_size=4)
    service = BoardService(db, storage)
    files = [("a.txt", io.BytesIO(b"ok")), ("b.txt", io.BytesIO(b"x" * 20))]

    with pytest.raises(InvalidArgument) as exc_info:
        await service.create_entry("u1", _draft(categories[BoardType.DISCUSSION][0]), files)

    board_id = exc_info.value.board_id
    assert board_id is not None
    assert exc_info.value.data == {"boardId": board_id}
    assert await _count(session_factory, BoardPost) == 1
    post, _ = await service.get_detail("free", board_id)
    assert [a.original_name for a in post.attachments] == ["a.txt"]


async def test_attachment_record_failure_reports_persisted_entry(service, categories, session_factory, storage, monkeypatch):
    async def broken_insert(attachment):
        raise PersistenceError("첨부파일 저장 실패")

    monkeypatch.setattr(service.repository, "insert_attachment", broken_insert)

    with pytest.raises(PersistenceError) as exc_info:
        await service.create_entry(
            "u1", _draft(categories[BoardType.DISCUSSION][0]), [("a.txt", io.BytesIO(b"data"))]
        )

    assert exc_info.value.data == {"boardId": exc_info.value.board_id}
    assert await _count(session_factory, BoardPost) == 1
    assert await _count(session_factory, BoardPostAttachment) == 0
    assert list(storage.upload_dir.iterdir()) == []


async def test_keyword_wildcards_match_literally(service, categories, make_post):
    category = categories[BoardType.DISCUSSION][0]
    await make_post(BoardType.DISCUSSION, category, "100% 할인", "이벤트")
    await make_post(BoardType.DISCUSSION, category, "1000원 할인", "이벤트")
    await make_post(BoardType.DISCUSSION, category, "file_name 규칙", "안내")
    await make_post(BoardType.DISCUSSION, category, "filename 규칙", "안내")

    percent = await service.list_boards("free", SearchCriteria(keyword="100%"))
    underscore = await service.list_boards("free", SearchCriteria(keyword="file_"))

    assert [p.title for p in percent.paged_entries] == ["100% 할인"]
    assert [p.title for p in underscore.paged_entries] == ["file_name 규칙"]
