"""Tests for the export pipeline: gates, state machine, upload and record."""

import io
from unittest.mock import MagicMock

import pytest
from pptx import Presentation

from slidesmind.config import Settings
from slidesmind.errors import (
    NotFoundError,
    PremiumRequiredError,
    QuotaExceededError,
    RenderFailure,
    StorageFailure,
    ValidationFailure,
)
from slidesmind.generator.assembler import DocumentAssembler
from slidesmind.processor.drafts import DraftService, InMemoryDraftStore
from slidesmind.processor.export import (
    ExportService,
    InMemoryRecordStore,
    InMemoryUserStore,
    LocalDirectoryStorage,
    UploadResult,
)
from slidesmind.processor.outline import Outline, OutlineSlide
from slidesmind.schema.draft import (
    ChartPoint,
    DraftStatus,
    SlideType,
    Stat,
    UserAccount,
)


OWNER = "user-1"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

def _five_slide_outline():
    return Outline(title="Solar Power", slides=[
        OutlineSlide(type=SlideType.TITLE, title="Solar Power", subtitle="2024 review"),
        OutlineSlide(type=SlideType.PLAN, title="Agenda",
                     content=["Basics", "Economics", "Outlook"]),
        OutlineSlide(type=SlideType.STATS, title="By the numbers",
                     stats=[Stat("Capacity", "1 TW"), Stat("Growth", "+24%")]),
        OutlineSlide(type=SlideType.CHART, title="Installs",
                     chart_data=[ChartPoint("2022", 240.0), ChartPoint("2023", 350.0)]),
        OutlineSlide(type=SlideType.CLOSING, title="Thank You"),
    ])


@pytest.fixture
def drafts():
    return InMemoryDraftStore()


@pytest.fixture
def draft_service(drafts):
    return DraftService(drafts)


@pytest.fixture
def users():
    return InMemoryUserStore([
        UserAccount(id=OWNER, presentations_count=1),
        UserAccount(id="capped", presentations_count=3),
        UserAccount(id="pro", is_premium=True, presentations_count=40),
    ])


@pytest.fixture
def records():
    return InMemoryRecordStore()


@pytest.fixture
def storage():
    storage = MagicMock()
    storage.upload.side_effect = lambda content, folder, id_hint: UploadResult(
        url=f"https://cdn.example.com/{folder}/{id_hint}.pptx",
        size_bytes=len(content),
        storage_id=f"{folder}/{id_hint}.pptx",
    )
    return storage


@pytest.fixture
def service(drafts, users, records, storage):
    return ExportService(drafts, users, records, storage)


@pytest.fixture
def draft(draft_service):
    return draft_service.create_draft(OWNER, "Solar Power", "en", "executive",
                                      _five_slide_outline())


# ---------------------------------------------------------------------------
# Happy path
# ---------------------------------------------------------------------------

class TestExport:
    def test_end_to_end(self, service, draft, drafts, users, records):
        result = service.export(OWNER, draft.id)

        prs = Presentation(io.BytesIO(result.document.content))
        assert len(prs.slides) == 5
        assert result.record.slide_count == 5
        assert result.record.size_bytes == result.document.size_bytes
        assert result.record.file_url.startswith("https://cdn.example.com/presentations/")
        assert result.stale is False

        assert drafts.get(draft.id).status == DraftStatus.COMPLETED
        assert users.get(OWNER).presentations_count == 2
        assert records.list_for_owner(OWNER) == [result.record]

    def test_record_fields(self, service, draft):
        record = service.export(OWNER, draft.id).record
        assert record.draft_id == draft.id
        assert record.theme_id == "executive"
        assert record.title == "Solar Power"
        assert record.file_format == "pptx"

    def test_uploads_to_configured_folder(self, drafts, users, records, storage, draft):
        service = ExportService(drafts, users, records, storage,
                                settings=Settings(upload_folder="decks"))
        service.export(OWNER, draft.id)
        _, folder, id_hint = storage.upload.call_args[0]
        assert folder == "decks"
        assert id_hint == draft.id

    def test_chart_slide_exported_with_chart(self, service, draft):
        prs = Presentation(io.BytesIO(service.export(OWNER, draft.id).document.content))
        assert any(shape.has_chart for shape in prs.slides[3].shapes)

    def test_premium_user_not_capped(self, service, draft_service):
        draft = draft_service.create_draft("pro", "Deck", "en", "nexa",
                                           _five_slide_outline())
        assert service.export("pro", draft.id).record.theme_id == "nexa"


# ---------------------------------------------------------------------------
# Gates
# ---------------------------------------------------------------------------

class TestGates:
    def test_quota_exceeded(self, service, draft_service, drafts, storage):
        draft = draft_service.create_draft("capped", "Deck", "en", "executive",
                                           _five_slide_outline())
        with pytest.raises(QuotaExceededError) as exc_info:
            service.export("capped", draft.id)
        assert exc_info.value.status_code == 403
        assert drafts.get(draft.id).status == DraftStatus.DRAFT
        storage.upload.assert_not_called()

    def test_free_limit_from_environment(self, monkeypatch, drafts, users, records,
                                         storage, draft_service, draft):
        monkeypatch.setenv("SLIDESMIND_FREE_LIMIT", "2")
        service = ExportService(drafts, users, records, storage, settings=Settings())
        service.export(OWNER, draft.id)

        second = draft_service.duplicate_draft(OWNER, draft.id)
        with pytest.raises(QuotaExceededError, match="Free limit of 2"):
            service.export(OWNER, second.id)
        assert users.get(OWNER).presentations_count == 2

    def test_raised_free_limit_lets_capped_user_export(self, drafts, users, records,
                                                       storage, draft_service):
        service = ExportService(drafts, users, records, storage,
                                settings=Settings(free_limit=5))
        draft = draft_service.create_draft("capped", "Deck", "en", "executive",
                                           _five_slide_outline())
        service.export("capped", draft.id)
        assert users.get("capped").presentations_count == 4

    def test_premium_theme_for_free_user(self, service, draft_service, drafts):
        draft = draft_service.create_draft(OWNER, "Deck", "en", "nexa",
                                           _five_slide_outline())
        with pytest.raises(PremiumRequiredError):
            service.export(OWNER, draft.id)
        assert drafts.get(draft.id).status == DraftStatus.DRAFT

    def test_unknown_user(self, service, draft):
        with pytest.raises(NotFoundError) as exc_info:
            service.export("ghost", draft.id)
        assert exc_info.value.kind == "user"

    def test_foreign_draft(self, service, draft, users):
        users.save(UserAccount(id="other"))
        with pytest.raises(NotFoundError):
            service.export("other", draft.id)

    def test_empty_draft(self, service, draft, draft_service, drafts):
        draft_service.update_draft(OWNER, draft.id, slides=[])
        with pytest.raises(ValidationFailure):
            service.export(OWNER, draft.id)
        assert drafts.get(draft.id).status == DraftStatus.DRAFT

    def test_counter_unchanged_on_gate(self, service, draft_service, users):
        draft = draft_service.create_draft(OWNER, "Deck", "en", "nexa",
                                           _five_slide_outline())
        with pytest.raises(PremiumRequiredError):
            service.export(OWNER, draft.id)
        assert users.get(OWNER).presentations_count == 1


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------

class TestFailures:
    def test_storage_failure_marks_failed(self, service, storage, draft, drafts,
                                          users, records):
        storage.upload.side_effect = StorageFailure("bucket unavailable")
        with pytest.raises(StorageFailure):
            service.export(OWNER, draft.id)

        stored = drafts.get(draft.id)
        assert stored.status == DraftStatus.FAILED
        assert stored.last_error == "bucket unavailable"
        assert users.get(OWNER).presentations_count == 1
        assert records.list_for_owner(OWNER) == []

    def test_unexpected_upload_error_wrapped(self, service, storage, draft, drafts):
        storage.upload.side_effect = ConnectionError("reset by peer")
        with pytest.raises(StorageFailure, match="reset by peer"):
            service.export(OWNER, draft.id)
        assert drafts.get(draft.id).status == DraftStatus.FAILED

    def test_render_failure_marks_failed(self, drafts, users, records, storage, draft):
        encoder = MagicMock()
        encoder.encode.side_effect = RuntimeError("disk full")
        service = ExportService(drafts, users, records, storage,
                                assembler=DocumentAssembler(encoder=encoder))
        with pytest.raises(RenderFailure):
            service.export(OWNER, draft.id)
        assert drafts.get(draft.id).status == DraftStatus.FAILED
        storage.upload.assert_not_called()

    def test_reset_failed(self, service, storage, draft, drafts):
        storage.upload.side_effect = StorageFailure("bucket unavailable")
        with pytest.raises(StorageFailure):
            service.export(OWNER, draft.id)

        reset = service.reset_failed(OWNER, draft.id)
        assert reset.status == DraftStatus.DRAFT
        assert reset.last_error is None
        assert drafts.get(draft.id).status == DraftStatus.DRAFT

    def test_reset_requires_failed(self, service, draft):
        with pytest.raises(ValidationFailure):
            service.reset_failed(OWNER, draft.id)

    def test_retry_after_reset(self, service, storage, draft, users):
        original = storage.upload.side_effect
        storage.upload.side_effect = StorageFailure("bucket unavailable")
        with pytest.raises(StorageFailure):
            service.export(OWNER, draft.id)
        service.reset_failed(OWNER, draft.id)

        storage.upload.side_effect = original
        assert service.export(OWNER, draft.id).record.slide_count == 5
        assert users.get(OWNER).presentations_count == 2


# ---------------------------------------------------------------------------
# Concurrent edits
# ---------------------------------------------------------------------------

class TestStaleExport:
    def test_edit_during_export_flags_stale(self, drafts, users, records, storage,
                                            draft, draft_service):
        real = DocumentAssembler()

        def assemble_with_edit(d, theme):
            draft_service.update_draft(OWNER, d.id, title="Edited meanwhile")
            return real.assemble(d, theme)

        assembler = MagicMock()
        assembler.assemble.side_effect = assemble_with_edit
        service = ExportService(drafts, users, records, storage, assembler=assembler)

        result = service.export(OWNER, draft.id)
        assert result.stale is True
        assert result.record.title == "Solar Power"

        stored = drafts.get(draft.id)
        assert stored.title == "Edited meanwhile"
        assert stored.status == DraftStatus.COMPLETED

    def test_no_edit_not_stale(self, service, draft):
        assert service.export(OWNER, draft.id).stale is False


# ---------------------------------------------------------------------------
# Local storage
# ---------------------------------------------------------------------------

class TestLocalDirectoryStorage:
    def test_writes_file(self, tmp_path):
        storage = LocalDirectoryStorage(tmp_path)
        result = storage.upload(b"PK\x03\x04data", "presentations", "draft-1")
        assert result.storage_id.startswith("presentations/draft-1-")
        assert result.storage_id.endswith(".pptx")
        assert (tmp_path / result.storage_id).read_bytes() == b"PK\x03\x04data"
        assert result.url.startswith("file://")
        assert result.size_bytes == 8

    def test_base_url(self, tmp_path):
        storage = LocalDirectoryStorage(tmp_path, base_url="https://files.example.com/")
        result = storage.upload(b"\x89PNG....", "thumbs", "t")
        assert result.url == f"https://files.example.com/{result.storage_id}"
        assert result.storage_id.endswith(".png")

    def test_unique_ids(self, tmp_path):
        storage = LocalDirectoryStorage(tmp_path)
        first = storage.upload(b"PK", "f", "same")
        second = storage.upload(b"PK", "f", "same")
        assert first.storage_id != second.storage_id

    def test_write_error(self, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("not a directory")
        storage = LocalDirectoryStorage(blocker)
        with pytest.raises(StorageFailure):
            storage.upload(b"PK", "presentations", "x")

    def test_export_to_disk(self, tmp_path, drafts, users, records, draft):
        service = ExportService(drafts, users, records, LocalDirectoryStorage(tmp_path))
        record = service.export(OWNER, draft.id).record
        saved = tmp_path / record.storage_id
        assert saved.exists()
        assert len(Presentation(str(saved)).slides) == 5
