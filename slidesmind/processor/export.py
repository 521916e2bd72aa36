"""Export pipeline — quota gate, render, upload, record.

State machine for a draft during export::

    draft ──► generating ──► completed
                   │
                   └──► failed ──(reset_failed)──► draft

``draft → generating`` is persisted before rendering starts.
``generating → completed`` happens only after the document was produced
and stored.  A render or storage error moves the draft to ``failed`` with
the message kept in ``last_error`` and re-raises; nothing is retried.

The draft's ``version`` is captured when the export starts.  If an edit
lands before completion the export still completes, but the result is
flagged ``stale`` and a warning is logged.
"""

import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from slidesmind.config import Settings
from slidesmind.errors import (
    NotFoundError,
    PremiumRequiredError,
    QuotaExceededError,
    RenderFailure,
    StorageFailure,
    ValidationFailure,
)
from slidesmind.generator.assembler import AssembledDocument, DocumentAssembler
from slidesmind.processor.drafts import DraftStore
from slidesmind.schema.builtin_themes import get_builtin_theme
from slidesmind.schema.draft import (
    DraftStatus,
    PresentationDraft,
    PresentationRecord,
    UserAccount,
    new_id,
)

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Collaborator contracts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UploadResult:
    url: str
    size_bytes: int
    storage_id: str


class ObjectStorage(Protocol):
    def upload(self, content: bytes, folder: str, id_hint: str) -> UploadResult: ...


class UserStore(Protocol):
    def get(self, user_id: str) -> UserAccount | None: ...

    def save(self, user: UserAccount) -> None: ...


class RecordStore(Protocol):
    def add(self, record: PresentationRecord) -> None: ...

    def list_for_owner(self, owner_id: str) -> list[PresentationRecord]: ...


class InMemoryUserStore:
    def __init__(self, users: list[UserAccount] | None = None) -> None:
        self._users = {u.id: u for u in users or []}

    def get(self, user_id: str) -> UserAccount | None:
        return self._users.get(user_id)

    def save(self, user: UserAccount) -> None:
        self._users[user.id] = user


class InMemoryRecordStore:
    """Append-only list of completed exports."""

    def __init__(self) -> None:
        self._records: list[PresentationRecord] = []

    def add(self, record: PresentationRecord) -> None:
        self._records.append(record)

    def list_for_owner(self, owner_id: str) -> list[PresentationRecord]:
        return [r for r in self._records if r.owner_id == owner_id]


# ---------------------------------------------------------------------------
# Local storage
# ---------------------------------------------------------------------------

def _extension_for(content: bytes) -> str:
    if content.startswith(b"\x89PNG"):
        return ".png"
    if content.startswith(b"PK"):
        return ".pptx"
    if content.lstrip().startswith(b"<"):
        return ".html"
    return ".bin"


class LocalDirectoryStorage:
    """Writes uploads under ``root/<folder>/``.

    Parameters
    ----------
    root : str or Path
    base_url : str, optional
        Public prefix for returned URLs; ``file://`` URIs otherwise.
    """

    def __init__(self, root: str | Path, base_url: str | None = None) -> None:
        self.root = Path(root)
        self.base_url = base_url.rstrip("/") if base_url else None

    def upload(self, content: bytes, folder: str, id_hint: str) -> UploadResult:
        storage_id = f"{folder}/{id_hint}-{uuid.uuid4().hex[:8]}{_extension_for(content)}"
        path = self.root / storage_id
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(content)
        except OSError as exc:
            raise StorageFailure(f"Could not write {path}: {exc}") from exc

        if self.base_url:
            url = f"{self.base_url}/{storage_id}"
        else:
            url = path.resolve().as_uri()
        return UploadResult(url=url, size_bytes=len(content), storage_id=storage_id)


# ---------------------------------------------------------------------------
# ExportService
# ---------------------------------------------------------------------------

@dataclass
class ExportResult:
    record: PresentationRecord
    document: AssembledDocument
    stale: bool = False


class ExportService:
    """Runs one export end to end inside the caller's request.

    Parameters
    ----------
    drafts, users, records : stores
    storage : ObjectStorage
    assembler : DocumentAssembler, optional
    theme_lookup : callable, optional
        ``slug -> ThemeDescriptor``; defaults to the built-in themes.
    settings : Settings, optional
    """

    def __init__(self, drafts: DraftStore, users: UserStore, records: RecordStore,
                 storage: ObjectStorage, assembler: DocumentAssembler | None = None,
                 theme_lookup=get_builtin_theme,
                 settings: Settings | None = None) -> None:
        self.drafts = drafts
        self.users = users
        self.records = records
        self.storage = storage
        self.assembler = assembler or DocumentAssembler()
        self.theme_lookup = theme_lookup
        self.settings = settings or Settings()

    def _load_draft(self, owner_id: str, draft_id: str) -> PresentationDraft:
        draft = self.drafts.get(draft_id)
        if draft is None or draft.owner_id != owner_id:
            raise NotFoundError("draft", draft_id)
        return draft

    def _set_status(self, draft: PresentationDraft, status: DraftStatus,
                    error: str | None = None) -> None:
        draft.status = status
        draft.last_error = error
        self.drafts.save(draft)
        logger.info("export_status", draft_id=draft.id, status=status.value)

    def _fail(self, draft: PresentationDraft, exc: Exception) -> None:
        # Re-read so a concurrent edit is not overwritten by the stale copy.
        current = self.drafts.get(draft.id) or draft
        self._set_status(current, DraftStatus.FAILED, str(exc))

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self, owner_id: str, draft_id: str) -> ExportResult:
        """Render, upload and record one draft.

        Raises
        ------
        NotFoundError
            Unknown user, draft (or not owned by *owner_id*) or theme.
        QuotaExceededError
            Free user at or above the free limit.
        PremiumRequiredError
            Premium theme requested by a free user.
        ValidationFailure
            The draft has no slides.
        RenderFailure, StorageFailure
            The draft is left in ``failed``.
        """
        user = self.users.get(owner_id)
        if user is None:
            raise NotFoundError("user", owner_id)
        free_limit = self.settings.free_limit
        if user.at_free_limit(free_limit):
            raise QuotaExceededError(
                f"Free limit of {free_limit} presentations reached")

        draft = self._load_draft(owner_id, draft_id)
        theme = self.theme_lookup(draft.theme_id)
        if theme.is_premium and not user.is_premium:
            raise PremiumRequiredError(f"Theme {theme.id!r} requires a premium account")
        if not draft.slides:
            raise ValidationFailure(f"Draft {draft.id} has no slides to export")

        started_version = draft.version
        self._set_status(draft, DraftStatus.GENERATING)

        try:
            document = self.assembler.assemble(draft, theme)
        except RenderFailure as exc:
            self._fail(draft, exc)
            raise

        try:
            upload = self.storage.upload(document.content,
                                         self.settings.upload_folder, draft.id)
        except Exception as exc:
            logger.error("export_upload_failed", draft_id=draft.id, error=str(exc))
            self._fail(draft, exc)
            if isinstance(exc, StorageFailure):
                raise
            raise StorageFailure(f"Upload failed: {exc}") from exc

        record = PresentationRecord(
            id=new_id(),
            owner_id=owner_id,
            draft_id=draft.id,
            title=draft.title,
            topic=draft.topic,
            language=draft.language,
            theme_id=theme.id,
            file_url=upload.url,
            storage_id=upload.storage_id,
            slide_count=document.slide_count,
            size_bytes=upload.size_bytes,
        )
        self.records.add(record)

        current = self.drafts.get(draft.id)
        stale = current is not None and current.version != started_version
        if stale:
            logger.warning("export_stale", draft_id=draft.id,
                           exported_version=started_version,
                           current_version=current.version)
        if current is not None:
            self._set_status(current, DraftStatus.COMPLETED)

        user.presentations_count += 1
        self.users.save(user)
        logger.info("export_completed", draft_id=draft.id, record_id=record.id,
                    slides=record.slide_count, size_bytes=record.size_bytes,
                    presentations_count=user.presentations_count)
        return ExportResult(record=record, document=document, stale=stale)

    def reset_failed(self, owner_id: str, draft_id: str) -> PresentationDraft:
        """Move a ``failed`` draft back to ``draft`` so it can be edited again."""
        draft = self._load_draft(owner_id, draft_id)
        if draft.status != DraftStatus.FAILED:
            raise ValidationFailure(
                f"Draft {draft_id} is {draft.status.value!r}, not 'failed'")
        self._set_status(draft, DraftStatus.DRAFT)
        return draft
