"""Draft editing service — owner-scoped CRUD over presentation drafts.

Every operation takes the caller's ``owner_id``.  A draft that does not
exist and a draft owned by someone else are reported the same way
(NotFoundError) so callers cannot probe for other users' drafts.

Slide ``position`` stays a dense 0..n-1 sequence after every mutation,
and every mutation bumps the draft's ``version`` and ``last_edited_at``.
"""

from typing import Any, Callable, Protocol

import structlog

from slidesmind.errors import NotFoundError, ValidationFailure
from slidesmind.processor.outline import Outline
from slidesmind.schema.builtin_themes import get_builtin_theme
from slidesmind.schema.draft import (
    ChartPoint,
    DraftStatus,
    DraftSummary,
    PresentationDraft,
    Quote,
    Slide,
    SlideLayout,
    SlideType,
    Stat,
    new_id,
    utcnow,
)
from slidesmind.schema.theme import ThemeDescriptor

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 50
NEW_SLIDE_TITLE = "New Slide"
NEW_SLIDE_CONTENT = "Add your content here"
COPY_SUFFIX = " (Copy)"

# Fields update_slide never lets a caller overwrite.
_PROTECTED_FIELDS = ("id", "position")


class DraftStore(Protocol):
    """Persistence for drafts; implementations own copy semantics."""

    def get(self, draft_id: str) -> PresentationDraft | None: ...

    def save(self, draft: PresentationDraft) -> None: ...

    def delete(self, draft_id: str) -> bool: ...

    def list_for_owner(self, owner_id: str) -> list[PresentationDraft]: ...


class InMemoryDraftStore:
    """Dict-backed store.  Hands out deep copies so callers cannot alias."""

    def __init__(self) -> None:
        self._drafts: dict[str, PresentationDraft] = {}

    def get(self, draft_id: str) -> PresentationDraft | None:
        draft = self._drafts.get(draft_id)
        return draft.clone() if draft else None

    def save(self, draft: PresentationDraft) -> None:
        self._drafts[draft.id] = draft.clone()

    def delete(self, draft_id: str) -> bool:
        return self._drafts.pop(draft_id, None) is not None

    def list_for_owner(self, owner_id: str) -> list[PresentationDraft]:
        return [d.clone() for d in self._drafts.values() if d.owner_id == owner_id]


# ---------------------------------------------------------------------------
# Slide change application
# ---------------------------------------------------------------------------

def _apply_slide_changes(slide: Slide, changes: dict[str, Any]) -> None:
    """Shallow-merge *changes* (dict-form keys) onto *slide*."""
    for key, value in changes.items():
        if key in _PROTECTED_FIELDS:
            continue
        if key == "type":
            slide.type = SlideType(value)
        elif key == "layout":
            slide.layout = SlideLayout(value or "default")
        elif key == "content":
            slide.content = [value] if isinstance(value, str) else [str(c) for c in value or []]
        elif key == "stats":
            slide.stats = [Stat.from_dict(s) for s in value or []]
        elif key == "quote":
            slide.quote = Quote.from_dict(value) if value else None
        elif key in ("chartData", "chart_data"):
            slide.chart_data = [ChartPoint.from_dict(p) for p in value or []]
        elif key in ("title", "subtitle", "notes"):
            setattr(slide, key, str(value or ""))
        else:
            raise ValidationFailure(f"Unknown slide field: {key!r}")


def _coerce_slide(raw: Slide | dict) -> Slide:
    return raw if isinstance(raw, Slide) else Slide.from_dict(raw)


# ---------------------------------------------------------------------------
# DraftService
# ---------------------------------------------------------------------------

class DraftService:
    """Owner-scoped operations on drafts.

    Parameters
    ----------
    store : DraftStore
    theme_lookup : callable, optional
        ``slug -> ThemeDescriptor``; raises NotFoundError for unknown slugs.
        Defaults to the built-in themes.
    page_size : int
        Cap on ``list_drafts`` results.
    """

    def __init__(self, store: DraftStore,
                 theme_lookup: Callable[[str], ThemeDescriptor] = get_builtin_theme,
                 page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.store = store
        self.theme_lookup = theme_lookup
        self.page_size = page_size

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _load(self, owner_id: str, draft_id: str) -> PresentationDraft:
        draft = self.store.get(draft_id)
        if draft is None or draft.owner_id != owner_id:
            raise NotFoundError("draft", draft_id)
        return draft

    def _commit(self, draft: PresentationDraft, event: str, **fields) -> PresentationDraft:
        draft.touch()
        self.store.save(draft)
        logger.info(event, draft_id=draft.id, version=draft.version, **fields)
        return draft

    # ------------------------------------------------------------------
    # Create / read
    # ------------------------------------------------------------------

    def create_draft(self, owner_id: str, topic: str, language: str,
                     theme_id: str, outline: Outline) -> PresentationDraft:
        """New draft with one slide per outline entry, in outline order."""
        theme = self.theme_lookup(theme_id)
        slides = [
            Slide(
                id=new_id(),
                type=entry.type,
                title=entry.title,
                subtitle=entry.subtitle,
                content=list(entry.content),
                position=index,
                stats=list(entry.stats),
                quote=entry.quote,
                chart_data=list(entry.chart_data),
                notes=entry.notes,
            )
            for index, entry in enumerate(outline.slides)
        ]
        draft = PresentationDraft(
            id=new_id(),
            owner_id=owner_id,
            title=outline.title or topic,
            topic=topic,
            language=language,
            theme_id=theme.id,
            slides=slides,
            status=DraftStatus.DRAFT,
        )
        self.store.save(draft)
        logger.info("draft_created", draft_id=draft.id, owner_id=owner_id,
                    theme=theme.id, slides=len(slides), fallback=outline.fallback)
        return draft

    def get_draft(self, owner_id: str, draft_id: str) -> PresentationDraft:
        return self._load(owner_id, draft_id)

    def list_drafts(self, owner_id: str) -> list[DraftSummary]:
        """Summaries, most recently edited first, capped at ``page_size``."""
        drafts = sorted(self.store.list_for_owner(owner_id),
                        key=lambda d: d.last_edited_at, reverse=True)
        return [d.summary() for d in drafts[: self.page_size]]

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update_draft(self, owner_id: str, draft_id: str, title: str | None = None,
                     slides: list[Slide | dict] | None = None) -> PresentationDraft:
        """Replace title and/or the whole slide list.

        A replaced slide list is renumbered densely in the order given.
        """
        draft = self._load(owner_id, draft_id)
        if title:
            draft.title = title
        if slides is not None:
            draft.slides = [_coerce_slide(s) for s in slides]
            draft.renumber()
        return self._commit(draft, "draft_updated", slides=len(draft.slides))

    def update_slide(self, owner_id: str, draft_id: str, slide_id: str,
                     changes: dict[str, Any]) -> Slide:
        """Merge *changes* over one slide; ``id`` and ``position`` are kept."""
        draft = self._load(owner_id, draft_id)
        slide = draft.find_slide(slide_id)
        if slide is None:
            raise NotFoundError("slide", slide_id)
        _apply_slide_changes(slide, changes)
        self._commit(draft, "slide_updated", slide_id=slide_id,
                     fields=sorted(changes))
        return slide

    def add_slide(self, owner_id: str, draft_id: str, position: int | None = None,
                  slide_type: SlideType | str | None = None) -> Slide:
        """Insert a placeholder slide; out-of-range positions are clamped."""
        draft = self._load(owner_id, draft_id)
        slides = draft.ordered_slides()
        index = len(slides) if position is None else max(0, min(position, len(slides)))
        slide = Slide(
            id=new_id(),
            type=SlideType(slide_type) if slide_type else SlideType.CONTENT,
            title=NEW_SLIDE_TITLE,
            content=[NEW_SLIDE_CONTENT],
        )
        slides.insert(index, slide)
        draft.slides = slides
        draft.renumber()
        self._commit(draft, "slide_added", slide_id=slide.id, position=slide.position)
        return slide

    def delete_slide(self, owner_id: str, draft_id: str, slide_id: str) -> PresentationDraft:
        """Remove a slide and close the gap in positions."""
        draft = self._load(owner_id, draft_id)
        if draft.find_slide(slide_id) is None:
            raise NotFoundError("slide", slide_id)
        draft.slides = [s for s in draft.ordered_slides() if s.id != slide_id]
        draft.renumber()
        return self._commit(draft, "slide_deleted", slide_id=slide_id)

    def reorder_slides(self, owner_id: str, draft_id: str,
                       order: list[str]) -> PresentationDraft:
        """Rebuild the slide list from *order*.

        *order* is authoritative: slides missing from it are dropped and
        ids in it that match no slide are ignored.
        """
        draft = self._load(owner_id, draft_id)
        by_id = {s.id: s for s in draft.slides}
        seen: set[str] = set()
        reordered = []
        for slide_id in order:
            if slide_id in by_id and slide_id not in seen:
                reordered.append(by_id[slide_id])
                seen.add(slide_id)
        dropped = len(draft.slides) - len(reordered)
        draft.slides = reordered
        draft.renumber()
        return self._commit(draft, "slides_reordered", slides=len(reordered),
                            dropped=dropped)

    # ------------------------------------------------------------------
    # Duplicate / delete
    # ------------------------------------------------------------------

    def duplicate_draft(self, owner_id: str, draft_id: str) -> PresentationDraft:
        """Deep copy with fresh draft and slide ids, reset to ``draft``."""
        source = self._load(owner_id, draft_id)
        copy = source.clone()
        copy.id = new_id()
        copy.title = f"{source.title}{COPY_SUFFIX}"
        copy.status = DraftStatus.DRAFT
        copy.last_error = None
        copy.version = 0
        copy.created_at = copy.last_edited_at = utcnow()
        for slide in copy.slides:
            slide.id = new_id()
        copy.slides = sorted(copy.slides, key=lambda s: s.position)
        copy.renumber()
        self.store.save(copy)
        logger.info("draft_duplicated", draft_id=copy.id, source_id=source.id)
        return copy

    def delete_draft(self, owner_id: str, draft_id: str) -> None:
        self._load(owner_id, draft_id)
        self.store.delete(draft_id)
        logger.info("draft_deleted", draft_id=draft_id, owner_id=owner_id)
