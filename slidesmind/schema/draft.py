"""Draft models - the user-editable content that the renderer consumes.

A PresentationDraft exclusively owns an ordered list of Slides.  Slide
``position`` is the authoritative display order and is kept as a dense
0..n-1 sequence by every mutating operation (see
``slidesmind.processor.drafts``).
"""

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SlideType(Enum):
    """Closed set of slide tags a theme's layouts may key on."""
    TITLE = "title"
    PLAN = "plan"
    CONTENT = "content"
    TWO_COLUMN = "twoColumn"
    TIMELINE = "timeline"
    COMPARISON = "comparison"
    CARDS = "cards"
    STATS = "stats"
    CHART = "chart"
    QUOTE = "quote"
    CLOSING = "closing"


class SlideLayout(Enum):
    """Display-variant hint, independent of the slide type."""
    DEFAULT = "default"
    CENTERED = "centered"
    SPLIT = "split"


class DraftStatus(Enum):
    """Export lifecycle: draft -> generating -> completed | failed."""
    DRAFT = "draft"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def _parse_time(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return utcnow()


# ---------------------------------------------------------------------------
# Slide content
# ---------------------------------------------------------------------------

@dataclass
class Stat:
    """One stat card: a headline value with label and description."""
    label: str
    value: str
    description: str = ""
    icon: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"label": self.label, "value": self.value,
                             "description": self.description}
        if self.icon:
            d["icon"] = self.icon
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Stat":
        return cls(
            label=str(d.get("label", "")),
            value=str(d.get("value", "")),
            description=str(d.get("description") or ""),
            icon=d.get("icon"),
        )


@dataclass
class Quote:
    text: str
    author: str = ""

    def to_dict(self) -> dict:
        return {"text": self.text, "author": self.author}

    @classmethod
    def from_dict(cls, d: dict) -> "Quote":
        return cls(text=str(d.get("text", "")), author=str(d.get("author") or ""))


@dataclass
class ChartPoint:
    """A chart data point.  Either field may be missing in stored data."""
    label: str | None
    value: float | None
    color: str | None = None

    @property
    def is_valid(self) -> bool:
        return self.label is not None and self.value is not None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"label": self.label, "value": self.value}
        if self.color:
            d["color"] = self.color
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ChartPoint":
        value = d.get("value")
        if value is not None and not isinstance(value, bool):
            try:
                value = float(value)
            except (TypeError, ValueError):
                value = None
        elif isinstance(value, bool):
            value = None
        label = d.get("label")
        return cls(
            label=str(label) if label is not None else None,
            value=value,
            color=d.get("color"),
        )


@dataclass
class Slide:
    """One editable slide.  ``content`` semantics depend on ``type``."""
    id: str
    type: SlideType
    title: str = ""
    subtitle: str = ""
    content: list[str] = field(default_factory=list)
    position: int = 0
    stats: list[Stat] = field(default_factory=list)
    quote: Quote | None = None
    chart_data: list[ChartPoint] = field(default_factory=list)
    layout: SlideLayout = SlideLayout.DEFAULT
    notes: str = ""

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "content": list(self.content),
            "position": self.position,
            "layout": self.layout.value,
        }
        if self.subtitle:
            d["subtitle"] = self.subtitle
        if self.stats:
            d["stats"] = [s.to_dict() for s in self.stats]
        if self.quote:
            d["quote"] = self.quote.to_dict()
        if self.chart_data:
            d["chartData"] = [p.to_dict() for p in self.chart_data]
        if self.notes:
            d["notes"] = self.notes
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "Slide":
        content = d.get("content") or []
        if isinstance(content, str):
            content = [content]
        return cls(
            id=str(d.get("id") or new_id()),
            type=SlideType(d.get("type", "content")),
            title=str(d.get("title") or ""),
            subtitle=str(d.get("subtitle") or ""),
            content=[str(c) for c in content],
            position=int(d.get("position", 0)),
            stats=[Stat.from_dict(s) for s in d.get("stats") or []],
            quote=Quote.from_dict(d["quote"]) if d.get("quote") else None,
            chart_data=[ChartPoint.from_dict(p) for p in d.get("chartData") or []],
            layout=SlideLayout(d.get("layout") or "default"),
            notes=str(d.get("notes") or ""),
        )


# ---------------------------------------------------------------------------
# Draft
# ---------------------------------------------------------------------------

@dataclass
class PresentationDraft:
    """A user's pre-export slide deck."""
    id: str
    owner_id: str
    title: str
    topic: str
    language: str
    theme_id: str
    slides: list[Slide] = field(default_factory=list)
    status: DraftStatus = DraftStatus.DRAFT
    last_error: str | None = None
    version: int = 0
    created_at: datetime = field(default_factory=utcnow)
    last_edited_at: datetime = field(default_factory=utcnow)

    def ordered_slides(self) -> list[Slide]:
        """Slides in ascending ``position`` order."""
        return sorted(self.slides, key=lambda s: s.position)

    def find_slide(self, slide_id: str) -> Slide | None:
        for slide in self.slides:
            if slide.id == slide_id:
                return slide
        return None

    def renumber(self) -> None:
        """Reassign ``position = index`` in current list order."""
        for index, slide in enumerate(self.slides):
            slide.position = index

    def touch(self) -> None:
        """Record an edit: bump the version and the edit timestamp."""
        self.version += 1
        self.last_edited_at = utcnow()

    def summary(self) -> "DraftSummary":
        return DraftSummary(
            id=self.id,
            title=self.title,
            topic=self.topic,
            theme_id=self.theme_id,
            slide_count=len(self.slides),
            status=self.status,
            last_edited_at=self.last_edited_at,
            created_at=self.created_at,
        )

    def clone(self) -> "PresentationDraft":
        return copy.deepcopy(self)

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "ownerId": self.owner_id,
            "title": self.title,
            "topic": self.topic,
            "language": self.language,
            "themeId": self.theme_id,
            "status": self.status.value,
            "version": self.version,
            "createdAt": self.created_at.isoformat(),
            "lastEditedAt": self.last_edited_at.isoformat(),
            "slides": [s.to_dict() for s in self.slides],
        }
        if self.last_error:
            d["lastError"] = self.last_error
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "PresentationDraft":
        return cls(
            id=str(d.get("id") or new_id()),
            owner_id=str(d.get("ownerId", "")),
            title=d.get("title", ""),
            topic=d.get("topic", d.get("title", "")),
            language=d.get("language", "en"),
            theme_id=d.get("themeId") or d.get("themeSlug", ""),
            slides=[Slide.from_dict(s) for s in d.get("slides", [])],
            status=DraftStatus(d.get("status", "draft")),
            last_error=d.get("lastError"),
            version=int(d.get("version", 0)),
            created_at=_parse_time(d.get("createdAt")),
            last_edited_at=_parse_time(d.get("lastEditedAt")),
        )


@dataclass
class DraftSummary:
    """List-view projection of a draft (no slide content)."""
    id: str
    title: str
    topic: str
    theme_id: str
    slide_count: int
    status: DraftStatus
    last_edited_at: datetime
    created_at: datetime


# ---------------------------------------------------------------------------
# Export records and accounts
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PresentationRecord:
    """A completed export.  Append-only; never mutated after creation."""
    id: str
    owner_id: str
    draft_id: str
    title: str
    topic: str
    language: str
    theme_id: str
    file_url: str
    storage_id: str
    slide_count: int
    size_bytes: int
    file_format: str = "pptx"
    created_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ownerId": self.owner_id,
            "draftId": self.draft_id,
            "title": self.title,
            "topic": self.topic,
            "language": self.language,
            "themeId": self.theme_id,
            "fileUrl": self.file_url,
            "storageId": self.storage_id,
            "slideCount": self.slide_count,
            "sizeBytes": self.size_bytes,
            "fileFormat": self.file_format,
            "createdAt": self.created_at.isoformat(),
        }


@dataclass
class UserAccount:
    """The parts of a user the export gate needs."""
    id: str
    is_premium: bool = False
    presentations_count: int = 0

    def at_free_limit(self, free_limit: int) -> bool:
        """True when a free user has used up *free_limit* exports."""
        return not self.is_premium and self.presentations_count >= free_limit
