"""Processor module for slidesmind — drafts, outlines, export, thumbnails."""

from .drafts import (
    DraftService,
    DraftStore,
    InMemoryDraftStore,
)
from .export import (
    ExportResult,
    ExportService,
    InMemoryRecordStore,
    InMemoryUserStore,
    LocalDirectoryStorage,
    ObjectStorage,
    UploadResult,
)
from .outline import (
    Outline,
    OutlineService,
    OutlineSlide,
    clamp_slide_count,
    fallback_outline,
    parse_outline,
)
from .thumbnails import ThumbnailService, placeholder_url, slide_html
