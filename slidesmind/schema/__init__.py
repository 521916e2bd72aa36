"""Schema package — typed models for drafts and theme descriptors.

Provides the contract between draft editing, the layout renderer and the
PPTX encoder:

- draft.py: Slide, PresentationDraft, export records and accounts
- theme.py: ThemeDescriptor and its layout directives
- formatting.py: Prefix / template formatters for list and grid text
- builtin_themes.py: The executive, slancia and nexa themes
- loader.py: YAML serialization/deserialization
"""

from .builtin_themes import get_builtin_theme, list_builtin_themes
from .draft import (
    ChartPoint,
    DraftStatus,
    DraftSummary,
    PresentationDraft,
    PresentationRecord,
    Quote,
    Slide,
    SlideLayout,
    SlideType,
    Stat,
    UserAccount,
)
from .formatting import (
    TimelineStep,
    bullet_prefix,
    format_plan_item,
    format_stat,
    number_marker,
    split_columns,
    split_timeline_item,
    timeline_steps,
)
from .loader import load_draft, load_theme, save_draft, save_theme
from .theme import (
    BulletSpec,
    BulletStyle,
    BulletStyleType,
    ChartSpec,
    ColumnSpec,
    FontConfig,
    FontType,
    GridSpec,
    ItemDecoration,
    LayoutConfig,
    LineSpec,
    PlanSpec,
    PlanStyle,
    PlanStyleType,
    ShapeKind,
    ShapeSpec,
    TextSpec,
    ThemeDescriptor,
    ZIndex,
)

__all__ = [
    # Draft models
    "ChartPoint",
    "DraftStatus",
    "DraftSummary",
    "PresentationDraft",
    "PresentationRecord",
    "Quote",
    "Slide",
    "SlideLayout",
    "SlideType",
    "Stat",
    "UserAccount",
    # Theme models
    "BulletSpec",
    "BulletStyle",
    "BulletStyleType",
    "ChartSpec",
    "ColumnSpec",
    "FontConfig",
    "FontType",
    "GridSpec",
    "ItemDecoration",
    "LayoutConfig",
    "LineSpec",
    "PlanSpec",
    "PlanStyle",
    "PlanStyleType",
    "ShapeKind",
    "ShapeSpec",
    "TextSpec",
    "ThemeDescriptor",
    "ZIndex",
    # Built-in themes
    "get_builtin_theme",
    "list_builtin_themes",
    # Loader
    "load_draft",
    "load_theme",
    "save_draft",
    "save_theme",
    # Formatting
    "TimelineStep",
    "bullet_prefix",
    "format_plan_item",
    "format_stat",
    "number_marker",
    "split_columns",
    "split_timeline_item",
    "timeline_steps",
]
