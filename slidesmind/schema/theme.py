"""Theme descriptor models - the contract between themes and the renderer.

A theme is pure data: a named colour palette, heading/body fonts and, per
slide type, a LayoutConfig listing the visual directives (shapes, text
boxes, bullet lists, plan lists, two-column lists, grids) the renderer
applies.  Colours are referenced symbolically by key so swapping the
palette re-colours every slide.

Descriptors are validated when they are parsed: an unknown shape kind, a
bad style type, a colour key the palette does not define, or an empty
``layouts`` map raises ThemeValidationError instead of being skipped
silently at render time.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from slidesmind.errors import ThemeValidationError
from slidesmind.schema.draft import SlideType


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ShapeKind(Enum):
    """Primitive shapes a directive can place."""
    RECT = "rect"
    TRIANGLE = "triangle"
    ROUND_RECT = "roundRect"
    CIRCLE = "circle"
    ELLIPSE = "ellipse"
    LINE = "line"
    DIAMOND = "diamond"
    PENTAGON = "pentagon"
    HEXAGON = "hexagon"
    STAR = "star"
    CHEVRON = "chevron"


class FontType(Enum):
    """Which theme font family a text element uses."""
    HEADING = "heading"
    BODY = "body"


class ZIndex(Enum):
    """Whether a decoration sits behind or in front of the text."""
    BACK = "back"
    FRONT = "front"


class BulletStyleType(Enum):
    BULLET = "bullet"
    NUMBER = "number"
    DASH = "dash"


class PlanStyleType(Enum):
    NUMBERED = "numbered"
    DASH = "dash"
    ICON = "icon"


ALIGNMENTS = ("left", "center", "right", "justify")
VERTICAL_ALIGNMENTS = ("top", "middle", "bottom")
DASH_TYPES = ("solid", "dash", "dot", "dashDot", "lgDash", "sysDash", "sysDot")

# Slide fields a TextSpec may bind to.
TEXT_SOURCES = (
    "slide.title",
    "slide.subtitle",
    "slide.quote.text",
    "slide.quote.author",
    "slide.notes",
)

_HEX_RE = re.compile(r"^#?[0-9A-Fa-f]{6}$")
_DEFAULT_TEXT_KEYS = ("textDark", "text", "defaultText", "mainText")
_FALLBACK_TEXT_COLOR = "#000000"


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

_REQUIRED = object()


def _float(d: dict, key: str, default: Any = _REQUIRED) -> float | None:
    """Read a numeric field, raising ValueError when required and absent."""
    value = d.get(key)
    if value is None:
        if default is _REQUIRED:
            raise ValueError(f"{key!r} is required")
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{key!r} must be a number, got {value!r}")
    return float(value)


def _enum(enum_cls, value: Any, key: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValueError(f"{key!r} must be one of [{allowed}], got {value!r}") from None


def _choice(value: str, allowed: tuple, key: str) -> str:
    if value not in allowed:
        raise ValueError(f"{key!r} must be one of {list(allowed)}, got {value!r}")
    return value


def normalize_hex(value: str) -> str:
    """Return ``#RRGGBB`` in upper case."""
    return "#" + value.lstrip("#").upper()


def is_hex_color(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_RE.match(value))


# ---------------------------------------------------------------------------
# Shape and text directives
# ---------------------------------------------------------------------------

@dataclass
class LineSpec:
    """Stroke for a shape outline."""
    color: str
    width: float = 1.0
    dash_type: str = "solid"

    def color_keys(self) -> list[str]:
        return [self.color]

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"color": self.color, "width": self.width}
        if self.dash_type != "solid":
            d["dashType"] = self.dash_type
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "LineSpec":
        if "color" not in d:
            raise ValueError("line 'color' is required")
        return cls(
            color=d["color"],
            width=_float(d, "width", 1.0),
            dash_type=_choice(d.get("dashType", "solid"), DASH_TYPES, "dashType"),
        )


@dataclass
class ShapeSpec:
    """A positioned primitive shape (inches, slide-relative)."""
    type: ShapeKind
    x: float
    y: float
    w: float
    h: float
    fill: str | None = None
    transparency: float = 0.0             # 0-100
    line: LineSpec | None = None
    rotate: float = 0.0
    radius: float | None = None           # corner radius for roundRect, 0-0.5
    z_index: ZIndex = ZIndex.BACK

    def color_keys(self) -> list[str]:
        keys = [self.fill] if self.fill else []
        if self.line:
            keys.extend(self.line.color_keys())
        return keys

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "type": self.type.value,
            "x": self.x, "y": self.y, "w": self.w, "h": self.h,
        }
        if self.fill:
            d["fill"] = self.fill
        if self.transparency:
            d["transparency"] = self.transparency
        if self.line:
            d["line"] = self.line.to_dict()
        if self.rotate:
            d["rotate"] = self.rotate
        if self.radius is not None:
            d["radius"] = self.radius
        if self.z_index != ZIndex.BACK:
            d["zIndex"] = self.z_index.value
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ShapeSpec":
        transparency = _float(d, "transparency", 0.0)
        if not 0 <= transparency <= 100:
            raise ValueError(f"'transparency' must be 0-100, got {transparency}")
        return cls(
            type=_enum(ShapeKind, d.get("type"), "type"),
            x=_float(d, "x"),
            y=_float(d, "y"),
            w=_float(d, "w"),
            h=_float(d, "h"),
            fill=d.get("fill"),
            transparency=transparency,
            line=LineSpec.from_dict(d["line"]) if d.get("line") else None,
            rotate=_float(d, "rotate", 0.0),
            radius=_float(d, "radius", None),
            z_index=_enum(ZIndex, d.get("zIndex", "back"), "zIndex"),
        )


@dataclass
class TextSpec:
    """A text box bound to a slide field, with a literal fallback."""
    source: str
    x: float
    y: float
    w: float
    h: float
    fallback: str | None = None
    font_type: FontType = FontType.BODY
    font_size: float = 18.0
    font_weight: str = "regular"          # regular | bold
    color: str | None = None          # None: theme default text colour
    align: str = "left"
    valign: str = "top"
    italic: bool = False

    @property
    def bold(self) -> bool:
        return self.font_weight == "bold"

    def color_keys(self) -> list[str]:
        return [self.color] if self.color else []

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "source": self.source,
            "x": self.x, "y": self.y, "w": self.w, "h": self.h,
            "fontType": self.font_type.value,
            "fontSize": self.font_size,
        }
        if self.color:
            d["color"] = self.color
        if self.fallback is not None:
            d["fallback"] = self.fallback
        if self.font_weight != "regular":
            d["fontWeight"] = self.font_weight
        if self.align != "left":
            d["align"] = self.align
        if self.valign != "top":
            d["valign"] = self.valign
        if self.italic:
            d["italic"] = True
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "TextSpec":
        return cls(
            source=_choice(d.get("source"), TEXT_SOURCES, "source"),
            x=_float(d, "x"),
            y=_float(d, "y"),
            w=_float(d, "w"),
            h=_float(d, "h"),
            fallback=d.get("fallback"),
            font_type=_enum(FontType, d.get("fontType", "body"), "fontType"),
            font_size=_float(d, "fontSize", 18.0),
            font_weight=_choice(d.get("fontWeight", "regular"),
                                ("regular", "medium", "bold"), "fontWeight"),
            color=d.get("color"),
            align=_choice(d.get("align", "left"), ALIGNMENTS, "align"),
            valign=_choice(d.get("valign", "top"), VERTICAL_ALIGNMENTS, "valign"),
            italic=bool(d.get("italic", False)),
        )


# ---------------------------------------------------------------------------
# List directives (bullets, plan, columns)
# ---------------------------------------------------------------------------

@dataclass
class ItemDecoration:
    """Background chip drawn behind (or in front of) each list row."""
    enabled: bool = True
    z_index: ZIndex = ZIndex.BACK
    shape: ShapeKind = ShapeKind.ROUND_RECT
    offset_x: float = 0.0
    offset_y: float = 0.0
    width: float | None = None            # defaults to the list width
    height: float | None = None           # defaults to the row height
    fill: str | None = None
    transparency: float = 0.0
    line: LineSpec | None = None
    radius: float | None = None
    padding: float = 0.0

    def color_keys(self) -> list[str]:
        keys = [self.fill] if self.fill else []
        if self.line:
            keys.extend(self.line.color_keys())
        return keys

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "enabled": self.enabled,
            "zIndex": self.z_index.value,
            "shape": self.shape.value,
            "offsetX": self.offset_x,
            "offsetY": self.offset_y,
            "padding": self.padding,
        }
        if self.width is not None:
            d["width"] = self.width
        if self.height is not None:
            d["height"] = self.height
        if self.fill:
            d["fill"] = self.fill
        if self.transparency:
            d["transparency"] = self.transparency
        if self.line:
            d["line"] = self.line.to_dict()
        if self.radius is not None:
            d["radius"] = self.radius
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ItemDecoration":
        return cls(
            enabled=bool(d.get("enabled", True)),
            z_index=_enum(ZIndex, d.get("zIndex", "back"), "zIndex"),
            shape=_enum(ShapeKind, d.get("shape", "roundRect"), "shape"),
            offset_x=_float(d, "offsetX", 0.0),
            offset_y=_float(d, "offsetY", 0.0),
            width=_float(d, "width", None),
            height=_float(d, "height", None),
            fill=d.get("fill"),
            transparency=_float(d, "transparency", 0.0),
            line=LineSpec.from_dict(d["line"]) if d.get("line") else None,
            radius=_float(d, "radius", None),
            padding=_float(d, "padding", 0.0),
        )


@dataclass
class BulletStyle:
    """Prefix rule for a bullet or column list.

    ``prefix`` overrides the default marker; for the ``number`` style it may
    contain ``${number}``.
    """
    type: BulletStyleType = BulletStyleType.BULLET
    prefix: str | None = None

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"type": self.type.value}
        if self.prefix is not None:
            d["prefix"] = self.prefix
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "BulletStyle":
        return cls(
            type=_enum(BulletStyleType, d.get("type", "bullet"), "style.type"),
            prefix=d.get("prefix"),
        )


@dataclass
class PlanStyle:
    """Marker rule for outline (plan) lists."""
    type: PlanStyleType = PlanStyleType.NUMBERED
    format: str = "${number} ${text}"
    number_format: str = "1."
    icon: str = "●"

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "format": self.format,
            "numberFormat": self.number_format,
            "icon": self.icon,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "PlanStyle":
        fmt = d.get("format", "${number} ${text}")
        if "${text}" not in fmt:
            raise ValueError(f"plan 'format' must contain ${{text}}, got {fmt!r}")
        return cls(
            type=_enum(PlanStyleType, d.get("type", "numbered"), "style.type"),
            format=fmt,
            number_format=str(d.get("numberFormat", "1.")),
            icon=d.get("icon", "●"),
        )


@dataclass
class ListSpec:
    """Shared geometry and typography for vertically stacked lists."""
    start_x: float
    start_y: float
    spacing_y: float
    w: float
    h: float | None = None                # row height; defaults to spacing_y
    font_size: float = 18.0
    font_type: FontType = FontType.BODY
    color: str | None = None

    @property
    def row_height(self) -> float:
        return self.h if self.h is not None else self.spacing_y

    def row_y(self, index: int) -> float:
        return self.start_y + index * self.spacing_y

    def color_keys(self) -> list[str]:
        return [self.color] if self.color else []

    def _geometry_dict(self) -> dict:
        d: dict[str, Any] = {
            "startX": self.start_x,
            "startY": self.start_y,
            "spacingY": self.spacing_y,
            "w": self.w,
            "fontSize": self.font_size,
            "fontType": self.font_type.value,
        }
        if self.color:
            d["color"] = self.color
        if self.h is not None:
            d["h"] = self.h
        return d

    @staticmethod
    def _geometry_kwargs(d: dict) -> dict:
        return {
            "start_x": _float(d, "startX"),
            "start_y": _float(d, "startY"),
            "spacing_y": _float(d, "spacingY"),
            "w": _float(d, "w"),
            "h": _float(d, "h", None),
            "font_size": _float(d, "fontSize", 18.0),
            "font_type": _enum(FontType, d.get("fontType", "body"), "fontType"),
            "color": d.get("color"),
        }


@dataclass
class BulletSpec(ListSpec):
    """Bulleted rendering of ``slide.content``."""
    style: BulletStyle = field(default_factory=BulletStyle)
    item_decoration: ItemDecoration | None = None

    def color_keys(self) -> list[str]:
        keys = super().color_keys()
        if self.item_decoration:
            keys.extend(self.item_decoration.color_keys())
        return keys

    def to_dict(self) -> dict:
        d = self._geometry_dict()
        d["style"] = self.style.to_dict()
        if self.item_decoration:
            d["itemDecoration"] = self.item_decoration.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "BulletSpec":
        return cls(
            **cls._geometry_kwargs(d),
            style=BulletStyle.from_dict(d.get("style", {})),
            item_decoration=(ItemDecoration.from_dict(d["itemDecoration"])
                             if d.get("itemDecoration") else None),
        )


@dataclass
class PlanSpec(ListSpec):
    """Outline list with numbered, dash or icon markers."""
    style: PlanStyle = field(default_factory=PlanStyle)
    item_decoration: ItemDecoration | None = None

    def color_keys(self) -> list[str]:
        keys = super().color_keys()
        if self.item_decoration:
            keys.extend(self.item_decoration.color_keys())
        return keys

    def to_dict(self) -> dict:
        d = self._geometry_dict()
        d["style"] = self.style.to_dict()
        if self.item_decoration:
            d["itemDecoration"] = self.item_decoration.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "PlanSpec":
        return cls(
            **cls._geometry_kwargs(d),
            style=PlanStyle.from_dict(d.get("style", {})),
            item_decoration=(ItemDecoration.from_dict(d["itemDecoration"])
                             if d.get("itemDecoration") else None),
        )


@dataclass
class ColumnSpec(ListSpec):
    """One side of a two-column split."""
    style: BulletStyle = field(default_factory=BulletStyle)

    def to_dict(self) -> dict:
        d = self._geometry_dict()
        d["style"] = self.style.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ColumnSpec":
        return cls(
            **cls._geometry_kwargs(d),
            style=BulletStyle.from_dict(d.get("style", {})),
        )


# ---------------------------------------------------------------------------
# Grid directive
# ---------------------------------------------------------------------------

@dataclass
class GridSpec:
    """Card grid for stats or idea cards.

    ``text_format`` may use ``${label}``, ``${value}`` and ``${description}``.
    """
    columns: int
    base_x: float
    base_y: float
    spacing_x: float
    spacing_y: float
    cell_w: float
    cell_h: float
    shape: ShapeKind = ShapeKind.ROUND_RECT
    shape_fill: str | None = None
    shape_line: LineSpec | None = None
    radius: float | None = None
    font_size: float = 16.0
    font_type: FontType = FontType.BODY
    color: str | None = None
    text_format: str | None = None
    align: str = "center"

    def cell_origin(self, index: int) -> tuple[float, float]:
        """Top-left of the cell holding item *index*."""
        column = index % self.columns
        row = index // self.columns
        return (self.base_x + column * self.spacing_x,
                self.base_y + row * self.spacing_y)

    def color_keys(self) -> list[str]:
        keys = [self.color] if self.color else []
        if self.shape_fill:
            keys.append(self.shape_fill)
        if self.shape_line:
            keys.extend(self.shape_line.color_keys())
        return keys

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "columns": self.columns,
            "baseX": self.base_x,
            "baseY": self.base_y,
            "spacingX": self.spacing_x,
            "spacingY": self.spacing_y,
            "cellW": self.cell_w,
            "cellH": self.cell_h,
            "shape": self.shape.value,
            "fontSize": self.font_size,
            "fontType": self.font_type.value,
            "align": self.align,
        }
        if self.color:
            d["color"] = self.color
        if self.shape_fill:
            d["shapeFill"] = self.shape_fill
        if self.shape_line:
            d["shapeLine"] = self.shape_line.to_dict()
        if self.radius is not None:
            d["radius"] = self.radius
        if self.text_format is not None:
            d["textFormat"] = self.text_format
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "GridSpec":
        columns = d.get("columns")
        if isinstance(columns, bool) or not isinstance(columns, int) or columns < 1:
            raise ValueError(f"grid 'columns' must be a positive integer, got {columns!r}")
        return cls(
            columns=columns,
            base_x=_float(d, "baseX"),
            base_y=_float(d, "baseY"),
            spacing_x=_float(d, "spacingX"),
            spacing_y=_float(d, "spacingY"),
            cell_w=_float(d, "cellW"),
            cell_h=_float(d, "cellH"),
            shape=_enum(ShapeKind, d.get("shape", "roundRect"), "shape"),
            shape_fill=d.get("shapeFill"),
            shape_line=LineSpec.from_dict(d["shapeLine"]) if d.get("shapeLine") else None,
            radius=_float(d, "radius", None),
            font_size=_float(d, "fontSize", 16.0),
            font_type=_enum(FontType, d.get("fontType", "body"), "fontType"),
            color=d.get("color"),
            text_format=d.get("textFormat"),
            align=_choice(d.get("align", "center"), ALIGNMENTS, "align"),
        )


@dataclass
class ChartSpec:
    """Placement and colours for the chart on ``chart`` slides."""
    x: float
    y: float
    w: float
    h: float
    color: str = "primary"
    label_color: str | None = None

    def color_keys(self) -> list[str]:
        return [key for key in (self.color, self.label_color) if key]

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"x": self.x, "y": self.y, "w": self.w, "h": self.h,
                             "color": self.color}
        if self.label_color:
            d["labelColor"] = self.label_color
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ChartSpec":
        return cls(
            x=_float(d, "x"),
            y=_float(d, "y"),
            w=_float(d, "w"),
            h=_float(d, "h"),
            color=d.get("color", "primary"),
            label_color=d.get("labelColor"),
        )


# ---------------------------------------------------------------------------
# LayoutConfig - directives for one slide type
# ---------------------------------------------------------------------------

@dataclass
class LayoutConfig:
    """Visual directives for one slide type.

    Any subset may be present; the renderer applies each one independently.
    """
    background: str | None = None
    shapes: list[ShapeSpec] = field(default_factory=list)
    decorations: list[ShapeSpec] = field(default_factory=list)
    title_text: TextSpec | None = None
    subtitle_text: TextSpec | None = None
    bullets: BulletSpec | None = None
    plan: PlanSpec | None = None
    left_column: ColumnSpec | None = None
    right_column: ColumnSpec | None = None
    grid: GridSpec | None = None
    chart: ChartSpec | None = None

    @property
    def has_columns(self) -> bool:
        return self.left_column is not None and self.right_column is not None

    def color_keys(self) -> list[str]:
        """Every colour key referenced by this layout's directives."""
        keys: list[str] = [self.background] if self.background else []
        for spec in (*self.shapes, *self.decorations, self.title_text,
                     self.subtitle_text, self.bullets, self.plan,
                     self.left_column, self.right_column, self.grid, self.chart):
            if spec is not None:
                keys.extend(spec.color_keys())
        return keys

    def to_dict(self) -> dict:
        d: dict[str, Any] = {}
        if self.background:
            d["background"] = self.background
        if self.shapes:
            d["shapes"] = [s.to_dict() for s in self.shapes]
        if self.decorations:
            d["decorations"] = [s.to_dict() for s in self.decorations]
        if self.title_text:
            d["titleText"] = self.title_text.to_dict()
        if self.subtitle_text:
            d["subtitleText"] = self.subtitle_text.to_dict()
        if self.bullets:
            d["bullets"] = self.bullets.to_dict()
        if self.plan:
            d["plan"] = self.plan.to_dict()
        if self.left_column:
            d["leftColumn"] = self.left_column.to_dict()
        if self.right_column:
            d["rightColumn"] = self.right_column.to_dict()
        if self.grid:
            d["grid"] = self.grid.to_dict()
        if self.chart:
            d["chart"] = self.chart.to_dict()
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "LayoutConfig":
        if not isinstance(d, dict):
            raise ValueError(f"layout must be a mapping, got {type(d).__name__}")
        return cls(
            background=d.get("background"),
            shapes=[ShapeSpec.from_dict(s) for s in d.get("shapes", [])],
            decorations=[ShapeSpec.from_dict(s) for s in d.get("decorations", [])],
            title_text=TextSpec.from_dict(d["titleText"]) if d.get("titleText") else None,
            subtitle_text=(TextSpec.from_dict(d["subtitleText"])
                           if d.get("subtitleText") else None),
            bullets=BulletSpec.from_dict(d["bullets"]) if d.get("bullets") else None,
            plan=PlanSpec.from_dict(d["plan"]) if d.get("plan") else None,
            left_column=ColumnSpec.from_dict(d["leftColumn"]) if d.get("leftColumn") else None,
            right_column=(ColumnSpec.from_dict(d["rightColumn"])
                          if d.get("rightColumn") else None),
            grid=GridSpec.from_dict(d["grid"]) if d.get("grid") else None,
            chart=ChartSpec.from_dict(d["chart"]) if d.get("chart") else None,
        )


# ---------------------------------------------------------------------------
# ThemeDescriptor - top-level container
# ---------------------------------------------------------------------------

@dataclass
class FontConfig:
    """A font family with optional named weights."""
    family: str
    weight: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict:
        d: dict[str, Any] = {"family": self.family}
        if self.weight:
            d["weight"] = dict(self.weight)
        return d

    @classmethod
    def from_dict(cls, d: dict | str) -> "FontConfig":
        if isinstance(d, str):
            return cls(family=d)
        if not d.get("family"):
            raise ValueError("font 'family' is required")
        return cls(family=d["family"], weight=dict(d.get("weight") or {}))


@dataclass
class ThemeDescriptor:
    """A named bundle of colours, fonts and per-slide-type layouts.

    Read-only once loaded; one instance is safely shared by concurrent
    renders.
    """
    id: str
    name: str
    colors: dict[str, str]
    fonts: dict[str, FontConfig]
    layouts: dict[str, LayoutConfig]
    is_premium: bool = False
    description: str = ""

    def get_layout(self, slide_type: SlideType | str) -> LayoutConfig | None:
        """Return the layout for a slide type, or None when the theme has none."""
        key = slide_type.value if isinstance(slide_type, SlideType) else slide_type
        return self.layouts.get(key)

    @property
    def default_text_color(self) -> str:
        for key in _DEFAULT_TEXT_KEYS:
            if self.colors.get(key):
                return self.colors[key]
        return _FALLBACK_TEXT_COLOR

    def resolve_color(self, key: str | None) -> str:
        """Map a colour key to ``#RRGGBB``.

        Unknown keys fall back to the theme's default text colour; literal
        hex values pass through.
        """
        if key and key in self.colors:
            return self.colors[key]
        if is_hex_color(key):
            return normalize_hex(key)
        return self.default_text_color

    def font_family(self, font_type: FontType) -> str:
        font = self.fonts.get(font_type.value) or self.fonts.get("body")
        return font.family if font else "Calibri"

    def validate(self) -> None:
        """Raise ThemeValidationError if the descriptor cannot be rendered."""
        if not self.layouts:
            raise ThemeValidationError(self.id, "layouts map is empty")
        known_types = {t.value for t in SlideType}
        for slide_type, layout in self.layouts.items():
            if slide_type not in known_types:
                raise ThemeValidationError(
                    self.id, f"unknown slide type {slide_type!r} in layouts")
            for key in layout.color_keys():
                if key not in self.colors and not is_hex_color(key):
                    raise ThemeValidationError(
                        self.id,
                        f"layout {slide_type!r} references undefined colour {key!r}")

    def to_dict(self) -> dict:
        d: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "colors": dict(self.colors),
            "fonts": {k: v.to_dict() for k, v in self.fonts.items()},
            "layouts": {k: v.to_dict() for k, v in self.layouts.items()},
        }
        if self.is_premium:
            d["isPremium"] = True
        if self.description:
            d["description"] = self.description
        return d

    @classmethod
    def from_dict(cls, d: dict) -> "ThemeDescriptor":
        """Parse and validate a theme descriptor."""
        theme_id = str(d.get("id") or d.get("slug") or "").lower()
        if not theme_id:
            raise ThemeValidationError("<unnamed>", "'id' is required")

        colors: dict[str, str] = {}
        for key, value in (d.get("colors") or {}).items():
            if not is_hex_color(value):
                raise ThemeValidationError(
                    theme_id, f"colour {key!r} is not #RRGGBB: {value!r}")
            colors[key] = normalize_hex(value)

        try:
            raw_fonts = d.get("fonts") or {}
            fonts = {k: FontConfig.from_dict(v) for k, v in raw_fonts.items()}
        except (ValueError, AttributeError) as exc:
            raise ThemeValidationError(theme_id, f"fonts: {exc}") from exc

        layouts: dict[str, LayoutConfig] = {}
        for slide_type, raw in (d.get("layouts") or {}).items():
            try:
                layouts[slide_type] = LayoutConfig.from_dict(raw)
            except (ValueError, TypeError, AttributeError) as exc:
                raise ThemeValidationError(
                    theme_id, f"layout {slide_type!r}: {exc}") from exc

        theme = cls(
            id=theme_id,
            name=d.get("name", theme_id),
            colors=colors,
            fonts=fonts,
            layouts=layouts,
            is_premium=bool(d.get("isPremium", False)),
            description=d.get("description", ""),
        )
        theme.validate()
        return theme
