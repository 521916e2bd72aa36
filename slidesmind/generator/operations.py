"""Draw operations - the encoder-agnostic output of the layout renderer.

The renderer never touches python-pptx.  It emits, per slide, an optional
background colour and an ordered list of ShapeOp / TextOp / ChartOp whose
colours are already resolved to ``#RRGGBB`` and whose geometry is in
inches on a 13.333" x 7.5" (16:9) canvas.  Any encoder that can place
shapes, text boxes and column charts can consume them.
"""

from dataclasses import dataclass, field
from typing import Union

from slidesmind.schema.theme import ShapeKind


@dataclass(frozen=True)
class Stroke:
    """Resolved outline style."""
    color: str
    width: float = 1.0
    dash_type: str = "solid"


@dataclass(frozen=True)
class ShapeOp:
    """Place a primitive shape."""
    kind: ShapeKind
    x: float
    y: float
    w: float
    h: float
    fill: str | None = None
    transparency: float = 0.0
    stroke: Stroke | None = None
    rotate: float = 0.0
    radius: float | None = None
    role: str = "shape"


@dataclass(frozen=True)
class TextOp:
    """Place a text box.  ``text`` may contain newlines (one paragraph each)."""
    text: str
    x: float
    y: float
    w: float
    h: float
    font_family: str
    font_size: float
    color: str
    bold: bool = False
    italic: bool = False
    align: str = "left"
    valign: str = "top"
    role: str = "text"


@dataclass(frozen=True)
class ChartOp:
    """Place a single-series column chart."""
    labels: tuple[str, ...]
    values: tuple[float, ...]
    x: float
    y: float
    w: float
    h: float
    series_name: str = "Data"
    colors: tuple[str, ...] = ()
    font_family: str = "Calibri"
    label_color: str = "#000000"


DrawOp = Union[ShapeOp, TextOp, ChartOp]


@dataclass
class RenderedSlide:
    """Everything the encoder needs to draw one slide."""
    slide_id: str
    slide_type: str
    background: str | None = None
    operations: list[DrawOp] = field(default_factory=list)
    fallback: bool = False               # True when produced by a fallback path
    notes: str = ""                      # speaker notes

    def texts(self) -> list[str]:
        return [op.text for op in self.operations if isinstance(op, TextOp)]

    def shapes(self) -> list[ShapeOp]:
        return [op for op in self.operations if isinstance(op, ShapeOp)]

    def charts(self) -> list[ChartOp]:
        return [op for op in self.operations if isinstance(op, ChartOp)]

    def by_role(self, role: str) -> list[DrawOp]:
        return [op for op in self.operations if getattr(op, "role", None) == role]
