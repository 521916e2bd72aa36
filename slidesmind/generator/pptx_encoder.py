"""PPTX encoder — writes rendered draw operations into a PowerPoint file.

Consumes the RenderedSlide list produced by the layout renderer (resolved
colours, geometry in inches) and produces a 16:9 .pptx with python-pptx.
Every slide uses the blank layout so no placeholder leaks into the output.

Usage::

    from slidesmind.generator.pptx_encoder import PPTXEncoder

    encoder = PPTXEncoder()
    pptx_bytes = encoder.encode(rendered_slides)

    with open("deck.pptx", "wb") as f:
        f.write(pptx_bytes)
"""

import io
from pathlib import Path

from lxml import etree
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.dml import MSO_LINE_DASH_STYLE
from pptx.enum.shapes import MSO_CONNECTOR, MSO_SHAPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.oxml.ns import qn
from pptx.util import Inches, Pt

from slidesmind.generator.charts import add_chart
from slidesmind.generator.operations import (
    ChartOp,
    RenderedSlide,
    ShapeOp,
    Stroke,
    TextOp,
)
from slidesmind.schema.theme import ShapeKind


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

_BLANK_LAYOUT = 6

_SHAPE_MAP = {
    ShapeKind.RECT: MSO_SHAPE.RECTANGLE,
    ShapeKind.TRIANGLE: MSO_SHAPE.ISOSCELES_TRIANGLE,
    ShapeKind.ROUND_RECT: MSO_SHAPE.ROUNDED_RECTANGLE,
    ShapeKind.CIRCLE: MSO_SHAPE.OVAL,
    ShapeKind.ELLIPSE: MSO_SHAPE.OVAL,
    ShapeKind.DIAMOND: MSO_SHAPE.DIAMOND,
    ShapeKind.PENTAGON: MSO_SHAPE.REGULAR_PENTAGON,
    ShapeKind.HEXAGON: MSO_SHAPE.HEXAGON,
    ShapeKind.STAR: MSO_SHAPE.STAR_5_POINT,
    ShapeKind.CHEVRON: MSO_SHAPE.CHEVRON,
}

_DASH_MAP = {
    "solid": MSO_LINE_DASH_STYLE.SOLID,
    "dash": MSO_LINE_DASH_STYLE.DASH,
    "dot": MSO_LINE_DASH_STYLE.ROUND_DOT,
    "dashDot": MSO_LINE_DASH_STYLE.DASH_DOT,
    "lgDash": MSO_LINE_DASH_STYLE.LONG_DASH,
    "sysDash": MSO_LINE_DASH_STYLE.SQUARE_DOT,
    "sysDot": MSO_LINE_DASH_STYLE.ROUND_DOT,
}

_ALIGN_MAP = {
    "left": PP_ALIGN.LEFT,
    "center": PP_ALIGN.CENTER,
    "right": PP_ALIGN.RIGHT,
    "justify": PP_ALIGN.JUSTIFY,
}

_ANCHOR_MAP = {
    "top": MSO_ANCHOR.TOP,
    "middle": MSO_ANCHOR.MIDDLE,
    "bottom": MSO_ANCHOR.BOTTOM,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert '#RRGGBB' hex string to an RGBColor."""
    h = hex_color.lstrip("#")
    return RGBColor(*bytes.fromhex(h))


def _set_alpha(shape, transparency: float) -> None:
    """Write ``<a:alpha>`` on the solid fill; python-pptx has no API for it.

    ``transparency`` is 0-100 (percent see-through); DrawingML wants the
    opacity in thousandths of a percent.
    """
    srgb = shape._element.spPr.find(f"{qn('a:solidFill')}/{qn('a:srgbClr')}")
    if srgb is None:
        return
    for old in srgb.findall(qn("a:alpha")):
        srgb.remove(old)
    alpha = etree.SubElement(srgb, qn("a:alpha"))
    alpha.set("val", str(int(round((100 - transparency) * 1000))))


def _apply_stroke(line, stroke: Stroke | None) -> None:
    if stroke is None:
        line.fill.background()
        return
    line.color.rgb = _hex_to_rgb(stroke.color)
    line.width = Pt(stroke.width)
    line.dash_style = _DASH_MAP.get(stroke.dash_type, MSO_LINE_DASH_STYLE.SOLID)


# ---------------------------------------------------------------------------
# PPTXEncoder
# ---------------------------------------------------------------------------

class PPTXEncoder:
    """Encodes rendered slides into a .pptx byte buffer.

    Parameters
    ----------
    width, height : float
        Slide size in inches; defaults to 16:9 widescreen.
    """

    def __init__(self, width: float = 13.333, height: float = 7.5) -> None:
        self.width = width
        self.height = height

    def encode(self, slides: list[RenderedSlide]) -> bytes:
        """Draw every slide in order and return the .pptx file content."""
        prs = Presentation()
        prs.slide_width = Inches(self.width)
        prs.slide_height = Inches(self.height)

        for rendered in slides:
            self._encode_slide(prs, rendered)

        buf = io.BytesIO()
        prs.save(buf)
        return buf.getvalue()

    def encode_to_file(self, slides: list[RenderedSlide], path: str | Path) -> None:
        """Encode and write the result to a file path."""
        Path(path).write_bytes(self.encode(slides))

    # ------------------------------------------------------------------
    # Slide
    # ------------------------------------------------------------------

    def _encode_slide(self, prs, rendered: RenderedSlide) -> None:
        slide = prs.slides.add_slide(prs.slide_layouts[_BLANK_LAYOUT])

        if rendered.background:
            fill = slide.background.fill
            fill.solid()
            fill.fore_color.rgb = _hex_to_rgb(rendered.background)

        for op in rendered.operations:
            if isinstance(op, ShapeOp):
                self._draw_shape(slide, op)
            elif isinstance(op, TextOp):
                self._draw_text(slide, op)
            elif isinstance(op, ChartOp):
                add_chart(slide, op)

        if rendered.notes:
            slide.notes_slide.notes_text_frame.text = rendered.notes

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def _draw_shape(self, slide, op: ShapeOp) -> None:
        if op.kind == ShapeKind.LINE:
            self._draw_line(slide, op)
            return

        shape = slide.shapes.add_shape(
            _SHAPE_MAP[op.kind],
            Inches(op.x), Inches(op.y), Inches(op.w), Inches(op.h),
        )
        shape.name = op.role

        if op.fill:
            shape.fill.solid()
            shape.fill.fore_color.rgb = _hex_to_rgb(op.fill)
            if op.transparency:
                _set_alpha(shape, op.transparency)
        else:
            shape.fill.background()

        _apply_stroke(shape.line, op.stroke)

        if op.rotate:
            shape.rotation = op.rotate
        if op.kind == ShapeKind.ROUND_RECT and op.radius is not None:
            shape.adjustments[0] = max(0.0, min(op.radius, 0.5))

    def _draw_line(self, slide, op: ShapeOp) -> None:
        """A line runs from (x, y) to (x + w, y + h)."""
        connector = slide.shapes.add_connector(
            MSO_CONNECTOR.STRAIGHT,
            Inches(op.x), Inches(op.y),
            Inches(op.x + op.w), Inches(op.y + op.h),
        )
        connector.name = op.role
        stroke = op.stroke or (Stroke(color=op.fill) if op.fill else None)
        if stroke is not None:
            _apply_stroke(connector.line, stroke)

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _draw_text(self, slide, op: TextOp) -> None:
        txbox = slide.shapes.add_textbox(
            Inches(op.x), Inches(op.y), Inches(op.w), Inches(op.h),
        )
        txbox.name = op.role
        tf = txbox.text_frame
        tf.word_wrap = True
        tf.vertical_anchor = _ANCHOR_MAP.get(op.valign, MSO_ANCHOR.TOP)

        for idx, line in enumerate(op.text.split("\n")):
            p = tf.paragraphs[0] if idx == 0 else tf.add_paragraph()
            p.alignment = _ALIGN_MAP.get(op.align, PP_ALIGN.LEFT)
            run = p.add_run()
            run.text = line
            run.font.name = op.font_family
            run.font.size = Pt(op.font_size)
            run.font.bold = op.bold
            run.font.italic = op.italic
            run.font.color.rgb = _hex_to_rgb(op.color)
