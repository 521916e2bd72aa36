"""Tests for the PPTX encoder (draw operations -> .pptx bytes)."""

import io

import pytest
from pptx import Presentation
from pptx.dml.color import RGBColor
from pptx.enum.dml import MSO_FILL_TYPE, MSO_LINE_DASH_STYLE
from pptx.enum.shapes import MSO_SHAPE, MSO_SHAPE_TYPE
from pptx.enum.text import MSO_ANCHOR, PP_ALIGN
from pptx.util import Inches, Pt

from slidesmind.generator.operations import (
    ChartOp,
    RenderedSlide,
    ShapeOp,
    Stroke,
    TextOp,
)
from slidesmind.generator.pptx_encoder import PPTXEncoder
from slidesmind.schema.theme import ShapeKind


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def encoder():
    return PPTXEncoder()


def _bytes_to_prs(pptx_bytes: bytes) -> Presentation:
    """Load a Presentation from bytes."""
    return Presentation(io.BytesIO(pptx_bytes))


def _text(text="Hello", **kwargs):
    kwargs.setdefault("role", "title")
    return TextOp(text=text, x=1.0, y=0.5, w=10.0, h=1.0, font_family="Georgia",
                  font_size=32.0, color="#112233", **kwargs)


def _shape(kind=ShapeKind.RECT, **kwargs):
    kwargs.setdefault("fill", "#445566")
    return ShapeOp(kind=kind, x=0.5, y=0.5, w=2.0, h=1.0, **kwargs)


def _encode_one(encoder, *ops, **kwargs):
    rendered = RenderedSlide(slide_id="s1", slide_type="content",
                             operations=list(ops), **kwargs)
    return _bytes_to_prs(encoder.encode([rendered])).slides[0]


def _named(slide, name):
    return [s for s in slide.shapes if s.name == name]


# ---------------------------------------------------------------------------
# Presentation
# ---------------------------------------------------------------------------

class TestPresentation:
    def test_16_by_9(self, encoder):
        prs = _bytes_to_prs(encoder.encode([RenderedSlide("a", "title")]))
        assert prs.slide_width == Inches(13.333)
        assert prs.slide_height == Inches(7.5)

    def test_slide_count_and_order(self, encoder):
        slides = [
            RenderedSlide(str(i), "content", operations=[_text(f"Slide {i}")])
            for i in range(4)
        ]
        prs = _bytes_to_prs(encoder.encode(slides))
        assert len(prs.slides) == 4
        assert prs.slides[2].shapes[0].text_frame.text == "Slide 2"

    def test_no_placeholders(self, encoder):
        slide = _encode_one(encoder, _text())
        assert len(slide.placeholders) == 0

    def test_encode_to_file(self, encoder, tmp_path):
        path = tmp_path / "deck.pptx"
        encoder.encode_to_file([RenderedSlide("a", "title")], path)
        assert len(Presentation(str(path)).slides) == 1

    def test_background(self, encoder):
        slide = _encode_one(encoder, background="#FAFAFA")
        fill = slide.background.fill
        assert fill.type == MSO_FILL_TYPE.SOLID
        assert fill.fore_color.rgb == RGBColor(0xFA, 0xFA, 0xFA)

    def test_notes(self, encoder):
        slide = _encode_one(encoder, _text(), notes="Mention the Q3 dip")
        assert slide.has_notes_slide
        assert slide.notes_slide.notes_text_frame.text == "Mention the Q3 dip"

    def test_no_notes_slide_when_empty(self, encoder):
        assert not _encode_one(encoder, _text()).has_notes_slide


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------

class TestShapes:
    @pytest.mark.parametrize("kind,expected", [
        (ShapeKind.RECT, MSO_SHAPE.RECTANGLE),
        (ShapeKind.ROUND_RECT, MSO_SHAPE.ROUNDED_RECTANGLE),
        (ShapeKind.CIRCLE, MSO_SHAPE.OVAL),
        (ShapeKind.TRIANGLE, MSO_SHAPE.ISOSCELES_TRIANGLE),
        (ShapeKind.HEXAGON, MSO_SHAPE.HEXAGON),
        (ShapeKind.CHEVRON, MSO_SHAPE.CHEVRON),
        (ShapeKind.STAR, MSO_SHAPE.STAR_5_POINT),
    ])
    def test_kind_mapping(self, encoder, kind, expected):
        slide = _encode_one(encoder, _shape(kind))
        assert slide.shapes[0].auto_shape_type == expected

    def test_geometry_and_name(self, encoder):
        slide = _encode_one(encoder, _shape(role="decoration"))
        shape = _named(slide, "decoration")[0]
        assert (shape.left, shape.top) == (Inches(0.5), Inches(0.5))
        assert (shape.width, shape.height) == (Inches(2.0), Inches(1.0))

    def test_fill(self, encoder):
        shape = _encode_one(encoder, _shape()).shapes[0]
        assert shape.fill.fore_color.rgb == RGBColor(0x44, 0x55, 0x66)

    def test_no_fill(self, encoder):
        shape = _encode_one(encoder, _shape(fill=None)).shapes[0]
        assert shape.fill.type == MSO_FILL_TYPE.BACKGROUND

    def test_transparency_written_as_alpha(self, encoder):
        shape = _encode_one(encoder, _shape(transparency=80)).shapes[0]
        alphas = shape._element.xpath(".//a:solidFill/a:srgbClr/a:alpha")
        assert len(alphas) == 1
        assert alphas[0].get("val") == "20000"

    def test_opaque_has_no_alpha(self, encoder):
        shape = _encode_one(encoder, _shape()).shapes[0]
        assert shape._element.xpath(".//a:alpha") == []

    def test_rotation(self, encoder):
        shape = _encode_one(encoder, _shape(rotate=30.0)).shapes[0]
        assert shape.rotation == pytest.approx(30.0)

    def test_corner_radius(self, encoder):
        op = _shape(ShapeKind.ROUND_RECT, radius=0.2)
        shape = _encode_one(encoder, op).shapes[0]
        assert shape.adjustments[0] == pytest.approx(0.2)

    def test_stroke(self, encoder):
        op = _shape(stroke=Stroke(color="#FF0000", width=2.0, dash_type="dash"))
        line = _encode_one(encoder, op).shapes[0].line
        assert line.color.rgb == RGBColor(0xFF, 0x00, 0x00)
        assert line.width == Pt(2.0)
        assert line.dash_style == MSO_LINE_DASH_STYLE.DASH

    def test_line_is_connector(self, encoder):
        op = ShapeOp(kind=ShapeKind.LINE, x=6.0, y=1.5, w=0.0, h=5.0,
                     stroke=Stroke(color="#FFD700", width=2.0), role="shape")
        shape = _encode_one(encoder, op).shapes[0]
        assert shape.shape_type == MSO_SHAPE_TYPE.LINE
        assert shape.begin_x == Inches(6.0)
        assert shape.end_y == Inches(6.5)

    def test_z_order_follows_operations(self, encoder):
        slide = _encode_one(encoder, _shape(role="back"), _text(),
                            _shape(role="front"))
        assert [s.name for s in slide.shapes] == ["back", "title", "front"]


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------

class TestText:
    def test_font(self, encoder):
        shape = _encode_one(encoder, _text(bold=True, italic=True)).shapes[0]
        run = shape.text_frame.paragraphs[0].runs[0]
        assert run.text == "Hello"
        assert run.font.name == "Georgia"
        assert run.font.size == Pt(32)
        assert run.font.bold is True
        assert run.font.italic is True
        assert run.font.color.rgb == RGBColor(0x11, 0x22, 0x33)

    def test_one_paragraph_per_line(self, encoder):
        shape = _encode_one(encoder, _text("1.2M\nUsers")).shapes[0]
        paragraphs = shape.text_frame.paragraphs
        assert [p.text for p in paragraphs] == ["1.2M", "Users"]
        assert paragraphs[1].runs[0].font.name == "Georgia"

    def test_alignment(self, encoder):
        op = _text(align="center", valign="middle")
        tf = _encode_one(encoder, op).shapes[0].text_frame
        assert tf.paragraphs[0].alignment == PP_ALIGN.CENTER
        assert tf.vertical_anchor == MSO_ANCHOR.MIDDLE
        assert tf.word_wrap is True


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------

class TestCharts:
    def test_chart_op(self, encoder):
        op = ChartOp(labels=("A", "B"), values=(1.0, 2.0), x=1.0, y=2.0,
                     w=10.0, h=4.0, colors=("#112233", "#445566"))
        slide = _encode_one(encoder, op)
        charts = [s for s in slide.shapes if s.has_chart]
        assert len(charts) == 1
        assert list(charts[0].chart.plots[0].categories) == ["A", "B"]

    def test_invalid_chart_op_raises(self, encoder):
        op = ChartOp(labels=(), values=(), x=1.0, y=2.0, w=10.0, h=4.0)
        with pytest.raises(ValueError):
            encoder.encode([RenderedSlide("c", "chart", operations=[op])])
