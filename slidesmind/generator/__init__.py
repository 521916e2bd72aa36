"""Presentation generator package — theme renderer and PPTX encoder.

Turns draft slides plus a theme descriptor into PowerPoint files.

Modules:
    operations: Encoder-agnostic draw operations
    renderer: Layout renderer (slide + layout -> draw operations)
    pptx_encoder: python-pptx encoder (draw operations -> .pptx bytes)
    charts: Column chart generation
    assembler: Whole-draft render + encode with per-slide isolation
"""

from .assembler import AssembledDocument, DocumentAssembler
from .charts import add_chart
from .operations import ChartOp, DrawOp, RenderedSlide, ShapeOp, Stroke, TextOp
from .pptx_encoder import PPTXEncoder
from .renderer import LayoutRenderer, resolve_text_source

__all__ = [
    "AssembledDocument",
    "ChartOp",
    "DocumentAssembler",
    "DrawOp",
    "LayoutRenderer",
    "PPTXEncoder",
    "RenderedSlide",
    "ShapeOp",
    "Stroke",
    "TextOp",
    "add_chart",
    "resolve_text_source",
]
