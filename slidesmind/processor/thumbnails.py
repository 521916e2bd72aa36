"""Slide thumbnails — HTML approximation, rasterize, upload.

The HTML is built from the same draw operations the PPTX encoder
consumes, as absolutely positioned elements on a 1920x1080 page, so a
thumbnail matches the exported slide's geometry.  Rasterizing (a headless
browser in production) is an injected callable.  Any failure produces a
placeholder URL derived from the slide title and the theme's primary
colour instead of an error.
"""

import html
from typing import Callable
from urllib.parse import quote

import structlog

from slidesmind.config import DEFAULT_PLACEHOLDER_URL, Settings
from slidesmind.generator.operations import ChartOp, RenderedSlide, ShapeOp, TextOp
from slidesmind.generator.renderer import LayoutRenderer
from slidesmind.processor.export import ObjectStorage
from slidesmind.schema.draft import Slide
from slidesmind.schema.theme import ShapeKind, ThemeDescriptor

logger = structlog.get_logger(__name__)

PAGE_WIDTH_PX = 1920
PAGE_HEIGHT_PX = 1080
_PX_PER_INCH = PAGE_WIDTH_PX / 13.333
_PX_PER_PT = _PX_PER_INCH / 72

_VALIGN_CSS = {"top": "flex-start", "middle": "center", "bottom": "flex-end"}
_ROUND_KINDS = (ShapeKind.CIRCLE, ShapeKind.ELLIPSE)


def _px(inches: float) -> int:
    return int(round(inches * _PX_PER_INCH))


def _box_style(x: float, y: float, w: float, h: float) -> str:
    return (f"position:absolute;left:{_px(x)}px;top:{_px(y)}px;"
            f"width:{_px(w)}px;height:{_px(h)}px;")


def _shape_html(op: ShapeOp) -> str:
    style = _box_style(op.x, op.y, op.w, op.h)
    if op.fill:
        style += f"background:{op.fill};opacity:{(100 - op.transparency) / 100:.2f};"
    if op.stroke:
        style += f"border:{max(1, round(op.stroke.width))}px solid {op.stroke.color};"
    if op.kind in _ROUND_KINDS:
        style += "border-radius:50%;"
    elif op.kind == ShapeKind.ROUND_RECT:
        style += f"border-radius:{int((op.radius or 0.1) * 100)}px;"
    if op.rotate:
        style += f"transform:rotate({op.rotate}deg);"
    return f'<div style="{style}"></div>'


def _text_html(op: TextOp) -> str:
    style = _box_style(op.x, op.y, op.w, op.h) + (
        "display:flex;flex-direction:column;"
        f"justify-content:{_VALIGN_CSS.get(op.valign, 'flex-start')};"
        f"text-align:{op.align};color:{op.color};"
        f"font-family:'{html.escape(op.font_family)}',sans-serif;"
        f"font-size:{int(op.font_size * _PX_PER_PT)}px;"
        f"font-weight:{'bold' if op.bold else 'normal'};"
        f"font-style:{'italic' if op.italic else 'normal'};"
    )
    lines = "".join(f"<div>{html.escape(line)}</div>" for line in op.text.split("\n"))
    return f'<div style="{style}">{lines}</div>'


def _chart_html(op: ChartOp) -> str:
    peak = max((abs(v) for v in op.values), default=0) or 1
    bar_w = op.w / max(len(op.values), 1)
    bars = []
    for i, (label, value) in enumerate(zip(op.labels, op.values)):
        h = op.h * 0.85 * abs(value) / peak
        color = op.colors[i] if i < len(op.colors) else op.label_color
        bars.append(
            f'<div title="{html.escape(label)}" style="'
            + _box_style(op.x + i * bar_w + bar_w * 0.15, op.y + op.h - h,
                         bar_w * 0.7, h)
            + f'background:{color};"></div>'
        )
    return "".join(bars)


def slide_html(rendered: RenderedSlide, theme: ThemeDescriptor) -> str:
    """Standalone HTML page approximating one rendered slide."""
    background = rendered.background or theme.resolve_color("background")
    parts = []
    for op in rendered.operations:
        if isinstance(op, ShapeOp):
            parts.append(_shape_html(op))
        elif isinstance(op, TextOp):
            parts.append(_text_html(op))
        elif isinstance(op, ChartOp):
            parts.append(_chart_html(op))
    return (
        "<!DOCTYPE html><html><head><meta charset=\"utf-8\"></head>"
        f'<body style="margin:0;width:{PAGE_WIDTH_PX}px;height:{PAGE_HEIGHT_PX}px;'
        f'position:relative;overflow:hidden;background:{background};">'
        + "".join(parts)
        + "</body></html>"
    )


def placeholder_url(slide: Slide, theme: ThemeDescriptor,
                    base_url: str = DEFAULT_PLACEHOLDER_URL) -> str:
    """Deterministic image URL from the slide title and primary colour."""
    primary = theme.resolve_color("primary").lstrip("#").lower()
    text = quote(slide.title or "Slide", safe="")
    return (f"{base_url.rstrip('/')}/{PAGE_WIDTH_PX}x{PAGE_HEIGHT_PX}"
            f"/{primary}/ffffff.png?text={text}")


class ThumbnailService:
    """Builds, rasterizes and uploads one slide thumbnail.

    Parameters
    ----------
    rasterizer : callable
        ``(html, width, height) -> png bytes``.
    storage : ObjectStorage
    renderer : LayoutRenderer, optional
    settings : Settings, optional
    """

    def __init__(self, rasterizer: Callable[[str, int, int], bytes],
                 storage: ObjectStorage, renderer: LayoutRenderer | None = None,
                 settings: Settings | None = None) -> None:
        self.rasterizer = rasterizer
        self.storage = storage
        self.renderer = renderer or LayoutRenderer()
        self.settings = settings or Settings()

    def generate(self, slide: Slide, theme: ThemeDescriptor, draft_id: str) -> str:
        """Return the uploaded thumbnail URL, or a placeholder URL."""
        try:
            rendered = self.renderer.render_safe(slide, theme.get_layout(slide.type), theme)
            page = slide_html(rendered, theme)
            image = self.rasterizer(page, PAGE_WIDTH_PX, PAGE_HEIGHT_PX)
            result = self.storage.upload(image, self.settings.thumbnail_folder,
                                         f"thumbnail-{draft_id}")
        except Exception as exc:
            logger.warning("thumbnail_placeholder", draft_id=draft_id,
                           slide_id=slide.id, error=str(exc))
            return placeholder_url(slide, theme, self.settings.placeholder_base_url)

        logger.info("thumbnail_uploaded", draft_id=draft_id, url=result.url)
        return result.url
