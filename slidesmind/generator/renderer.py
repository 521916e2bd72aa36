"""Layout renderer - turns one slide plus its theme layout into draw operations.

Pure and stateless: the same (slide, layout, theme) triple always yields an
equal RenderedSlide.  Directives are applied in a fixed order, each only
when present in the layout:

    1. background
    2. shapes, then back decorations
    3. title / subtitle text
    4. bullets
    5. plan list
    6. two-column split
    7. grid (stats preferred over content)
    8. chart (chart slides with at least one valid point)
    9. front decorations

Timeline slides feed their content through the bullet and grid directives
as numbered steps (title / description split on the first colon).

Usage::

    from slidesmind.generator.renderer import LayoutRenderer

    renderer = LayoutRenderer()
    rendered = renderer.render_safe(slide, theme.get_layout(slide.type), theme)
"""

import dataclasses
from typing import Any

import structlog

from slidesmind.generator.operations import (
    ChartOp,
    DrawOp,
    RenderedSlide,
    ShapeOp,
    Stroke,
    TextOp,
)
from slidesmind.schema.draft import Slide, SlideType, Stat
from slidesmind.schema.formatting import (
    TimelineStep,
    bullet_prefix,
    format_bullet,
    format_plan_item,
    format_stat,
    split_columns,
    timeline_steps,
)
from slidesmind.schema.theme import (
    BulletSpec,
    BulletStyleType,
    ColumnSpec,
    FontType,
    GridSpec,
    ItemDecoration,
    LayoutConfig,
    LineSpec,
    ListSpec,
    PlanSpec,
    ShapeSpec,
    TextSpec,
    ThemeDescriptor,
    ZIndex,
)

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SLIDE_WIDTH = 13.333
SLIDE_HEIGHT = 7.5

# Neutral placement used when a slide type has no layout or rendering fails.
_FALLBACK_TITLE_BOX = (0.6, 0.5, 12.1, 1.0)
_FALLBACK_BODY_BOX = (0.6, 1.7, 12.1, 5.2)
_FALLBACK_TITLE_SIZE = 32.0
_FALLBACK_BODY_SIZE = 18.0
_DEFAULT_CHART_BOX = (0.6, 1.6, 12.1, 5.0)
_CELL_INSET = 0.1

ERROR_PLACEHOLDER = "Error loading slide content"
UNTITLED = "Untitled slide"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _stroke(line: LineSpec | None, theme: ThemeDescriptor) -> Stroke | None:
    if line is None:
        return None
    return Stroke(color=theme.resolve_color(line.color), width=line.width,
                  dash_type=line.dash_type)


def _shape_op(spec: ShapeSpec, theme: ThemeDescriptor, role: str) -> ShapeOp:
    return ShapeOp(
        kind=spec.type,
        x=spec.x, y=spec.y, w=spec.w, h=spec.h,
        fill=theme.resolve_color(spec.fill) if spec.fill else None,
        transparency=spec.transparency,
        stroke=_stroke(spec.line, theme),
        rotate=spec.rotate,
        radius=spec.radius,
        role=role,
    )


def resolve_text_source(slide: Slide, source: str) -> str:
    """Read the slide field a TextSpec is bound to ("" when empty)."""
    if source == "slide.title":
        return slide.title
    if source == "slide.subtitle":
        if slide.subtitle:
            return slide.subtitle
        # Title and closing slides carry their tagline as the first content item.
        if slide.type in (SlideType.TITLE, SlideType.CLOSING) and slide.content:
            return slide.content[0]
        return ""
    if source == "slide.quote.text":
        if slide.quote:
            return slide.quote.text
        if slide.type == SlideType.QUOTE and slide.content:
            return slide.content[0]
        return ""
    if source == "slide.quote.author":
        return slide.quote.author if slide.quote else ""
    if source == "slide.notes":
        return slide.notes
    return ""


# ---------------------------------------------------------------------------
# LayoutRenderer
# ---------------------------------------------------------------------------

class LayoutRenderer:
    """Renders slides to draw operations according to a theme descriptor."""

    def render(self, slide: Slide, layout: LayoutConfig | None,
               theme: ThemeDescriptor) -> RenderedSlide:
        """Apply every directive in *layout* to *slide*.

        A missing layout renders the title alone.  A chart slide without a
        single valid data point renders as a bulleted content slide.
        """
        if layout is None:
            logger.info("layout_missing", slide_id=slide.id,
                        slide_type=slide.type.value, theme=theme.id)
            return self.render_fallback(slide, theme)

        if slide.type == SlideType.CHART and not self._valid_points(slide):
            logger.warning("chart_without_valid_points", slide_id=slide.id,
                           points=len(slide.chart_data))
            return self._render_chart_as_content(slide, theme)

        rendered = RenderedSlide(slide_id=slide.id, slide_type=slide.type.value,
                                 notes=slide.notes)
        ops = rendered.operations

        if layout.background:
            rendered.background = theme.resolve_color(layout.background)

        for spec in layout.shapes:
            ops.append(_shape_op(spec, theme, role="shape"))
        front: list[DrawOp] = []
        for spec in layout.decorations:
            op = _shape_op(spec, theme, role="decoration")
            if spec.z_index == ZIndex.FRONT:
                front.append(op)
            else:
                ops.append(op)

        if layout.title_text:
            ops.extend(self._text_ops(slide, layout.title_text, theme, role="title"))
        if layout.subtitle_text:
            ops.extend(self._text_ops(slide, layout.subtitle_text, theme, role="subtitle"))

        if layout.bullets:
            ops.extend(self._bullet_ops(slide, layout.bullets, theme))

        if layout.plan:
            ops.extend(self._plan_ops(slide.content, layout.plan, theme))

        if layout.has_columns:
            left, right = split_columns(slide.content)
            ops.extend(self._column_ops(left, layout.left_column, theme, "left-column"))
            ops.extend(self._column_ops(right, layout.right_column, theme, "right-column"))

        if layout.grid:
            ops.extend(self._grid_ops(slide, layout.grid, theme))

        if slide.type == SlideType.CHART:
            ops.append(self._chart_op(slide, layout, theme))

        ops.extend(front)
        return rendered

    def render_safe(self, slide: Slide, layout: LayoutConfig | None,
                    theme: ThemeDescriptor) -> RenderedSlide:
        """Render, substituting a minimal slide if anything goes wrong.

        A single malformed slide must never abort the document, so every
        exception is caught here and logged.
        """
        try:
            return self.render(slide, layout, theme)
        except Exception as exc:
            logger.warning("slide_render_failed", slide_id=slide.id,
                           slide_type=slide.type.value, error=str(exc))
            return self.render_error(slide, theme)

    # ------------------------------------------------------------------
    # Fallbacks
    # ------------------------------------------------------------------

    def render_fallback(self, slide: Slide, theme: ThemeDescriptor) -> RenderedSlide:
        """Title alone, neutral position, default text colour."""
        rendered = RenderedSlide(slide_id=slide.id, slide_type=slide.type.value,
                                 fallback=True, notes=slide.notes)
        rendered.operations.append(self._fallback_title(slide, theme))
        return rendered

    def render_error(self, slide: Slide, theme: ThemeDescriptor) -> RenderedSlide:
        """Title plus raw content as plain text, or a fixed error notice."""
        rendered = RenderedSlide(slide_id=slide.id, slide_type=slide.type.value,
                                 fallback=True, notes=slide.notes)
        rendered.operations.append(self._fallback_title(slide, theme))
        lines = [str(c) for c in slide.content] or [ERROR_PLACEHOLDER]
        x, y, w, h = _FALLBACK_BODY_BOX
        rendered.operations.append(TextOp(
            text="\n".join(lines),
            x=x, y=y, w=w, h=h,
            font_family=theme.font_family(FontType.BODY),
            font_size=_FALLBACK_BODY_SIZE,
            color=theme.default_text_color,
            role="body",
        ))
        return rendered

    def _fallback_title(self, slide: Slide, theme: ThemeDescriptor) -> TextOp:
        x, y, w, h = _FALLBACK_TITLE_BOX
        return TextOp(
            text=slide.title or UNTITLED,
            x=x, y=y, w=w, h=h,
            font_family=theme.font_family(FontType.HEADING),
            font_size=_FALLBACK_TITLE_SIZE,
            color=theme.default_text_color,
            bold=True,
            role="title",
        )

    def _render_chart_as_content(self, slide: Slide,
                                 theme: ThemeDescriptor) -> RenderedSlide:
        labels = [p.label for p in slide.chart_data if p.label]
        as_content = dataclasses.replace(
            slide,
            type=SlideType.CONTENT,
            content=list(slide.content) or labels,
            chart_data=[],
        )
        rendered = self.render(as_content, theme.get_layout(SlideType.CONTENT), theme)
        rendered.slide_type = slide.type.value
        rendered.fallback = True
        return rendered

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _text_ops(self, slide: Slide, spec: TextSpec, theme: ThemeDescriptor,
                  role: str) -> list[TextOp]:
        text = resolve_text_source(slide, spec.source) or spec.fallback
        if not text:
            return []
        return [TextOp(
            text=text,
            x=spec.x, y=spec.y, w=spec.w, h=spec.h,
            font_family=theme.font_family(spec.font_type),
            font_size=spec.font_size,
            color=theme.resolve_color(spec.color),
            bold=spec.bold,
            italic=spec.italic,
            align=spec.align,
            valign=spec.valign,
            role=role,
        )]

    def _row_text(self, text: str, spec: ListSpec, index: int,
                  theme: ThemeDescriptor, role: str) -> TextOp:
        return TextOp(
            text=text,
            x=spec.start_x,
            y=spec.row_y(index),
            w=spec.w,
            h=spec.row_height,
            font_family=theme.font_family(spec.font_type),
            font_size=spec.font_size,
            color=theme.resolve_color(spec.color),
            valign="middle",
            role=role,
        )

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def _decoration_op(self, deco: ItemDecoration, spec: ListSpec, index: int,
                       theme: ThemeDescriptor) -> ShapeOp:
        pad = deco.padding
        width = deco.width if deco.width is not None else spec.w
        height = deco.height if deco.height is not None else spec.row_height
        return ShapeOp(
            kind=deco.shape,
            x=spec.start_x + deco.offset_x - pad,
            y=spec.row_y(index) + deco.offset_y - pad,
            w=width + 2 * pad,
            h=height + 2 * pad,
            fill=theme.resolve_color(deco.fill) if deco.fill else None,
            transparency=deco.transparency,
            stroke=_stroke(deco.line, theme),
            radius=deco.radius,
            role="item-decoration",
        )

    def _decorated(self, row_ops: list[DrawOp], deco: ItemDecoration | None,
                   spec: ListSpec, index: int,
                   theme: ThemeDescriptor) -> list[DrawOp]:
        if deco is None or not deco.enabled:
            return row_ops
        chip = self._decoration_op(deco, spec, index, theme)
        if deco.z_index == ZIndex.BACK:
            return [chip, *row_ops]
        return [*row_ops, chip]

    def _bullet_ops(self, slide: Slide, spec: BulletSpec,
                    theme: ThemeDescriptor) -> list[DrawOp]:
        ops: list[DrawOp] = []
        if slide.type == SlideType.TIMELINE:
            for index, step in enumerate(timeline_steps(slide.content)):
                if spec.style.type == BulletStyleType.NUMBER:
                    marker = bullet_prefix(spec.style, index)
                else:
                    marker = f"{step.number}. "
                row = self._step_ops(
                    step, marker,
                    (spec.start_x, spec.row_y(index), spec.w, spec.row_height),
                    spec, theme, align="left")
                ops.extend(self._decorated(row, spec.item_decoration, spec, index, theme))
            return ops

        for index, item in enumerate(slide.content):
            text = format_bullet(spec.style, index, item)
            row = [self._row_text(text, spec, index, theme, role="bullet")]
            ops.extend(self._decorated(row, spec.item_decoration, spec, index, theme))
        return ops

    def _plan_ops(self, items: list[str], spec: PlanSpec,
                  theme: ThemeDescriptor) -> list[DrawOp]:
        ops: list[DrawOp] = []
        for index, item in enumerate(items):
            text = format_plan_item(spec.style, index, item)
            row = [self._row_text(text, spec, index, theme, role="plan-item")]
            ops.extend(self._decorated(row, spec.item_decoration, spec, index, theme))
        return ops

    def _column_ops(self, items: list[str], spec: ColumnSpec,
                    theme: ThemeDescriptor, role: str) -> list[DrawOp]:
        return [
            self._row_text(format_bullet(spec.style, index, item), spec, index,
                           theme, role=role)
            for index, item in enumerate(items)
        ]

    def _step_ops(self, step: TimelineStep, marker: str,
                  box: tuple[float, float, float, float], spec: Any,
                  theme: ThemeDescriptor, align: str) -> list[DrawOp]:
        """Title line (bold) over an optional smaller description."""
        x, y, w, h = box
        title_h = h * 0.5 if step.description else h
        color = theme.resolve_color(spec.color)
        ops: list[DrawOp] = [TextOp(
            text=f"{marker}{step.title}",
            x=x, y=y, w=w, h=title_h,
            font_family=theme.font_family(FontType.HEADING),
            font_size=spec.font_size,
            color=color,
            bold=True,
            align=align,
            valign="middle" if not step.description else "bottom",
            role="timeline-title",
        )]
        if step.description:
            ops.append(TextOp(
                text=step.description,
                x=x, y=y + title_h, w=w, h=h - title_h,
                font_family=theme.font_family(spec.font_type),
                font_size=max(spec.font_size - 4, 8.0),
                color=color,
                align=align,
                role="timeline-description",
            ))
        return ops

    # ------------------------------------------------------------------
    # Grid
    # ------------------------------------------------------------------

    def _grid_items(self, slide: Slide) -> list:
        if slide.stats:
            return list(slide.stats)
        if slide.type == SlideType.TIMELINE:
            return timeline_steps(slide.content)
        return list(slide.content)

    def _grid_ops(self, slide: Slide, spec: GridSpec,
                  theme: ThemeDescriptor) -> list[DrawOp]:
        ops: list[DrawOp] = []
        for index, item in enumerate(self._grid_items(slide)):
            cx, cy = spec.cell_origin(index)
            ops.append(ShapeOp(
                kind=spec.shape,
                x=cx, y=cy, w=spec.cell_w, h=spec.cell_h,
                fill=theme.resolve_color(spec.shape_fill) if spec.shape_fill else None,
                stroke=_stroke(spec.shape_line, theme),
                radius=spec.radius,
                role="grid-cell",
            ))
            inner = (cx + _CELL_INSET, cy + _CELL_INSET,
                     spec.cell_w - 2 * _CELL_INSET, spec.cell_h - 2 * _CELL_INSET)
            if isinstance(item, TimelineStep):
                ops.extend(self._step_ops(item, f"{item.number}. ", inner, spec,
                                          theme, align=spec.align))
                continue
            if isinstance(item, Stat):
                text = format_stat(spec.text_format, item)
            else:
                text = str(item)
            x, y, w, h = inner
            ops.append(TextOp(
                text=text,
                x=x, y=y, w=w, h=h,
                font_family=theme.font_family(spec.font_type),
                font_size=spec.font_size,
                color=theme.resolve_color(spec.color),
                align=spec.align,
                valign="middle",
                role="grid-text",
            ))
        return ops

    # ------------------------------------------------------------------
    # Chart
    # ------------------------------------------------------------------

    @staticmethod
    def _valid_points(slide: Slide) -> list:
        return [p for p in slide.chart_data if p.is_valid]

    def _chart_op(self, slide: Slide, layout: LayoutConfig,
                  theme: ThemeDescriptor) -> ChartOp:
        points = self._valid_points(slide)
        if layout.chart:
            box = (layout.chart.x, layout.chart.y, layout.chart.w, layout.chart.h)
            base_color = theme.resolve_color(layout.chart.color)
            label_color = theme.resolve_color(layout.chart.label_color)
        else:
            box = _DEFAULT_CHART_BOX
            base_color = theme.resolve_color("primary")
            label_color = theme.default_text_color
        x, y, w, h = box
        return ChartOp(
            labels=tuple(p.label for p in points),
            values=tuple(float(p.value) for p in points),
            x=x, y=y, w=w, h=h,
            series_name=slide.title or "Data",
            colors=tuple(theme.resolve_color(p.color) if p.color else base_color
                         for p in points),
            font_family=theme.font_family(FontType.BODY),
            label_color=label_color,
        )
