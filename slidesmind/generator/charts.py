"""Chart generation module — places column charts on PowerPoint slides.

Converts a ChartOp (labels, values, per-bar colours, resolved geometry)
into a python-pptx clustered column chart with a single series, one bar
per data point, value labels above the bars and no legend.

Usage:
    from slidesmind.generator.charts import add_chart

    chart = add_chart(slide, op)
"""

from __future__ import annotations

import math
from typing import Any

from pptx.chart.data import CategoryChartData
from pptx.dml.color import RGBColor
from pptx.enum.chart import XL_CHART_TYPE, XL_LABEL_POSITION
from pptx.util import Inches, Pt

from slidesmind.generator.operations import ChartOp


_AXIS_FONT_SIZE = 12
_LABEL_FONT_SIZE = 11
_GAP_WIDTH = 80


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert a hex color string (#RRGGBB) to an RGBColor."""
    return RGBColor.from_string(hex_color.lstrip("#").upper())


def _safe_value(value: Any) -> float:
    """Coerce a value to a safe float for chart data.  None/NaN/inf → 0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        if math.isnan(value) or math.isinf(value):
            return 0.0
        return float(value)
    return 0.0


def build_chart_data(op: ChartOp) -> CategoryChartData:
    """Single-series category data: one category per bar."""
    chart_data = CategoryChartData()
    chart_data.categories = list(op.labels)
    chart_data.add_series(op.series_name, tuple(_safe_value(v) for v in op.values))
    return chart_data


# ---------------------------------------------------------------------------
# Chart styling
# ---------------------------------------------------------------------------

def _apply_point_colors(chart, op: ChartOp) -> None:
    """Colour each bar individually; the chart has exactly one series."""
    series = chart.plots[0].series[0]
    for idx, color in enumerate(op.colors[: len(op.values)]):
        point = series.points[idx]
        point.format.fill.solid()
        point.format.fill.fore_color.rgb = _hex_to_rgb(color)


def _apply_chart_style(chart, op: ChartOp) -> None:
    """Fonts, value labels and axis text colour; no legend."""
    label_rgb = _hex_to_rgb(op.label_color)

    chart.has_legend = False
    chart.font.name = op.font_family
    chart.font.size = Pt(_AXIS_FONT_SIZE)
    chart.font.color.rgb = label_rgb

    plot = chart.plots[0]
    plot.gap_width = _GAP_WIDTH
    plot.has_data_labels = True
    labels = plot.data_labels
    labels.position = XL_LABEL_POSITION.OUTSIDE_END
    labels.font.size = Pt(_LABEL_FONT_SIZE)
    labels.font.color.rgb = label_rgb

    chart.value_axis.has_major_gridlines = False
    chart.value_axis.tick_labels.font.color.rgb = label_rgb
    chart.category_axis.tick_labels.font.color.rgb = label_rgb


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def add_chart(slide, op: ChartOp):
    """Add a column chart for *op* to a python-pptx slide.

    Args:
        slide: python-pptx Slide object.
        op: ChartOp with at least one label/value pair.

    Returns:
        The python-pptx Chart object.

    Raises:
        ValueError: If the op carries no data points or mismatched lengths.
    """
    if not op.labels:
        raise ValueError("chart has no data points")
    if len(op.labels) != len(op.values):
        raise ValueError(
            f"chart has {len(op.labels)} labels but {len(op.values)} values")

    graphic_frame = slide.shapes.add_chart(
        XL_CHART_TYPE.COLUMN_CLUSTERED,
        Inches(op.x),
        Inches(op.y),
        Inches(op.w),
        Inches(op.h),
        build_chart_data(op),
    )
    chart = graphic_frame.chart

    _apply_point_colors(chart, op)
    _apply_chart_style(chart, op)

    return chart
