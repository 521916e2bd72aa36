"""QA validator — inspects generated PPTX output against its draft.

Validates that an exported deck matches the draft it was built from:
slide count and order, 16:9 dimensions, titles and list items present,
stat values present, charts present exactly where a chart slide has valid
data points, and (when the theme is supplied) background fills.  Uses
python-pptx to read back the generated file.

Usage::

    from slidesmind.qa.validator import QAValidator

    validator = QAValidator(draft, theme)
    result = validator.validate(pptx_bytes)
    assert result.passed, result.summary()
"""

import io
from dataclasses import dataclass, field

from pptx import Presentation
from pptx.enum.dml import MSO_FILL_TYPE
from pptx.util import Inches

from slidesmind.schema.draft import PresentationDraft, Slide, SlideType
from slidesmind.schema.theme import ThemeDescriptor

SLIDE_WIDTH_IN = 13.333
SLIDE_HEIGHT_IN = 7.5

# Slide types whose content items are drawn one text box per item.
_LIST_TYPES = (SlideType.CONTENT, SlideType.PLAN, SlideType.TWO_COLUMN,
               SlideType.COMPARISON)

# Quote layouts put the quote text in the title slot.
_UNTITLED_TYPES = (SlideType.QUOTE,)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class Issue:
    """One finding, tied to a draft slide or to the deck (index -1)."""
    severity: str
    slide_index: int
    slide_id: str
    category: str       # slide_count, dimensions, title_missing, chart_missing, ...
    message: str

    def __str__(self) -> str:
        where = f"slide {self.slide_index}"
        if self.slide_id:
            where = f"{where} ({self.slide_id})"
        return f"[{self.severity.upper()}] {where}: {self.message}"


@dataclass
class QAResult:
    """Findings for one exported deck.  Only errors fail the deck."""
    issues: list[Issue] = field(default_factory=list)

    def _with_severity(self, severity: str) -> list[Issue]:
        return [issue for issue in self.issues if issue.severity == severity]

    @property
    def errors(self) -> list[Issue]:
        return self._with_severity("error")

    @property
    def warnings(self) -> list[Issue]:
        return self._with_severity("warning")

    @property
    def passed(self) -> bool:
        return not self.errors

    def for_slide(self, slide_id: str) -> list[Issue]:
        return [issue for issue in self.issues if issue.slide_id == slide_id]

    def summary(self) -> str:
        verdict = "PASS" if self.passed else "FAIL"
        return (
            f"QA {verdict}: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)"
        )

    def report(self) -> str:
        """Summary line followed by one indented line per issue."""
        return "\n".join([self.summary(), *(f"  {issue}" for issue in self.issues)])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _slide_text(pptx_slide) -> str:
    """Every text frame on the slide, newline-joined."""
    return "\n".join(
        shape.text_frame.text for shape in pptx_slide.shapes if shape.has_text_frame
    )


def _charts(pptx_slide) -> list:
    return [shape for shape in pptx_slide.shapes if shape.has_chart]


# ---------------------------------------------------------------------------
# QAValidator
# ---------------------------------------------------------------------------

class QAValidator:
    """Validates an exported PPTX against the draft it came from.

    Parameters
    ----------
    draft : PresentationDraft
    theme : ThemeDescriptor, optional
        Enables background colour checks.
    """

    def __init__(self, draft: PresentationDraft,
                 theme: ThemeDescriptor | None = None) -> None:
        self.draft = draft
        self.theme = theme

    def validate(self, pptx_bytes: bytes) -> QAResult:
        """Run all validation checks on an exported PPTX."""
        prs = Presentation(io.BytesIO(pptx_bytes))
        result = QAResult()
        slides = self.draft.ordered_slides()

        self._check_slide_count(prs, len(slides), result)
        self._check_dimensions(prs, result)

        # Per-slide checks (only if count matches)
        if len(prs.slides) == len(slides):
            for index, (pptx_slide, slide) in enumerate(zip(prs.slides, slides)):
                self._check_slide(index, pptx_slide, slide, result)

        return result

    # ------------------------------------------------------------------
    # Presentation-level checks
    # ------------------------------------------------------------------

    def _add(self, result: QAResult, severity: str, index: int, slide_id: str,
             category: str, message: str) -> None:
        result.issues.append(Issue(severity=severity, slide_index=index,
                                   slide_id=slide_id, category=category,
                                   message=message))

    def _check_slide_count(self, prs, expected: int, result: QAResult) -> None:
        actual = len(prs.slides)
        if actual != expected:
            self._add(result, "error", -1, "", "slide_count",
                      f"Expected {expected} slides, got {actual}")

    def _check_dimensions(self, prs, result: QAResult) -> None:
        expected_w = Inches(SLIDE_WIDTH_IN)
        expected_h = Inches(SLIDE_HEIGHT_IN)
        if prs.slide_width != expected_w or prs.slide_height != expected_h:
            self._add(result, "error", -1, "", "dimensions",
                      f"Slide size {prs.slide_width}x{prs.slide_height} EMU != "
                      f"expected {expected_w}x{expected_h} (16:9)")

    # ------------------------------------------------------------------
    # Per-slide checks
    # ------------------------------------------------------------------

    def _check_slide(self, index: int, pptx_slide, slide: Slide,
                     result: QAResult) -> None:
        text = _slide_text(pptx_slide)

        if (slide.title and slide.type not in _UNTITLED_TYPES
                and slide.title not in text):
            self._add(result, "warning", index, slide.id, "title_missing",
                      f"Title {slide.title!r} not found on slide")

        if slide.type in _LIST_TYPES:
            missing = [item for item in slide.content if item not in text]
            if missing:
                self._add(result, "warning", index, slide.id, "content_missing",
                          f"{len(missing)} content item(s) not found, "
                          f"first: {missing[0]!r}")

        if slide.stats:
            missing = [s.value for s in slide.stats if s.value not in text]
            if missing:
                self._add(result, "warning", index, slide.id, "stat_missing",
                          f"Stat value(s) not found: {', '.join(missing)}")

        self._check_chart(index, pptx_slide, slide, result)
        self._check_background(index, pptx_slide, slide, result)

    def _check_chart(self, index: int, pptx_slide, slide: Slide,
                     result: QAResult) -> None:
        charts = _charts(pptx_slide)
        valid = [p for p in slide.chart_data if p.is_valid]

        if slide.type != SlideType.CHART or not valid:
            if charts:
                self._add(result, "error", index, slide.id, "chart_unexpected",
                          "Chart shape present on a slide without valid chart data")
            return

        if not charts:
            self._add(result, "error", index, slide.id, "chart_missing",
                      "Chart slide has valid data but no chart shape")
            return

        categories = list(charts[0].chart.plots[0].categories)
        if len(categories) != len(valid):
            self._add(result, "error", index, slide.id, "chart_points",
                      f"Chart has {len(categories)} categories, "
                      f"expected {len(valid)}")

    def _check_background(self, index: int, pptx_slide, slide: Slide,
                          result: QAResult) -> None:
        if self.theme is None:
            return
        layout = self.theme.get_layout(slide.type)
        if layout is None or not layout.background:
            return
        expected = self.theme.resolve_color(layout.background).lstrip("#").upper()
        fill = pptx_slide.background.fill
        if fill.type != MSO_FILL_TYPE.SOLID:
            self._add(result, "warning", index, slide.id, "background",
                      f"Expected solid background #{expected}")
            return
        actual = str(fill.fore_color.rgb).upper()
        if actual != expected:
            self._add(result, "warning", index, slide.id, "background",
                      f"Background #{actual} != expected #{expected}")


# ---------------------------------------------------------------------------
# Convenience function
# ---------------------------------------------------------------------------

def validate_presentation(draft: PresentationDraft, pptx_bytes: bytes,
                          theme: ThemeDescriptor | None = None) -> QAResult:
    """One-shot convenience: validate a PPTX against its draft."""
    return QAValidator(draft, theme).validate(pptx_bytes)
