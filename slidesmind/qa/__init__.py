"""QA validation package for slidesmind.

Validates exported PPTX output against its draft — checks slide count,
dimensions, titles and list items, stat values, charts, and background
fills.
"""

from .validator import (
    Issue,
    QAResult,
    QAValidator,
    validate_presentation,
)

__all__ = [
    "Issue",
    "QAResult",
    "QAValidator",
    "validate_presentation",
]
