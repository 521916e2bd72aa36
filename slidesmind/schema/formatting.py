"""Text formatting rules for list and grid directives.

Each directive kind has its own small formatter with a closed placeholder
set, instead of general string templating:
- Bullets: literal prefix, or ``N. `` for the number style
- Plan items: ``${number}`` / ``${text}``
- Stat cards: ``${label}`` / ``${value}`` / ``${description}``
- Timeline steps: split on the first ``:``
"""

import math
import re
from dataclasses import dataclass

from .draft import Stat
from .theme import BulletStyle, BulletStyleType, PlanStyle, PlanStyleType


DEFAULT_BULLET_PREFIX = "• "
DEFAULT_DASH_PREFIX = "– "
DASH_MARKER = "–"

_PLAN_KEYS = ("number", "text")
_STAT_KEYS = ("label", "value", "description")
_NUMBER_FORMAT_RE = re.compile(r"^(\D*)(\d+)(\D*)$")


def _substitute(template: str, values: dict[str, str]) -> str:
    """Single-pass ``${key}`` replacement limited to the keys in *values*.

    Unknown placeholders are left as written; substituted text is never
    re-scanned.
    """
    pattern = r"\$\{(" + "|".join(re.escape(k) for k in values) + r")\}"
    return re.sub(pattern, lambda m: values[m.group(1)], template)


def bullet_prefix(style: BulletStyle, index: int) -> str:
    """Prefix for the item at 0-based *index*.

    bullet -> "• "     dash -> "– "     number -> "3. " (for index 2)

    An explicit ``style.prefix`` wins; for the number style it may contain
    ``${number}``.
    """
    if style.type == BulletStyleType.NUMBER:
        if style.prefix is None:
            return f"{index + 1}. "
        return _substitute(style.prefix, {"number": str(index + 1)})
    if style.prefix is not None:
        return style.prefix
    if style.type == BulletStyleType.DASH:
        return DEFAULT_DASH_PREFIX
    return DEFAULT_BULLET_PREFIX


def format_bullet(style: BulletStyle, index: int, text: str) -> str:
    return f"{bullet_prefix(style, index)}{text}"


def number_marker(number_format: str, index: int) -> str:
    """Build the marker for item *index* from a sample like ``"1)"``.

    "1."  -> 1. 2. 3.      "1)" -> 1) 2) 3)      "01." -> 01. 02. 03.
    "(1)" -> (1) (2) (3)   ")"  -> 1) 2) 3)
    """
    number = index + 1
    match = _NUMBER_FORMAT_RE.match(number_format)
    if match is None:
        return f"{number}{number_format}"
    lead, digits, suffix = match.groups()
    if len(digits) > 1 and digits.startswith("0"):
        return f"{lead}{number:0{len(digits)}d}{suffix}"
    return f"{lead}{number}{suffix}"


def plan_marker(style: PlanStyle, index: int) -> str:
    if style.type == PlanStyleType.NUMBERED:
        return number_marker(style.number_format, index)
    if style.type == PlanStyleType.ICON:
        return style.icon
    return DASH_MARKER


def format_plan_item(style: PlanStyle, index: int, text: str) -> str:
    """Apply the plan ``format`` template to one outline item."""
    return _substitute(style.format,
                       {"number": plan_marker(style, index), "text": text})


def format_stat(template: str | None, stat: Stat) -> str:
    """Card text for a stat; ``"<label>\\n<value>"`` without a template."""
    if template is None:
        return f"{stat.label}\n{stat.value}"
    return _substitute(template, {
        "label": stat.label,
        "value": stat.value,
        "description": stat.description,
    })


@dataclass(frozen=True)
class TimelineStep:
    number: int
    title: str
    description: str = ""


def split_timeline_item(text: str) -> tuple[str, str]:
    """Split ``"Title: description"`` on the first colon only."""
    title, sep, description = text.partition(":")
    title = title.strip()
    if not sep:
        return text.strip(), ""
    return (title or text.strip()), description.strip()


def timeline_steps(content: list[str]) -> list[TimelineStep]:
    """Numbered steps (1-based) from timeline content strings."""
    steps = []
    for index, item in enumerate(content):
        title, description = split_timeline_item(item)
        steps.append(TimelineStep(number=index + 1, title=title,
                                  description=description))
    return steps


def split_columns(items: list) -> tuple[list, list]:
    """Left column gets ``ceil(n/2)`` items, right gets the rest."""
    mid = math.ceil(len(items) / 2)
    return items[:mid], items[mid:]
