"""Outline intake — turns an outline generator's reply into draft slides.

The generator itself is an injected client (``complete(prompt) -> str``);
this module owns only the clamping, the reply parsing and the fixed
fallback outline.  Parsing never raises to the caller: any problem with
the reply is logged and replaced by a three-slide outline so draft
creation always has something to start from.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Protocol

import structlog

from slidesmind.errors import GenerationFailure
from slidesmind.schema.draft import ChartPoint, Quote, SlideType, Stat

logger = structlog.get_logger(__name__)

MIN_SLIDES = 5
MAX_SLIDES = 25
DEFAULT_SLIDES = 10

_FENCE_RE = re.compile(r"```(?:json)?")


class OutlineClient(Protocol):
    """Anything that turns a prompt into model text."""

    def complete(self, prompt: str) -> str: ...


@dataclass
class OutlineSlide:
    type: SlideType
    title: str
    subtitle: str = ""
    content: list[str] = field(default_factory=list)
    stats: list[Stat] = field(default_factory=list)
    quote: Quote | None = None
    chart_data: list[ChartPoint] = field(default_factory=list)
    notes: str = ""


@dataclass
class Outline:
    """Structured outline: deck title, optional agenda and slides in order."""
    title: str
    subtitle: str = ""
    plan: list[str] = field(default_factory=list)
    slides: list[OutlineSlide] = field(default_factory=list)
    fallback: bool = False


def clamp_slide_count(count: int | None) -> int:
    """Keep the requested slide count within 5..25."""
    if count is None:
        return DEFAULT_SLIDES
    return max(MIN_SLIDES, min(int(count), MAX_SLIDES))


def fallback_outline(topic: str) -> Outline:
    """Fixed title / introduction / closing outline."""
    return Outline(
        title=topic,
        subtitle="A Professional Presentation",
        slides=[
            OutlineSlide(type=SlideType.TITLE, title=topic, subtitle="An Overview"),
            OutlineSlide(
                type=SlideType.CONTENT,
                title="Introduction",
                content=[
                    "Welcome to this presentation",
                    "Overview of key topics",
                    "What you'll learn today",
                ],
            ),
            OutlineSlide(type=SlideType.CLOSING, title="Thank You",
                         content=["Questions?"]),
        ],
        fallback=True,
    )


def _outline_slide(raw: Any) -> OutlineSlide:
    if not isinstance(raw, dict):
        raise GenerationFailure(f"slide entry is not an object: {raw!r}")
    try:
        slide_type = SlideType(raw.get("type", "content"))
    except ValueError as exc:
        raise GenerationFailure(f"unknown slide type {raw.get('type')!r}") from exc
    content = raw.get("content") or []
    if isinstance(content, str):
        content = [content]
    return OutlineSlide(
        type=slide_type,
        title=str(raw.get("title") or ""),
        subtitle=str(raw.get("subtitle") or ""),
        content=[str(c) for c in content],
        stats=[Stat.from_dict(s) for s in raw.get("stats") or [] if isinstance(s, dict)],
        quote=Quote.from_dict(raw["quote"]) if isinstance(raw.get("quote"), dict) else None,
        chart_data=[ChartPoint.from_dict(p) for p in raw.get("chartData") or []
                    if isinstance(p, dict)],
        notes=str(raw.get("notes") or ""),
    )


def parse_outline(text: str, topic: str, slide_count: int) -> Outline:
    """Parse a generator reply.

    Code fences are stripped and the outermost ``{...}`` span is decoded.
    The reply must carry a ``slides`` list; it is truncated to
    *slide_count*.

    Raises
    ------
    GenerationFailure
        The reply is not a usable outline.
    """
    cleaned = _FENCE_RE.sub("", text or "").strip()
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start == -1 or end <= start:
        raise GenerationFailure("no JSON object in generator reply")

    try:
        data = json.loads(cleaned[start:end + 1])
    except json.JSONDecodeError as exc:
        raise GenerationFailure(f"generator reply is not valid JSON: {exc}") from exc

    slides = data.get("slides") if isinstance(data, dict) else None
    if not isinstance(slides, list) or not slides:
        raise GenerationFailure("generator reply has no slides list")

    plan = data.get("plan") or []
    return Outline(
        title=str(data.get("title") or topic),
        subtitle=str(data.get("subtitle") or ""),
        plan=[str(p) for p in plan] if isinstance(plan, list) else [],
        slides=[_outline_slide(s) for s in slides[:slide_count]],
    )


def build_prompt(topic: str, language: str, slide_count: int) -> str:
    slide_types = ", ".join(t.value for t in SlideType)
    return (
        f'Create a presentation about "{topic}" in {language}.\n'
        f"Target slide count: {slide_count}. First slide type 'title', "
        f"last slide type 'closing'.\n"
        f"Allowed slide types: {slide_types}.\n"
        "Reply with JSON only: {\"title\", \"subtitle\", \"plan\": [..], "
        "\"slides\": [{\"type\", \"title\", \"subtitle\", \"content\": [..], "
        "\"stats\"?, \"quote\"?, \"chartData\"?}]}"
    )


class OutlineService:
    """Requests an outline from the injected client and parses it.

    Parameters
    ----------
    client : OutlineClient
        Generator with ``complete(prompt) -> str``.
    """

    def __init__(self, client: OutlineClient) -> None:
        self.client = client

    def generate(self, topic: str, language: str = "en",
                 slide_count: int | None = None) -> Outline:
        count = clamp_slide_count(slide_count)
        try:
            reply = self.client.complete(build_prompt(topic, language, count))
            outline = parse_outline(reply, topic, count)
        except Exception as exc:
            logger.warning("outline_fallback", topic=topic, language=language,
                           error=str(exc))
            return fallback_outline(topic)

        logger.info("outline_generated", topic=topic, slides=len(outline.slides))
        return outline
