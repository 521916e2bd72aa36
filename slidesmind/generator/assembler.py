"""Document assembler — renders every slide of a draft and encodes the deck.

Slides are rendered in ascending ``position`` order with per-slide
isolation (LayoutRenderer.render_safe), so a malformed slide costs only
itself.  Only a failure of the encoder, which leaves no document at all,
escalates as RenderFailure.
"""

from dataclasses import dataclass, field

import structlog

from slidesmind.errors import RenderFailure, ValidationFailure
from slidesmind.generator.operations import RenderedSlide
from slidesmind.generator.pptx_encoder import PPTXEncoder
from slidesmind.generator.renderer import LayoutRenderer
from slidesmind.schema.draft import PresentationDraft
from slidesmind.schema.theme import ThemeDescriptor

logger = structlog.get_logger(__name__)


@dataclass
class AssembledDocument:
    """Encoded deck plus the draw operations it was built from."""
    content: bytes
    slide_count: int
    slides: list[RenderedSlide] = field(default_factory=list)

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def fallback_count(self) -> int:
        return sum(1 for s in self.slides if s.fallback)


class DocumentAssembler:
    """Drives the renderer over a draft and hands the result to an encoder.

    Parameters
    ----------
    renderer : LayoutRenderer, optional
    encoder : PPTXEncoder, optional
        Anything with ``encode(list[RenderedSlide]) -> bytes``.
    """

    def __init__(self, renderer: LayoutRenderer | None = None,
                 encoder: PPTXEncoder | None = None) -> None:
        self.renderer = renderer or LayoutRenderer()
        self.encoder = encoder or PPTXEncoder()

    def render_slides(self, draft: PresentationDraft,
                      theme: ThemeDescriptor) -> list[RenderedSlide]:
        """Draw operations for every slide, in position order."""
        return [
            self.renderer.render_safe(slide, theme.get_layout(slide.type), theme)
            for slide in draft.ordered_slides()
        ]

    def assemble(self, draft: PresentationDraft,
                 theme: ThemeDescriptor) -> AssembledDocument:
        """Render and encode *draft* with *theme*.

        Raises
        ------
        ValidationFailure
            The draft has no slides.
        RenderFailure
            The encoder could not produce a document.
        """
        if not draft.slides:
            raise ValidationFailure(f"Draft {draft.id} has no slides to export")

        rendered = self.render_slides(draft, theme)
        try:
            content = self.encoder.encode(rendered)
        except Exception as exc:
            logger.error("document_encode_failed", draft_id=draft.id,
                         theme=theme.id, error=str(exc))
            raise RenderFailure(f"Could not encode draft {draft.id}: {exc}") from exc

        document = AssembledDocument(content=content, slide_count=len(rendered),
                                     slides=rendered)
        logger.info("document_assembled", draft_id=draft.id, theme=theme.id,
                    slides=document.slide_count, fallbacks=document.fallback_count,
                    size_bytes=document.size_bytes)
        return document
