"""Error taxonomy shared by the draft, render and export layers.

Every error carries an HTTP-style ``status_code`` so an outer request layer
can translate it without inspecting messages.  Ownership mismatches are
reported as :class:`NotFoundError`, never as a distinct "forbidden" error.
"""


class SlidesmindError(Exception):
    """Base class for all slidesmind errors."""
    status_code = 500


class NotFoundError(SlidesmindError):
    """A draft, slide, theme or user does not resolve for the caller."""
    status_code = 404

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind.capitalize()} not found: {identifier}")


class QuotaExceededError(SlidesmindError):
    """Non-premium user is at or above the free generation limit."""
    status_code = 403


class PremiumRequiredError(SlidesmindError):
    """The requested theme is gated behind a premium subscription."""
    status_code = 403


class GenerationFailure(SlidesmindError):
    """The outline generator returned something unusable."""


class RenderFailure(SlidesmindError):
    """A slide (or the whole document) could not be rendered."""


class StorageFailure(SlidesmindError):
    """Upload of a rendered document to object storage failed."""


class ValidationFailure(SlidesmindError):
    """Malformed input: missing field, wrong type, unusable value."""
    status_code = 400


class ThemeValidationError(ValidationFailure):
    """A theme descriptor was rejected at load time."""

    def __init__(self, theme_id: str, message: str) -> None:
        self.theme_id = theme_id
        super().__init__(f"Theme {theme_id!r}: {message}")
