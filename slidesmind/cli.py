"""CLI entry point for slidesmind.

Renders drafts to PPTX with a theme, validates exported decks, and shows
theme structure.

Usage::

    # Start a draft from the built-in three-slide outline
    slidesmind new --topic "Solar Power" --theme executive \\
        --output drafts/solar.yaml

    # Render a draft with its own theme (or override it)
    slidesmind render --draft drafts/solar.yaml \\
        --output output/solar.pptx
    # Without --output the deck lands in $SLIDESMIND_OUTPUT_DIR (default output/)
    slidesmind render --draft drafts/solar.yaml --theme slancia

    # Use a custom YAML theme
    slidesmind render --draft drafts/solar.yaml \\
        --theme-file themes/custom.yaml --output output/solar.pptx

    # Validate an existing PPTX against its draft
    slidesmind validate --draft drafts/solar.yaml --pptx output/solar.pptx

    # Inspect a theme (layouts, colours, directives)
    slidesmind inspect --theme nexa -v

    # List built-in themes
    slidesmind themes
"""

import argparse
import sys
from pathlib import Path

from slidesmind.config import Settings
from slidesmind.errors import SlidesmindError
from slidesmind.generator.assembler import DocumentAssembler
from slidesmind.log_config import configure_logging
from slidesmind.processor.drafts import DraftService, InMemoryDraftStore
from slidesmind.processor.outline import fallback_outline
from slidesmind.qa.validator import QAValidator
from slidesmind.schema.builtin_themes import get_builtin_theme, list_builtin_themes
from slidesmind.schema.draft import SlideType
from slidesmind.schema.loader import load_draft, load_theme, save_draft
from slidesmind.schema.theme import FontType


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _load_theme(args, default_slug: str | None = None):
    """Load a ThemeDescriptor from CLI args (--theme-file or --theme)."""
    if getattr(args, "theme_file", None):
        path = Path(args.theme_file)
        if not path.exists():
            _error(f"Theme file not found: {path}")
        return load_theme(path)

    slug = getattr(args, "theme", None) or default_slug
    if not slug:
        _error("No theme given. Use --theme or --theme-file.")
    return get_builtin_theme(slug)


def _settings(args) -> Settings:
    """Settings resolved by main(), or a fresh read of the environment."""
    return getattr(args, "settings", None) or Settings()


def _load_draft(args):
    path = Path(args.draft)
    if not path.exists():
        _error(f"Draft file not found: {path}")
    return load_draft(path)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_new(args):
    """Write a starter draft built from the fallback outline."""
    settings = _settings(args)
    service = DraftService(InMemoryDraftStore(), page_size=settings.page_size)
    draft = service.create_draft(
        owner_id=args.owner,
        topic=args.topic,
        language=args.language,
        theme_id=args.theme,
        outline=fallback_outline(args.topic),
    )
    output = Path(args.output)
    save_draft(draft, output)
    _info(f"Written: {output} ({len(draft.slides)} slides, theme {draft.theme_id})")


def cmd_render(args):
    """Render a draft to PPTX."""
    draft = _load_draft(args)
    theme = _load_theme(args, default_slug=draft.theme_id)
    _info(f"Draft: {draft.title} ({len(draft.slides)} slides)")
    _info(f"Theme: {theme.name} ({len(theme.layouts)} layouts)")

    missing = sorted({s.type.value for s in draft.slides} - set(theme.layouts))
    if missing:
        _warn(f"Theme has no layout for: {', '.join(missing)} (title-only fallback)")

    _info("Building PPTX...")
    document = DocumentAssembler().assemble(draft, theme)
    if document.fallback_count:
        _warn(f"{document.fallback_count} slide(s) rendered with a fallback")

    # QA validation
    if not args.skip_qa:
        _info("Running QA validation...")
        qa_result = QAValidator(draft, theme).validate(document.content)

        if qa_result.passed:
            _info(qa_result.summary())
        else:
            _warn(qa_result.summary())
            if args.verbose:
                print(qa_result.report(), file=sys.stderr)

            if not args.force:
                _error("QA validation failed. Use --force to write anyway, "
                       "or --skip-qa to skip validation.")
    else:
        _info("QA validation skipped (--skip-qa)")

    # Write output
    if args.output:
        output = Path(args.output)
    else:
        output = _settings(args).output_dir / f"{Path(args.draft).stem}.pptx"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(document.content)
    _info(f"Written: {output} ({document.size_bytes:,} bytes)")


def cmd_validate(args):
    """Validate an existing PPTX against its draft."""
    draft = _load_draft(args)
    theme = _load_theme(args) if (args.theme or args.theme_file) else None
    pptx_path = Path(args.pptx)
    if not pptx_path.exists():
        _error(f"PPTX file not found: {pptx_path}")

    _info(f"Validating {pptx_path} against draft {draft.title!r}")
    qa_result = QAValidator(draft, theme).validate(pptx_path.read_bytes())

    print(qa_result.report())
    sys.exit(0 if qa_result.passed else 1)


def cmd_inspect(args):
    """Show theme information."""
    theme = _load_theme(args)

    print(f"Theme:       {theme.name} ({theme.id})")
    print(f"Premium:     {'yes' if theme.is_premium else 'no'}")
    print(f"Fonts:       heading={theme.font_family(FontType.HEADING)}, "
          f"body={theme.font_family(FontType.BODY)}")
    print(f"Layouts:     {len(theme.layouts)}/{len(SlideType)}")

    missing = [t.value for t in SlideType if t.value not in theme.layouts]
    if missing:
        print(f"Missing:     {', '.join(missing)}")

    if args.colors:
        print()
        for key, value in theme.colors.items():
            print(f"  {key:<16} {value}")

    if args.verbose:
        print()
        for slide_type, layout in theme.layouts.items():
            directives = [name for name, present in (
                ("background", layout.background),
                ("shapes", layout.shapes),
                ("decorations", layout.decorations),
                ("titleText", layout.title_text),
                ("subtitleText", layout.subtitle_text),
                ("bullets", layout.bullets),
                ("plan", layout.plan),
                ("columns", layout.has_columns),
                ("grid", layout.grid),
                ("chart", layout.chart),
            ) if present]
            print(f"  {slide_type:<12} — {', '.join(directives)}")


def cmd_themes(args):
    """List built-in themes."""
    for theme in list_builtin_themes():
        premium = " (premium)" if theme.is_premium else ""
        print(f"  {theme.id:<12} {theme.name}{premium} — {theme.description}")


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------

def _info(msg):
    print(f"  {msg}", file=sys.stderr)


def _warn(msg):
    print(f"  WARNING: {msg}", file=sys.stderr)


def _error(msg):
    print(f"  ERROR: {msg}", file=sys.stderr)
    sys.exit(1)


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

def build_parser():
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="slidesmind",
        description="Render theme-driven slide decks from editable drafts.",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        help="Log renderer (default: $SLIDESMIND_LOG_FORMAT or console).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # ---- new ----
    new = subparsers.add_parser(
        "new",
        help="Write a starter draft file for a topic.",
    )
    new.add_argument("--topic", required=True, help="Presentation topic.")
    new.add_argument("--theme", default="executive",
                     help="Built-in theme slug (default: executive).")
    new.add_argument("--language", default="en", help="Content language (default: en).")
    new.add_argument("--owner", default="local", help="Owner id stored in the draft.")
    new.add_argument("-o", "--output", required=True, help="Output draft YAML path.")
    new.set_defaults(func=cmd_new)

    # ---- render ----
    render = subparsers.add_parser(
        "render",
        help="Render a draft to a PPTX presentation.",
    )
    _add_draft_args(render)
    _add_theme_args(render)
    render.add_argument(
        "-o", "--output",
        default=None,
        help="Output PPTX file path (default: <output_dir>/<draft name>.pptx).",
    )
    render.add_argument(
        "--skip-qa",
        action="store_true",
        default=False,
        help="Skip QA validation after rendering.",
    )
    render.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Write output even if QA validation fails.",
    )
    render.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show detailed output (full QA report on failure).",
    )
    render.set_defaults(func=cmd_render)

    # ---- validate ----
    val = subparsers.add_parser(
        "validate",
        help="Validate an existing PPTX against its draft.",
    )
    _add_draft_args(val)
    _add_theme_args(val)
    val.add_argument(
        "--pptx",
        required=True,
        help="Path to the PPTX file to validate.",
    )
    val.set_defaults(func=cmd_validate)

    # ---- inspect ----
    insp = subparsers.add_parser(
        "inspect",
        help="Show theme layouts and colours.",
    )
    _add_theme_args(insp)
    insp.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Show per-layout directives.",
    )
    insp.add_argument(
        "--colors",
        action="store_true",
        default=False,
        help="List the colour palette.",
    )
    insp.set_defaults(func=cmd_inspect)

    # ---- themes ----
    themes = subparsers.add_parser("themes", help="List built-in themes.")
    themes.set_defaults(func=cmd_themes)

    return parser


def _add_draft_args(parser):
    parser.add_argument(
        "--draft",
        required=True,
        help="Path to a draft YAML/JSON file.",
    )


def _add_theme_args(parser):
    """Add --theme / --theme-file args to a subparser."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--theme",
        help="Built-in theme slug (executive, slancia, nexa).",
    )
    group.add_argument(
        "--theme-file",
        dest="theme_file",
        help="Path to a custom YAML theme file.",
    )


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv=None):
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings()
    if args.log_format:
        settings.log_format = args.log_format
    configure_logging(settings)
    args.settings = settings

    try:
        args.func(args)
    except SlidesmindError as exc:
        _error(str(exc))


if __name__ == "__main__":
    main()
