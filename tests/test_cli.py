"""Tests for the CLI entry point (slidesmind.cli).

Covers argument parsing, command dispatch, theme and draft loading, the
render pipeline with QA gating, the validate and inspect commands, and
error handling.  QA results are mocked where the pass/fail branch is what
matters; the end-to-end tests run against real files in tmp_path.
"""

import argparse
from unittest.mock import MagicMock, patch

import pytest
from pptx import Presentation

from slidesmind.cli import (
    _load_theme,
    build_parser,
    cmd_inspect,
    cmd_new,
    cmd_render,
    main,
)
from slidesmind.config import Settings
from slidesmind.schema.builtin_themes import get_builtin_theme
from slidesmind.schema.loader import load_draft, save_draft, save_theme


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def parser():
    return build_parser()


@pytest.fixture
def draft_file(tmp_path):
    """A starter draft written through the `new` command."""
    path = tmp_path / "drafts" / "solar.yaml"
    cmd_new(argparse.Namespace(topic="Solar Power", theme="executive",
                               language="en", owner="local", output=str(path)))
    return path


@pytest.fixture
def qa_fail():
    """A failing QAResult mock."""
    qa = MagicMock()
    qa.passed = False
    qa.summary.return_value = "QA FAIL: 1 error(s), 0 warning(s)"
    qa.report.return_value = (
        "QA FAIL: 1 error(s), 0 warning(s)\n"
        "  [ERROR] slide -1: Expected 3 slides, got 2"
    )
    return qa


def _render_args(draft_file, output, /, **overrides):
    args = dict(draft=str(draft_file), theme=None, theme_file=None,
                output=str(output), skip_qa=False, force=False, verbose=False)
    args.update(overrides)
    return argparse.Namespace(**args)


# ===================================================================
# Parser
# ===================================================================

class TestParser:
    """Tests for build_parser()."""

    def test_render_minimal(self, parser):
        args = parser.parse_args(["render", "--draft", "d.yaml", "-o", "out.pptx"])
        assert args.command == "render"
        assert args.theme is None
        assert args.skip_qa is False

    def test_render_flags(self, parser):
        args = parser.parse_args([
            "render", "--draft", "d.yaml", "--theme", "slancia",
            "-o", "out.pptx", "--skip-qa", "--force", "-v",
        ])
        assert args.theme == "slancia"
        assert args.skip_qa and args.force and args.verbose

    def test_theme_and_theme_file_exclusive(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["render", "--draft", "d.yaml", "--theme", "nexa",
                               "--theme-file", "t.yaml", "-o", "out.pptx"])

    def test_new_defaults(self, parser):
        args = parser.parse_args(["new", "--topic", "Solar", "-o", "d.yaml"])
        assert args.theme == "executive"
        assert args.language == "en"

    def test_validate_requires_pptx(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args(["validate", "--draft", "d.yaml"])

    def test_log_format_choice(self, parser):
        args = parser.parse_args(["--log-format", "json", "themes"])
        assert args.log_format == "json"

    def test_no_command_fails(self, parser):
        with pytest.raises(SystemExit):
            parser.parse_args([])


# ===================================================================
# Loading
# ===================================================================

class TestLoadTheme:
    def test_builtin(self):
        args = argparse.Namespace(theme="nexa", theme_file=None)
        assert _load_theme(args).id == "nexa"

    def test_default_slug(self):
        args = argparse.Namespace(theme=None, theme_file=None)
        assert _load_theme(args, default_slug="slancia").id == "slancia"

    def test_custom_file(self, tmp_path):
        path = tmp_path / "custom.yaml"
        save_theme(get_builtin_theme("slancia"), path)
        args = argparse.Namespace(theme=None, theme_file=str(path))
        assert _load_theme(args).id == "slancia"

    def test_missing_file_exits(self, tmp_path):
        args = argparse.Namespace(theme=None, theme_file=str(tmp_path / "nope.yaml"))
        with pytest.raises(SystemExit):
            _load_theme(args)

    def test_no_theme_exits(self):
        with pytest.raises(SystemExit):
            _load_theme(argparse.Namespace(theme=None, theme_file=None))


# ===================================================================
# Commands
# ===================================================================

class TestCmdNew:
    def test_writes_three_slide_draft(self, draft_file):
        draft = load_draft(draft_file)
        assert draft.title == "Solar Power"
        assert draft.theme_id == "executive"
        assert [s.title for s in draft.ordered_slides()] == [
            "Solar Power", "Introduction", "Thank You",
        ]


class TestCmdRender:
    def test_writes_pptx(self, tmp_path, draft_file):
        output = tmp_path / "out" / "solar.pptx"
        cmd_render(_render_args(draft_file, output))
        assert len(Presentation(str(output)).slides) == 3

    def test_theme_override(self, tmp_path, draft_file, capsys):
        output = tmp_path / "solar.pptx"
        cmd_render(_render_args(draft_file, output, theme="slancia"))
        assert "Theme: Slancia" in capsys.readouterr().err

    def test_qa_fail_exits_without_writing(self, tmp_path, draft_file, qa_fail):
        output = tmp_path / "solar.pptx"
        with patch("slidesmind.cli.QAValidator") as MockValidator:
            MockValidator.return_value.validate.return_value = qa_fail
            with pytest.raises(SystemExit):
                cmd_render(_render_args(draft_file, output))
        assert not output.exists()

    def test_qa_fail_force_writes(self, tmp_path, draft_file, qa_fail, capsys):
        output = tmp_path / "solar.pptx"
        with patch("slidesmind.cli.QAValidator") as MockValidator:
            MockValidator.return_value.validate.return_value = qa_fail
            cmd_render(_render_args(draft_file, output, force=True, verbose=True))
        assert output.exists()
        assert "Expected 3 slides" in capsys.readouterr().err

    def test_skip_qa(self, tmp_path, draft_file):
        output = tmp_path / "solar.pptx"
        with patch("slidesmind.cli.QAValidator") as MockValidator:
            cmd_render(_render_args(draft_file, output, skip_qa=True))
        MockValidator.return_value.validate.assert_not_called()
        assert output.exists()

    def test_default_output_dir(self, tmp_path, draft_file):
        args = _render_args(draft_file, tmp_path, output=None)
        args.settings = Settings(output_dir=tmp_path / "decks")
        cmd_render(args)
        assert (tmp_path / "decks" / "solar.pptx").exists()

    def test_missing_draft_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            cmd_render(_render_args(tmp_path / "nope.yaml", tmp_path / "x.pptx"))


class TestCmdInspect:
    def test_basic(self, capsys):
        cmd_inspect(argparse.Namespace(theme="nexa", theme_file=None,
                                       verbose=False, colors=False))
        out = capsys.readouterr().out
        assert "Nexa (nexa)" in out
        assert "Premium:     yes" in out
        assert "Layouts:     11/11" in out
        assert "Missing" not in out

    def test_colors(self, capsys):
        cmd_inspect(argparse.Namespace(theme="executive", theme_file=None,
                                       verbose=False, colors=True))
        assert "#3D2E5C" in capsys.readouterr().out

    def test_verbose_lists_directives(self, capsys):
        cmd_inspect(argparse.Namespace(theme="executive", theme_file=None,
                                       verbose=True, colors=False))
        out = capsys.readouterr().out
        assert "stats" in out and "grid" in out
        assert "chart" in out


# ===================================================================
# main()
# ===================================================================

class TestMain:
    """Tests for main()."""

    def test_themes(self, capsys):
        main(["themes"])
        out = capsys.readouterr().out
        assert "executive" in out and "slancia" in out
        assert "nexa" in out and "(premium)" in out

    def test_new_render_validate(self, tmp_path):
        draft_path = tmp_path / "deck.yaml"
        pptx_path = tmp_path / "deck.pptx"
        main(["new", "--topic", "Wind", "--theme", "slancia", "-o", str(draft_path)])
        main(["render", "--draft", str(draft_path), "-o", str(pptx_path)])
        assert pptx_path.exists()

        with pytest.raises(SystemExit) as exc_info:
            main(["validate", "--draft", str(draft_path), "--pptx", str(pptx_path),
                  "--theme", "slancia"])
        assert exc_info.value.code == 0

    def test_validate_mismatch_exit_code(self, tmp_path, draft_file):
        pptx_path = tmp_path / "deck.pptx"
        main(["render", "--draft", str(draft_file), "-o", str(pptx_path)])

        draft = load_draft(draft_file)
        draft.slides.pop()
        save_draft(draft, draft_file)

        with pytest.raises(SystemExit) as exc_info:
            main(["validate", "--draft", str(draft_file), "--pptx", str(pptx_path)])
        assert exc_info.value.code == 1

    def test_unknown_theme_reports_error(self, draft_file, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["render", "--draft", str(draft_file), "--theme", "neon",
                  "-o", str(tmp_path / "x.pptx")])
        assert exc_info.value.code == 1
        assert "Theme not found: neon" in capsys.readouterr().err

    def test_help(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0
