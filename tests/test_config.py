"""Tests for environment-driven settings."""

import os
from pathlib import Path

import pytest
from pydantic import ValidationError

from slidesmind.config import DEFAULT_PLACEHOLDER_URL, Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Start every test from an environment with no SLIDESMIND_* variables."""
    for name in list(os.environ):
        if name.startswith("SLIDESMIND_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_defaults(self):
        settings = Settings()
        assert settings.free_limit == 3
        assert settings.page_size == 50
        assert settings.output_dir == Path("output")
        assert settings.upload_folder == "presentations"
        assert settings.thumbnail_folder == "presentation-thumbnails"
        assert settings.log_format == "console"
        assert settings.placeholder_base_url == DEFAULT_PLACEHOLDER_URL


class TestEnvironment:
    def test_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("SLIDESMIND_FREE_LIMIT", "7")
        monkeypatch.setenv("SLIDESMIND_PAGE_SIZE", "10")
        monkeypatch.setenv("SLIDESMIND_OUTPUT_DIR", "/tmp/decks")
        settings = Settings()
        assert settings.free_limit == 7
        assert settings.page_size == 10
        assert settings.output_dir == Path("/tmp/decks")

    def test_log_values_normalised(self, monkeypatch):
        monkeypatch.setenv("SLIDESMIND_LOG_FORMAT", "JSON")
        monkeypatch.setenv("SLIDESMIND_LOG_LEVEL", "debug")
        settings = Settings()
        assert settings.log_format == "json"
        assert settings.log_level == "DEBUG"

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("SLIDESMIND_UPLOAD_FOLDER=decks\n")
        assert Settings().upload_folder == "decks"


class TestValidation:
    def test_non_numeric_limit_rejected(self, monkeypatch):
        monkeypatch.setenv("SLIDESMIND_FREE_LIMIT", "abc")
        with pytest.raises(ValidationError):
            Settings()

    def test_negative_limit_rejected(self):
        with pytest.raises(ValidationError):
            Settings(free_limit=-1)

    def test_zero_page_size_rejected(self):
        with pytest.raises(ValidationError):
            Settings(page_size=0)

    def test_unknown_log_format_rejected(self, monkeypatch):
        monkeypatch.setenv("SLIDESMIND_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            Settings()
