"""Runtime settings for slidesmind.

Values come from ``SLIDESMIND_*`` environment variables (or a ``.env``
file); CLI flags override them per invocation.  Malformed values raise a
pydantic ``ValidationError`` instead of silently falling back.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_PLACEHOLDER_URL = "https://placeholder.slidesmind.local"


class Settings(BaseSettings):
    """Process-wide configuration."""

    model_config = SettingsConfigDict(
        env_prefix="SLIDESMIND_",
        env_file=".env",
        extra="ignore",
    )

    # Exports
    output_dir: Path = Path("output")
    upload_folder: str = "presentations"
    thumbnail_folder: str = "presentation-thumbnails"
    free_limit: int = Field(default=3, ge=0)

    # Draft listing
    page_size: int = Field(default=50, ge=1)

    # Logging
    log_format: Literal["console", "json"] = "console"
    log_level: str = "INFO"

    placeholder_base_url: str = DEFAULT_PLACEHOLDER_URL

    @field_validator("log_format", mode="before")
    @classmethod
    def lower_log_format(cls, value):
        return value.lower() if isinstance(value, str) else value

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value
