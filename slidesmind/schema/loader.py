"""Schema loader — YAML serialization for themes and drafts.

Theme descriptors and drafts can be reviewed, version-controlled and edited
as human-readable YAML files.  JSON files load too, since YAML parses them.
"""

from pathlib import Path
from typing import Any

import yaml

from slidesmind.errors import ThemeValidationError, ValidationFailure

from .draft import PresentationDraft
from .theme import ThemeDescriptor


def _dump(data: dict, path: str | Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False,
                  allow_unicode=True, width=120)


def _load(path: str | Path) -> Any:
    path = Path(path)
    with open(path, encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ValidationFailure(f"{path}: not valid YAML/JSON: {exc}") from exc


def save_theme(theme: ThemeDescriptor, path: str | Path) -> None:
    """Serialize a ThemeDescriptor to a YAML file."""
    _dump(theme.to_dict(), path)


def load_theme(path: str | Path) -> ThemeDescriptor:
    """Deserialize and validate a ThemeDescriptor from a YAML file."""
    data = _load(path)
    if not isinstance(data, dict):
        raise ThemeValidationError(str(path), "file does not contain a mapping")
    return ThemeDescriptor.from_dict(data)


def save_draft(draft: PresentationDraft, path: str | Path) -> None:
    """Serialize a PresentationDraft to a YAML file."""
    _dump(draft.to_dict(), path)


def load_draft(path: str | Path) -> PresentationDraft:
    """Deserialize a PresentationDraft from a YAML file."""
    data = _load(path)
    if not isinstance(data, dict):
        raise ValidationFailure(f"{path}: draft file does not contain a mapping")
    try:
        return PresentationDraft.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValidationFailure(f"{path}: malformed draft: {exc}") from exc
