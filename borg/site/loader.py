from __future__ import annotations
from pathlib import Path

import yaml

from borg.errors import ConfigError
from borg.site.models import Site


def load_site(path: Path) -> Site:
    """Load YAML and return a validated Site.

    Raises:
        FileNotFoundError: the file does not exist.
        ConfigError: the file is not valid YAML or not a mapping.
        pydantic.ValidationError: the content does not match the schema.
    """
    try:
        raw_text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise FileNotFoundError(f"Cannot read site description at: {path}") from e

    try:
        data = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}", path=Path(path)) from e
    if not isinstance(data, dict):
        raise ConfigError(f"Site description must be a mapping: {path}", path=Path(path))

    return Site.model_validate(data)
