"""User configuration for Strata.

Settings live in `$STRATA_HOME/config.yaml` (default `~/.strata`). Two
sections:

    generation: canvas size, edition count, background fill, seed
    export:     IPFS gateway host and placeholder hash token

Invalid generation values are never fatal: `resolve_canvas` and
`resolve_edition_count` substitute the documented defaults and log a warning.
"""

import logging
import os
from pathlib import Path
from typing import get_args

import yaml
from pydantic import BaseModel, Field

from .core.models import CanvasSize, DEFAULT_CANVAS_WIDTH, DEFAULT_CANVAS_HEIGHT


logger = logging.getLogger(__name__)

DEFAULT_EDITION_COUNT = 100
DEFAULT_BACKGROUND = "#6A3CFF"
PREVIEW_BACKGROUND = "#f5f5f5"
DEFAULT_GATEWAY_HOST = "lighthouse.storage"
DEFAULT_PLACEHOLDER_HASH = "NEW_HASH_HERE"


class GenerationSettings(BaseModel):
    canvas_width: int = DEFAULT_CANVAS_WIDTH
    canvas_height: int = DEFAULT_CANVAS_HEIGHT
    edition_count: int = DEFAULT_EDITION_COUNT
    background: str = DEFAULT_BACKGROUND
    seed: int | None = None


class ExportSettings(BaseModel):
    gateway_host: str = DEFAULT_GATEWAY_HOST
    placeholder_hash: str = DEFAULT_PLACEHOLDER_HASH


def get_config_dir() -> Path:
    """Get the Strata home directory."""
    env = os.environ.get("STRATA_HOME")
    if env:
        return Path(env)
    return Path.home() / ".strata"


def get_config_path() -> Path:
    return get_config_dir() / "config.yaml"


class StrataConfig(BaseModel):
    """Persisted user settings."""

    generation: GenerationSettings = Field(default_factory=GenerationSettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> "StrataConfig":
        """Load config from disk, falling back to defaults when absent."""
        path = path or get_config_path()
        if not path.exists():
            return cls()
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> Path:
        path = path or get_config_path()
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.safe_dump(self.model_dump(mode="json"), f, sort_keys=False)
        return path

    def set_value(self, key: str, raw: str) -> None:
        """Set a dotted `section.field` key from its string form.

        Raises:
            KeyError: If the key does not name a known setting
            ValueError: If the value cannot be coerced to the field type
        """
        section_name, _, field_name = key.partition(".")
        section = getattr(self, section_name, None) if field_name else None
        if not isinstance(section, BaseModel) or field_name not in type(section).model_fields:
            raise KeyError(f"Unknown key: {key}")

        annotation = type(section).model_fields[field_name].annotation
        optional = type(None) in get_args(annotation)
        if annotation is int or int in get_args(annotation):
            if optional and raw.lower() in ("none", "null", ""):
                value = None
            else:
                try:
                    value = int(raw)
                except ValueError:
                    raise ValueError(f"Invalid integer for {key}: {raw}") from None
        else:
            value = raw

        setattr(section, field_name, value)

    def canvas(self) -> CanvasSize:
        return resolve_canvas(self.generation.canvas_width, self.generation.canvas_height)


def resolve_canvas(width: int | None, height: int | None) -> CanvasSize:
    """Build a CanvasSize, replacing non-positive dimensions with defaults."""
    if width is None or width <= 0:
        if width is not None:
            logger.warning(
                f"[Config] Invalid canvas width {width}, using {DEFAULT_CANVAS_WIDTH}"
            )
        width = DEFAULT_CANVAS_WIDTH
    if height is None or height <= 0:
        if height is not None:
            logger.warning(
                f"[Config] Invalid canvas height {height}, using {DEFAULT_CANVAS_HEIGHT}"
            )
        height = DEFAULT_CANVAS_HEIGHT
    return CanvasSize(width=width, height=height)


def resolve_edition_count(count: int | None) -> int:
    """Normalize a requested edition count.

    None or negative counts fall back to the default. Zero is a valid request
    for an empty batch.
    """
    if count is None:
        return DEFAULT_EDITION_COUNT
    if count < 0:
        logger.warning(
            f"[Config] Invalid edition count {count}, using {DEFAULT_EDITION_COUNT}"
        )
        return DEFAULT_EDITION_COUNT
    return count
