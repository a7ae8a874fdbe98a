"""Write editions to an output directory and read metadata back."""

import json
import logging
from pathlib import Path
from typing import Sequence

from pydantic import ValidationError

from ..core.models import Edition, EditionMetadata
from ..errors import ExportError


logger = logging.getLogger(__name__)


def write_collection(editions: Sequence[Edition], out_dir: Path | str) -> tuple[Path, Path]:
    """Write `images/<n>.png` and `metadata/<n>.json` for each edition.

    Returns:
        (images_dir, metadata_dir)

    Raises:
        ExportError: If a file cannot be written
    """
    out_dir = Path(out_dir)
    images_dir = out_dir / "images"
    metadata_dir = out_dir / "metadata"
    try:
        images_dir.mkdir(parents=True, exist_ok=True)
        metadata_dir.mkdir(parents=True, exist_ok=True)
        for edition in editions:
            (images_dir / edition.filename).write_bytes(edition.image_png)
            (metadata_dir / f"{edition.index}.json").write_text(edition.metadata.to_json())
    except OSError as e:
        raise ExportError(f"Failed to write collection to {out_dir}: {e}") from e

    logger.info(f"[Export] wrote {len(editions)} editions to {out_dir}")
    return images_dir, metadata_dir


def write_metadata(records: Sequence[EditionMetadata], out_dir: Path | str) -> Path:
    """Write `<edition>.json` for each record."""
    out_dir = Path(out_dir)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        for record in records:
            (out_dir / f"{record.edition}.json").write_text(record.to_json())
    except OSError as e:
        raise ExportError(f"Failed to write metadata to {out_dir}: {e}") from e
    return out_dir


def _edition_number(path: Path) -> int | None:
    try:
        return int(path.stem)
    except ValueError:
        return None


def load_metadata_dir(path: Path | str) -> list[EditionMetadata]:
    """Read `<n>.json` records from a directory in numeric order.

    Files whose stem is not an integer are ignored.

    Raises:
        NotADirectoryError: If path is not a directory
        ValueError: If a record cannot be parsed
    """
    path = Path(path)
    if not path.is_dir():
        raise NotADirectoryError(f"Metadata directory not found: {path}")

    numbered = []
    for f in path.glob("*.json"):
        n = _edition_number(f)
        if n is not None:
            numbered.append((n, f))

    records = []
    for _, f in sorted(numbered):
        try:
            records.append(EditionMetadata.model_validate(json.loads(f.read_text())))
        except (json.JSONDecodeError, ValidationError) as e:
            raise ValueError(f"Invalid metadata file {f.name}: {e}") from e
    return records
