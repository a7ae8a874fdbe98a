"""Zip archives of generated images and metadata.

An archive is a single artifact: any failure while building or saving it
raises ExportError and nothing partial is returned.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Iterable, Sequence

from ..core.models import Edition, EditionMetadata
from ..errors import ExportError


logger = logging.getLogger(__name__)

IMAGE_FOLDER = "image"


def _zip(entries: Iterable[tuple[str, bytes | str]]) -> bytes:
    buf = io.BytesIO()
    try:
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, content in entries:
                zf.writestr(name, content)
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise ExportError(f"Failed to build archive: {e}") from e
    return buf.getvalue()


def images_archive(editions: Sequence[Edition]) -> bytes:
    """Zip edition images as `image/<index>.png`."""
    return _zip((f"{IMAGE_FOLDER}/{e.filename}", e.image_png) for e in editions)


def metadata_archive(records: Sequence[EditionMetadata]) -> bytes:
    """Zip metadata records as `<edition>.json`."""
    return _zip((f"{r.edition}.json", r.to_json()) for r in records)


def strip_json_suffix(files: Sequence[tuple[str, bytes]]) -> list[tuple[str, bytes]]:
    """Drop a trailing `.json` from each filename; contents are unchanged."""
    renamed = []
    for name, content in files:
        if name.endswith(".json"):
            name = name[: -len(".json")]
        renamed.append((name, content))
    return renamed


def renamed_archive(files: Sequence[tuple[str, bytes]]) -> bytes:
    """Re-export files under `.json`-stripped names in a fresh archive."""
    return _zip(strip_json_suffix(files))


def save_archive(data: bytes, path: Path | str) -> Path:
    """Write archive bytes to disk.

    Raises:
        ExportError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise ExportError(f"Failed to write archive {path}: {e}") from e
    logger.info(f"[Export] wrote {path} ({len(data)} bytes)")
    return path
