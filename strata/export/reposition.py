"""Shift every generated image by a fixed offset.

Each edition's flattened raster is redrawn at (dx, dy) on a fresh background
fill. The result is a new list of editions; metadata and selections carry
over unchanged and the inputs are not modified.
"""

import io
import logging
from typing import Sequence

from PIL import Image

from ..config import DEFAULT_BACKGROUND
from ..core.models import CanvasSize, Edition
from ..errors import ExportError
from ..generator.compositor import encode_png, new_canvas, place


logger = logging.getLogger(__name__)


def shift_png(
    image_png: bytes,
    dx: int,
    dy: int,
    canvas: CanvasSize,
    background: str = DEFAULT_BACKGROUND,
) -> bytes:
    """Redraw a PNG stretched to the canvas at offset (dx, dy)."""
    try:
        img = Image.open(io.BytesIO(image_png))
        img.load()
    except OSError as e:
        raise ExportError(f"Cannot decode edition image: {e}") from e

    img = img.convert("RGBA")
    if img.size != canvas.as_tuple():
        img = img.resize(canvas.as_tuple(), Image.Resampling.LANCZOS)

    result = Image.alpha_composite(new_canvas(canvas, background), place(img, canvas.as_tuple(), (dx, dy)))
    return encode_png(result.convert("RGB"))


def reposition_editions(
    editions: Sequence[Edition],
    dx: int,
    dy: int,
    canvas: CanvasSize,
    background: str = DEFAULT_BACKGROUND,
) -> list[Edition]:
    """Apply the same offset to every edition's image.

    Raises:
        ExportError: If an edition image cannot be decoded or re-encoded
    """
    if dx == 0 and dy == 0:
        return list(editions)

    logger.info(f"[Reposition] shifting {len(editions)} editions by ({dx}, {dy})")
    return [
        e.model_copy(update={"image_png": shift_png(e.image_png, dx, dy, canvas, background)})
        for e in editions
    ]
