"""Flatten selected layer images into one raster.

Layers are drawn in declaration order, first layer at the bottom. Every
image is stretched to the full canvas (layer art is expected to be authored
at the target size) and alpha-composited over an opaque background fill.
Loading and drawing are strictly sequential: each image is decoded before
the next layer is drawn, because draw order is stacking order.
"""

import base64
import binascii
import io
import logging
from pathlib import Path
from typing import Callable, Mapping, Sequence

from PIL import Image, ImageColor, UnidentifiedImageError

from ..config import DEFAULT_BACKGROUND
from ..core.models import CanvasSize, Layer, TraitImage
from ..errors import AssetLoadError, ExportError


logger = logging.getLogger(__name__)

RESAMPLE = Image.Resampling.LANCZOS

# Takes an image's source string, returns a decoded PIL image or raises AssetLoadError
RasterLoader = Callable[[str], Image.Image]


def load_raster(source: str) -> Image.Image:
    """Decode an image from a file path or a base64 `data:` URI.

    Raises:
        AssetLoadError: If the source is empty, missing, oversized, or not a decodable image
    """
    if not source:
        raise AssetLoadError("Empty image source")

    try:
        if source.startswith("data:"):
            header, _, payload = source.partition(",")
            if ";base64" not in header:
                raise AssetLoadError("Only base64 data URIs are supported")
            raw = base64.b64decode(payload, validate=True)
            img = Image.open(io.BytesIO(raw))
        else:
            img = Image.open(Path(source))
        img.load()
    except AssetLoadError:
        raise
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError, binascii.Error, ValueError) as e:
        raise AssetLoadError(f"Cannot load image {_short(source)}: {e}") from e

    return img.convert("RGBA")


def _short(source: str) -> str:
    return source if len(source) <= 60 else source[:57] + "..."


def new_canvas(canvas: CanvasSize, background: str = DEFAULT_BACKGROUND) -> Image.Image:
    """Create an opaque RGBA canvas filled with the background color."""
    fill = ImageColor.getrgb(background)[:3] + (255,)
    return Image.new("RGBA", canvas.as_tuple(), fill)


def place(layer_img: Image.Image, size: tuple[int, int], offset: tuple[int, int] = (0, 0)) -> Image.Image:
    """Position an image on a transparent canvas-sized plane.

    Offsets may be negative; anything outside the canvas is cropped.
    """
    if offset == (0, 0) and layer_img.size == size:
        return layer_img
    plane = Image.new("RGBA", size, (0, 0, 0, 0))
    plane.paste(layer_img, offset)
    return plane


def encode_png(img: Image.Image) -> bytes:
    """Losslessly encode a raster as PNG bytes.

    Raises:
        ExportError: If encoding fails
    """
    buf = io.BytesIO()
    try:
        img.save(buf, format="PNG")
    except (OSError, ValueError) as e:
        raise ExportError(f"PNG encoding failed: {e}") from e
    return buf.getvalue()


class Compositor:
    """Renders selections onto a fixed-size canvas.

    Decoded, canvas-sized layer images are cached by (layer id, image id) for
    the compositor's lifetime, which is one batch. Failed loads are not
    cached, so a broken asset is retried, and skipped, for each edition.

    Args:
        canvas: Output size
        background: Opaque fill color drawn beneath all layers
        loader: Callable decoding an image source
    """

    def __init__(
        self,
        canvas: CanvasSize,
        background: str = DEFAULT_BACKGROUND,
        loader: RasterLoader = load_raster,
    ) -> None:
        self.canvas = canvas
        self.background = background
        self._loader = loader
        self._cache: dict[tuple[str, str], Image.Image] = {}
        self.skipped_assets = 0

    def _layer_raster(self, image: TraitImage) -> Image.Image | None:
        key = (image.layer_id, image.id)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        try:
            img = self._loader(image.source)
        except AssetLoadError as e:
            self.skipped_assets += 1
            logger.warning(f"[Compositor] skipping {image.layer_id}/{image.id}: {e}")
            return None

        if img.mode != "RGBA":
            img = img.convert("RGBA")
        if img.size != self.canvas.as_tuple():
            img = img.resize(self.canvas.as_tuple(), RESAMPLE)
        self._cache[key] = img
        return img

    def render(self, images: Sequence[TraitImage]) -> Image.Image:
        """Draw images bottom-to-top and return the flattened RGB raster."""
        result = new_canvas(self.canvas, self.background)
        for image in images:
            layer_img = self._layer_raster(image)
            if layer_img is None:
                continue
            result = Image.alpha_composite(result, layer_img)
        return result.convert("RGB")

    def composite(self, selection: Mapping[str, str], layers: Sequence[Layer]) -> bytes:
        """Render a selection in layer order and encode it as PNG."""
        ordered: list[TraitImage] = []
        for layer in layers:
            image_id = selection.get(layer.id)
            if image_id is None:
                continue
            image = layer.get_image(image_id)
            if image is not None:
                ordered.append(image)
        return encode_png(self.render(ordered))


def composite(
    selection: Mapping[str, str],
    layers: Sequence[Layer],
    canvas: CanvasSize,
    background: str = DEFAULT_BACKGROUND,
    loader: RasterLoader = load_raster,
) -> bytes:
    """One-off composite of a single selection to PNG bytes."""
    return Compositor(canvas, background=background, loader=loader).composite(selection, layers)
