"""Build collection snapshots from a directory of layer folders.

Expected layout:

    layers/
        Background/
            red.png
            blue.png
        Shape/
            circle.png

Each sub-directory becomes a layer (sorted by name, which is also stacking
order) and each raster file an image named after its stem with the default
rarity.
"""

import logging
from pathlib import Path

from .core.models import DEFAULT_RARITY, CollectionSpec, ExclusionRule, Layer, TraitImage


logger = logging.getLogger(__name__)

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".webp", ".gif")


def _scan_layer(layer_dir: Path) -> Layer:
    layer_id = layer_dir.name
    images = []
    for path in sorted(layer_dir.iterdir()):
        if not path.is_file() or path.suffix.lower() not in IMAGE_SUFFIXES:
            continue
        images.append(
            TraitImage(
                id=f"{layer_id}/{path.stem}",
                layer_id=layer_id,
                name=path.stem,
                rarity=DEFAULT_RARITY,
                source=str(path),
            )
        )
    return Layer(id=layer_id, name=layer_dir.name, images=tuple(images))


def scan_layers_dir(path: Path | str) -> list[Layer]:
    """Discover layers and their images under a directory.

    Raises:
        NotADirectoryError: If path is not a directory
    """
    path = Path(path)
    if not path.is_dir():
        raise NotADirectoryError(f"Layers directory not found: {path}")

    layers = []
    for layer_dir in sorted(p for p in path.iterdir() if p.is_dir()):
        layer = _scan_layer(layer_dir)
        if layer.is_empty:
            logger.info(f"[Loader] layer '{layer.name}' has no images")
        layers.append(layer)
    return layers


def build_collection(
    layers_dir: Path | str,
    name: str = "",
    description: str = "",
    rules: list[ExclusionRule] | None = None,
) -> CollectionSpec:
    """Create a CollectionSpec from a layers directory."""
    return CollectionSpec(
        name=name,
        description=description,
        layers=tuple(scan_layers_dir(layers_dir)),
        rules=tuple(rules or ()),
    )
