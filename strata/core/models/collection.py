"""Collection models: layers, trait images, exclusion rules.

A CollectionSpec is the immutable snapshot a batch runs against. Layers and
images are addressed by stable ids; nothing in the generator holds a live
reference into an editor session.
"""

from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, model_validator


DEFAULT_CANVAS_WIDTH = 500
DEFAULT_CANVAS_HEIGHT = 500
DEFAULT_RARITY = 100.0


class TraitImage(BaseModel):
    """One image option within a layer."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Stable identifier, unique within the layer")
    layer_id: str = Field(description="Id of the owning layer")
    name: str = Field(description="Display name, emitted as the attribute value")
    rarity: float = Field(
        default=DEFAULT_RARITY,
        ge=0,
        description="Relative selection weight within the layer",
    )
    source: str = Field(
        default="",
        description="Raster content: file path or data: URI",
    )


class Layer(BaseModel):
    """A named slot in the trait stack."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    images: tuple[TraitImage, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _fill_image_layer_ids(cls, data):
        # Images declared inline inherit the owning layer id
        if isinstance(data, dict) and "images" in data and "id" in data:
            images = []
            for img in data["images"] or []:
                if isinstance(img, dict) and "layer_id" not in img:
                    img = {**img, "layer_id": data["id"]}
                images.append(img)
            data = {**data, "images": images}
        return data

    @property
    def is_empty(self) -> bool:
        return len(self.images) == 0

    def get_image(self, image_id: str) -> TraitImage | None:
        for img in self.images:
            if img.id == image_id:
                return img
        return None


class ExclusionRule(BaseModel):
    """Forbids two (layer, image) choices from appearing together.

    The rule is symmetric: it matches when both pairs are present in a
    selection, regardless of which one is listed first.
    """

    model_config = ConfigDict(frozen=True)

    layer_a: str
    image_a: str
    layer_b: str
    image_b: str
    id: str | None = None

    def pairs(self) -> tuple[tuple[str, str], tuple[str, str]]:
        return (self.layer_a, self.image_a), (self.layer_b, self.image_b)


class CanvasSize(BaseModel):
    """Output raster dimensions in pixels."""

    model_config = ConfigDict(frozen=True)

    width: int = DEFAULT_CANVAS_WIDTH
    height: int = DEFAULT_CANVAS_HEIGHT

    def as_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


class CollectionSpec(BaseModel):
    """Snapshot of a collection: metadata fields, layers and rules."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    description: str = ""
    layers: tuple[Layer, ...] = ()
    rules: tuple[ExclusionRule, ...] = ()

    def get_layer(self, layer_id: str) -> Layer | None:
        for layer in self.layers:
            if layer.id == layer_id:
                return layer
        return None

    def get_image(self, layer_id: str, image_id: str) -> TraitImage | None:
        layer = self.get_layer(layer_id)
        if layer is None:
            return None
        return layer.get_image(image_id)

    @property
    def active_layers(self) -> list[Layer]:
        """Layers that have at least one image, in declaration order."""
        return [layer for layer in self.layers if not layer.is_empty]

    def to_yaml(self, path: Path | str) -> None:
        """Write the snapshot to a YAML file.

        File sources below the YAML file's directory are written relative to it.
        """
        path = Path(path)
        base_dir = path.parent.resolve()
        data = self.model_dump(mode="json", exclude_none=True)
        for layer in data.get("layers", []):
            for img in layer.get("images", []):
                # layer_id is implied by nesting
                img.pop("layer_id", None)
                source = img.get("source", "")
                if source and not source.startswith("data:"):
                    try:
                        img["source"] = Path(source).resolve().relative_to(base_dir).as_posix()
                    except ValueError:
                        pass
        with open(path, "w") as f:
            yaml.safe_dump(data, f, sort_keys=False, allow_unicode=True)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "CollectionSpec":
        """Load a snapshot from YAML.

        Relative image sources are resolved against the YAML file's directory.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file is not a mapping
        """
        path = Path(path)
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Collection file {path} must contain a mapping")

        base_dir = path.parent
        for layer in data.get("layers") or []:
            for img in layer.get("images") or []:
                source = img.get("source")
                if source and not source.startswith("data:"):
                    src_path = Path(source)
                    if not src_path.is_absolute():
                        img["source"] = str(base_dir / src_path)

        return cls.model_validate(data)
