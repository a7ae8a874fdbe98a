"""Metadata record building and post-publication rewriting.

Records are created with a placeholder asset locator
(`ipfs://<placeholder>/<edition>.png`). Once the images are pinned and a CID
is known, `rewrite_image_locators` produces a new record set pointing at the
gateway URL, leaving the originals untouched.
"""

import time
from typing import Mapping, Sequence

from ..config import DEFAULT_GATEWAY_HOST, DEFAULT_PLACEHOLDER_HASH
from ..core.models import (
    COMPILER_TAG,
    EditionMetadata,
    Layer,
    TraitAttribute,
)


def placeholder_locator(edition: int, placeholder_hash: str = DEFAULT_PLACEHOLDER_HASH) -> str:
    return f"ipfs://{placeholder_hash}/{edition}.png"


def gateway_locator(cid: str, edition: int, gateway_host: str = DEFAULT_GATEWAY_HOST) -> str:
    return f"https://gateway.{gateway_host}/ipfs/{cid}/{edition}.png"


def build_attributes(selection: Mapping[str, str], layers: Sequence[Layer]) -> list[TraitAttribute]:
    """One attribute per selected layer, in layer order.

    Layers absent from the selection contribute nothing.
    """
    attributes = []
    for layer in layers:
        image_id = selection.get(layer.id)
        if image_id is None:
            continue
        image = layer.get_image(image_id)
        if image is None:
            continue
        attributes.append(TraitAttribute(trait_type=layer.name, value=image.name))
    return attributes


def build_metadata(
    selection: Mapping[str, str],
    layers: Sequence[Layer],
    edition: int,
    collection_name: str,
    collection_description: str,
    placeholder_hash: str = DEFAULT_PLACEHOLDER_HASH,
    timestamp_ms: int | None = None,
) -> EditionMetadata:
    """Assemble the metadata record for one edition.

    Args:
        selection: layer_id -> image_id
        layers: Layers in declaration order
        edition: 1-based edition index
        collection_name: Collection name, suffixed with ` #<edition>`
        collection_description: Description copied into every record
        placeholder_hash: Provisional hash token used in the image locator
        timestamp_ms: Generation time; defaults to now

    Returns:
        EditionMetadata record
    """
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    return EditionMetadata(
        name=f"{collection_name} #{edition}",
        description=collection_description,
        image=placeholder_locator(edition, placeholder_hash),
        edition=edition,
        date=timestamp_ms,
        attributes=tuple(build_attributes(selection, layers)),
        compiler=COMPILER_TAG,
    )


def selection_from_metadata(record: EditionMetadata, layers: Sequence[Layer]) -> dict[str, str]:
    """Recover layer_id -> image_id from a record's attributes.

    Matches trait_type against layer names and value against image names.
    Attributes with no matching layer or image are ignored.
    """
    by_name = {layer.name: layer for layer in layers}
    selection: dict[str, str] = {}
    for attr in record.attributes:
        layer = by_name.get(attr.trait_type)
        if layer is None:
            continue
        for image in layer.images:
            if image.name == attr.value:
                selection[layer.id] = image.id
                break
    return selection


def rewrite_image_locators(
    records: Sequence[EditionMetadata],
    cid: str,
    gateway_host: str = DEFAULT_GATEWAY_HOST,
) -> list[EditionMetadata]:
    """Point every record's image at the published CID.

    Returns new records in the same order; only the `image` field differs.

    Raises:
        ValueError: If cid is blank
    """
    cid = cid.strip()
    if not cid:
        raise ValueError("CID must not be empty")

    return [
        record.model_copy(update={"image": gateway_locator(cid, record.edition, gateway_host)})
        for record in records
    ]
