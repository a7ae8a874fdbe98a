"""Pre-flight validation for collection snapshots.

Checks are advisory: generation runs regardless, since empty layers are
skipped and inert rules never match. ERROR issues point at snapshots whose
ids are ambiguous; WARNING issues point at things that will behave in a
possibly surprising way.
"""

from ..core.models import CollectionSpec, Severity, ValidationResult


def _check_layers(spec: CollectionSpec, result: ValidationResult) -> None:
    seen_layers: set[str] = set()
    for layer in spec.layers:
        loc = f"layer '{layer.id}'"
        if layer.id in seen_layers:
            result.add(Severity.ERROR, "DUPLICATE_ID", loc, "layer id is used more than once")
        seen_layers.add(layer.id)

        if layer.is_empty:
            result.add(Severity.WARNING, "EMPTY_LAYER", loc, "layer has no images and will be skipped")
            continue

        seen_images: set[str] = set()
        for img in layer.images:
            img_loc = f"{loc} image '{img.id}'"
            if img.id in seen_images:
                result.add(Severity.ERROR, "DUPLICATE_ID", img_loc, "image id is used more than once in this layer")
            seen_images.add(img.id)
            if img.layer_id != layer.id:
                result.add(
                    Severity.ERROR,
                    "LAYER_MISMATCH",
                    img_loc,
                    f"image claims layer '{img.layer_id}'",
                )

        if all(img.rarity <= 0 for img in layer.images):
            result.add(
                Severity.WARNING,
                "ZERO_WEIGHTS",
                loc,
                "all rarities are zero; the first image will always be chosen",
            )


def _check_rules(spec: CollectionSpec, result: ValidationResult) -> None:
    for i, rule in enumerate(spec.rules):
        loc = f"rule {rule.id or i + 1}"
        for layer_id, image_id in rule.pairs():
            if spec.get_image(layer_id, image_id) is None:
                result.add(
                    Severity.WARNING,
                    "INERT_RULE",
                    loc,
                    f"references missing {layer_id}/{image_id}; the rule never matches",
                )
        if rule.layer_a == rule.layer_b:
            if rule.image_a == rule.image_b:
                result.add(
                    Severity.WARNING,
                    "SELF_RULE",
                    loc,
                    "excludes an image against itself; every selection of it is invalid",
                )
            else:
                result.add(
                    Severity.WARNING,
                    "INERT_RULE",
                    loc,
                    "both sides are in the same layer; the rule never matches",
                )


def validate_collection(spec: CollectionSpec) -> ValidationResult:
    """
    Validate a CollectionSpec before generation.

    Args:
        spec: The collection snapshot to check

    Returns:
        ValidationResult with errors and warnings

    Example:
        >>> result = validate_collection(spec)
        >>> if not result.valid:
        ...     for err in result.errors:
        ...         print(f"ERROR: {err}")
    """
    result = ValidationResult()
    _check_layers(spec, result)
    _check_rules(spec, result)
    return result


__all__ = ["validate_collection"]
