"""Weighted selection of one image per layer."""

import random
from typing import Sequence

from ..core.models import TraitImage


def sample_image(images: Sequence[TraitImage], rng: random.Random) -> TraitImage:
    """Draw one image with probability proportional to its rarity weight.

    Walks images in declaration order, accumulating weight, and returns the
    first image whose running total reaches the uniform draw r in [0, T).
    Zero-weight images are never chosen unless every weight is zero, in
    which case the first image is returned.

    Args:
        images: Non-empty sequence of images from one layer
        rng: Random source

    Returns:
        The selected image

    Raises:
        ValueError: If images is empty
    """
    if not images:
        raise ValueError("Cannot sample from a layer with no images")

    weights = [max(0.0, img.rarity) for img in images]
    total = sum(weights)
    if total <= 0:
        return images[0]

    r = rng.random() * total
    accumulated = 0.0
    for img, weight in zip(images, weights):
        if weight <= 0:
            continue
        accumulated += weight
        if accumulated >= r:
            return img

    # Float rounding can leave r a hair above the final running sum
    return next(img for img, w in zip(reversed(images), reversed(weights)) if w > 0)
