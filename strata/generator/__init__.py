"""Trait combination generator.

Pipeline per edition:
    generate_combination() - weighted sampling + exclusion check, bounded retries
    Compositor.composite() - flatten selected layer images to PNG
    build_metadata()       - attribute record with placeholder image locator

generate_batch() repeats the pipeline for editions 1..N.
"""

from .sampler import sample_image
from .constraints import is_valid, rule_matches, violated_rules
from .combination import (
    MAX_ATTEMPTS,
    AttemptState,
    CombinationResult,
    Selection,
    generate,
    generate_combination,
    sample_selection,
)
from .compositor import Compositor, composite, encode_png, load_raster, new_canvas, place
from .metadata import (
    build_attributes,
    build_metadata,
    gateway_locator,
    placeholder_locator,
    rewrite_image_locators,
    selection_from_metadata,
)
from .batch import BatchDriver, generate_batch, generate_preview

__all__ = [
    # Sampling
    "sample_image",
    # Constraints
    "is_valid",
    "rule_matches",
    "violated_rules",
    # Combination
    "MAX_ATTEMPTS",
    "AttemptState",
    "CombinationResult",
    "Selection",
    "generate",
    "generate_combination",
    "sample_selection",
    # Compositing
    "Compositor",
    "composite",
    "encode_png",
    "load_raster",
    "new_canvas",
    "place",
    # Metadata
    "build_attributes",
    "build_metadata",
    "gateway_locator",
    "placeholder_locator",
    "rewrite_image_locators",
    "selection_from_metadata",
    # Batch
    "BatchDriver",
    "generate_batch",
    "generate_preview",
]
