"""Data models for Strata.

This package contains all Pydantic models used across the system:
- collection.py: Layers, trait images, exclusion rules, collection snapshot
- metadata.py: Edition metadata records and attributes
- edition.py: Generated editions and batch results
- validation.py: Pre-flight validation issues and results
"""

from .collection import (
    DEFAULT_CANVAS_WIDTH,
    DEFAULT_CANVAS_HEIGHT,
    DEFAULT_RARITY,
    TraitImage,
    Layer,
    ExclusionRule,
    CanvasSize,
    CollectionSpec,
)
from .metadata import (
    COMPILER_TAG,
    TraitAttribute,
    EditionMetadata,
)
from .edition import (
    Edition,
    BatchStats,
    BatchResult,
)
from .validation import (
    Severity,
    ValidationIssue,
    ValidationResult,
)

__all__ = [
    # Collection
    "DEFAULT_CANVAS_WIDTH",
    "DEFAULT_CANVAS_HEIGHT",
    "DEFAULT_RARITY",
    "TraitImage",
    "Layer",
    "ExclusionRule",
    "CanvasSize",
    "CollectionSpec",
    # Metadata
    "COMPILER_TAG",
    "TraitAttribute",
    "EditionMetadata",
    # Editions
    "Edition",
    "BatchStats",
    "BatchResult",
    # Validation
    "Severity",
    "ValidationIssue",
    "ValidationResult",
]
