"""CLI commands for Strata."""

from . import (
    config,
    init,
    validate,
    preview,
    generate,
    rewrite,
    strip,
    reposition,
)

__all__ = [
    "config",
    "init",
    "validate",
    "preview",
    "generate",
    "rewrite",
    "strip",
    "reposition",
]
