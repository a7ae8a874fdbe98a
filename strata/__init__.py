"""Strata: layered generative-art collection generator.

Combines one image per layer by rarity weight, honors pairwise exclusion
rules, and emits numbered editions with matching metadata records.
"""

__version__ = "0.1.0"
