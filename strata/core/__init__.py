"""Core models and primitives shared across Strata."""
