"""Exclusion rule checking."""

from typing import Mapping, Sequence

from ..core.models import ExclusionRule


def rule_matches(selection: Mapping[str, str], rule: ExclusionRule) -> bool:
    """True when both of the rule's (layer, image) pairs are selected.

    A layer missing from the selection never satisfies its side of a rule.
    """
    for layer_id, image_id in rule.pairs():
        if layer_id not in selection or selection[layer_id] != image_id:
            return False
    return True


def violated_rules(
    selection: Mapping[str, str],
    rules: Sequence[ExclusionRule],
) -> list[ExclusionRule]:
    return [rule for rule in rules if rule_matches(selection, rule)]


def is_valid(selection: Mapping[str, str], rules: Sequence[ExclusionRule]) -> bool:
    """A selection is valid when no rule matches it."""
    return not any(rule_matches(selection, rule) for rule in rules)
