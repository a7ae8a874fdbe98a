"""Tests for bounded-retry combination generation."""

import random
from unittest.mock import patch

from strata.core.models import ExclusionRule, Layer, TraitImage
from strata.generator import combination
from strata.generator.combination import (
    MAX_ATTEMPTS,
    AttemptState,
    generate,
    generate_combination,
    sample_selection,
)


def _layer(layer_id, *image_ids, weights=None):
    weights = weights or [100] * len(image_ids)
    return Layer(
        id=layer_id,
        name=layer_id.title(),
        images=tuple(
            TraitImage(id=img, layer_id=layer_id, name=img, rarity=w)
            for img, w in zip(image_ids, weights)
        ),
    )


class TestSampleSelection:
    """Tests for one sampling pass."""

    def test_one_entry_per_non_empty_layer(self):
        """Every non-empty layer gets one pick, in declaration order."""
        layers = [_layer("bg", "red", "blue"), _layer("empty"), _layer("hat", "cap")]

        selection = sample_selection(layers, random.Random(1))

        assert list(selection) == ["bg", "hat"]
        assert "empty" not in selection
        assert selection["hat"] == "cap"


class TestGenerateCombination:
    """Tests for the retry state machine."""

    def test_budget_constant(self):
        """The retry budget is 100 samplings."""
        assert MAX_ATTEMPTS == 100

    def test_no_rules_accepts_first_attempt(self):
        """Without rules the first sampling is accepted."""
        layers = [_layer("bg", "red", "blue"), _layer("hat", "cap", "crown")]

        result = generate_combination(layers, [], random.Random(5))

        assert result.valid
        assert result.attempts == 1
        assert result.state == AttemptState.ACCEPT

    def test_unsatisfiable_rules_exhaust_exactly_100_attempts(self):
        """A forced forbidden pair uses the whole budget and falls back."""
        layers = [_layer("A", "a1"), _layer("B", "b1")]
        rules = [ExclusionRule(layer_a="A", image_a="a1", layer_b="B", image_b="b1")]

        result = generate_combination(layers, rules, random.Random(0))

        assert not result.valid
        assert result.attempts == 100
        assert result.state == AttemptState.FALLBACK_ACCEPT
        assert result.selection == {"A": "a1", "B": "b1"}

    def test_fallback_returns_last_sampled_selection(self):
        """When the budget runs out the final sampling is kept, not the first."""
        layers = [_layer("A", "a1", "a2"), _layer("B", "b1")]
        rules = [
            ExclusionRule(layer_a="A", image_a="a1", layer_b="B", image_b="b1"),
            ExclusionRule(layer_a="A", image_a="a2", layer_b="B", image_b="b1"),
        ]
        sampled = []
        real_sample = combination.sample_selection

        def recording_sample(layers_, rng):
            selection = real_sample(layers_, rng)
            sampled.append(selection)
            return selection

        with patch("strata.generator.combination.sample_selection", side_effect=recording_sample):
            result = generate_combination(layers, rules, random.Random(11), max_attempts=7)

        assert len(sampled) == 7
        assert result.attempts == 7
        assert result.selection is sampled[-1]

    def test_retries_until_valid(self):
        """With one forbidden pair among four, a valid selection is found."""
        layers = [_layer("A", "a1", "a2"), _layer("B", "b1", "b2")]
        rules = [ExclusionRule(layer_a="A", image_a="a1", layer_b="B", image_b="b1")]
        rng = random.Random(2024)

        for _ in range(200):
            result = generate_combination(layers, rules, rng)
            assert result.valid
            assert result.selection != {"A": "a1", "B": "b1"}
            assert 1 <= result.attempts <= MAX_ATTEMPTS

    def test_empty_layer_never_causes_retry(self):
        """A rule naming an empty layer can never match."""
        layers = [_layer("A", "a1"), _layer("nothing")]
        rules = [ExclusionRule(layer_a="A", image_a="a1", layer_b="nothing", image_b="ghost")]

        result = generate_combination(layers, rules, random.Random(3))

        assert result.valid
        assert result.attempts == 1
        assert result.selection == {"A": "a1"}

    def test_no_layers_yields_empty_selection(self):
        """No layers means an empty, valid selection."""
        result = generate_combination([], [], random.Random())
        assert result.selection == {}
        assert result.valid

    def test_generate_returns_selection_only(self):
        """generate() returns just the selection, fallback included."""
        layers = [_layer("A", "a1"), _layer("B", "b1")]
        rules = [ExclusionRule(layer_a="B", image_a="b1", layer_b="A", image_b="a1")]

        selection = generate(layers, rules, random.Random(0))

        assert selection == {"A": "a1", "B": "b1"}
