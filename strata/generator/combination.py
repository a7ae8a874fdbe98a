"""Combination generation with a bounded retry budget.

Each attempt moves through the states

    SAMPLING -> CHECKING -> ACCEPT
                         -> RETRY           (budget remains)
                         -> FALLBACK_ACCEPT (budget exhausted)

A fallback keeps the last sampled selection even though it violates a rule,
so generation always terminates within MAX_ATTEMPTS samplings and never
raises because the rule set is unsatisfiable.
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..core.models import ExclusionRule, Layer
from .constraints import violated_rules
from .sampler import sample_image


logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 100

# layer_id -> image_id, in layer declaration order
Selection = dict[str, str]


class AttemptState(str, Enum):
    SAMPLING = "sampling"
    CHECKING = "checking"
    ACCEPT = "accept"
    RETRY = "retry"
    FALLBACK_ACCEPT = "fallback_accept"


@dataclass(frozen=True)
class CombinationResult:
    """Outcome of one combination search."""

    selection: Selection
    attempts: int
    valid: bool

    @property
    def state(self) -> AttemptState:
        return AttemptState.ACCEPT if self.valid else AttemptState.FALLBACK_ACCEPT


def sample_selection(layers: Sequence[Layer], rng: random.Random) -> Selection:
    """Sample one image for every non-empty layer."""
    selection: Selection = {}
    for layer in layers:
        if layer.is_empty:
            continue
        selection[layer.id] = sample_image(layer.images, rng).id
    return selection


def generate_combination(
    layers: Sequence[Layer],
    rules: Sequence[ExclusionRule],
    rng: random.Random | None = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> CombinationResult:
    """Search for a selection that no exclusion rule matches.

    Args:
        layers: Layers in declaration order
        rules: Exclusion rules
        rng: Random source (a fresh unseeded one if omitted)
        max_attempts: Sampling budget, at least 1

    Returns:
        CombinationResult with the accepted selection, the number of
        samplings used, and whether the selection satisfies every rule
    """
    rng = rng or random.Random()
    max_attempts = max(1, max_attempts)

    state = AttemptState.SAMPLING
    attempts = 0
    selection: Selection = {}

    while True:
        if state in (AttemptState.SAMPLING, AttemptState.RETRY):
            selection = sample_selection(layers, rng)
            attempts += 1
            state = AttemptState.CHECKING

        elif state == AttemptState.CHECKING:
            violations = violated_rules(selection, rules)
            if not violations:
                state = AttemptState.ACCEPT
            elif attempts < max_attempts:
                logger.debug(
                    f"[Combination] attempt {attempts} violates "
                    f"{len(violations)} rule(s), retrying"
                )
                state = AttemptState.RETRY
            else:
                state = AttemptState.FALLBACK_ACCEPT

        elif state == AttemptState.ACCEPT:
            return CombinationResult(selection=selection, attempts=attempts, valid=True)

        else:
            logger.warning(
                f"[Combination] no valid combination within {max_attempts} attempts, "
                f"keeping the last one"
            )
            return CombinationResult(selection=selection, attempts=attempts, valid=False)


def generate(
    layers: Sequence[Layer],
    rules: Sequence[ExclusionRule],
    rng: random.Random | None = None,
) -> Selection:
    """Return a valid selection, or the last sampled one if none was found."""
    return generate_combination(layers, rules, rng).selection
