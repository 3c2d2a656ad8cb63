"""Energy cost model for AetherCast spells.

The cost of a script is the sum of its spells' costs:

    spell_cost = ceil(|shift| * focus_multiplier * anchor_multiplier)

after which privileged scripts may be discounted (void.manifest) or
surcharged (paradox.engine). Adjustments are applied to the running total
once per qualifying spell. The result is never below 1.

This value is authoritative for gating a cast. The `cost:` clause a spell
author writes is not consulted.
"""

import math
from typing import Iterable

from aethercast_core import AnchorType, Focus, ParsedSpell
from aethercast_core.protocols import DISCOUNT_KEYWORD, SURCHARGE_KEYWORD

FOCUS_MULTIPLIERS: dict[Focus, float] = {
    Focus.ENERGY: 0.5,
    Focus.PROBABILITY: 0.8,
    Focus.ENTROPY: 1.0,
    Focus.TIME: 1.2,
}

OBJECT_MULTIPLIER = 1.2
ZONE_RADIUS_FACTOR = 0.1

DISCOUNT_FACTOR = 0.7
SURCHARGE_FACTOR = 1.5

MINIMUM_COST = 1

# Decimal places kept before rounding up
_PRECISION = 6


def _ceil(value: float) -> int:
    return math.ceil(round(value, _PRECISION))


class CostModel:
    """Computes the energy cost of a list of parsed spells."""

    def __init__(
        self,
        focus_multipliers: dict[Focus, float] | None = None,
        discount_factor: float = DISCOUNT_FACTOR,
        surcharge_factor: float = SURCHARGE_FACTOR,
    ):
        self.focus_multipliers = dict(focus_multipliers or FOCUS_MULTIPLIERS)
        self.discount_factor = discount_factor
        self.surcharge_factor = surcharge_factor

    def anchor_multiplier(self, spell: ParsedSpell) -> float:
        anchor_type = spell.anchor.type
        if anchor_type == AnchorType.OBJECT:
            return OBJECT_MULTIPLIER
        if anchor_type == AnchorType.ZONE:
            return 1.0 + ZONE_RADIUS_FACTOR * spell.anchor.radius
        return 1.0

    def spell_cost(self, spell: ParsedSpell) -> int:
        """Unadjusted cost of a single spell, never negative."""
        base = abs(spell.shift.amount) * self.focus_multipliers[spell.focus]
        return max(0, _ceil(base * self.anchor_multiplier(spell)))

    def compute(self, spells: Iterable[ParsedSpell]) -> int:
        """Total cost of a script.

        Args:
            spells: Parsed spells in script order

        Returns:
            Integer cost, at least 1
        """
        total = 0
        for spell in spells:
            total += self.spell_cost(spell)

            if spell.uses_hidden_protocol:
                if DISCOUNT_KEYWORD in spell.protocol_keywords:
                    total = _ceil(total * self.discount_factor)
                if SURCHARGE_KEYWORD in spell.protocol_keywords:
                    total = _ceil(total * self.surcharge_factor)

        return max(MINIMUM_COST, total)


_default_model = CostModel()


def compute_cost(spells: Iterable[ParsedSpell]) -> int:
    """Compute a script's cost with the default constants."""
    return _default_model.compute(spells)
