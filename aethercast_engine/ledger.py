"""Caster resource ledger.

Tracks the caster's spendable energy pool, separate from the simulation's
energy level. The ledger never refuses a spend; callers gate a cast by
comparing the computed cost with `energy` first.
"""

from typing import Optional

from aethercast_core.utils.logging import get_logger

from .config import LedgerConfig

logger = get_logger("ledger")


class ResourceLedger:
    """Spendable energy pool with a soft cap and a floor of zero."""

    def __init__(self, config: Optional[LedgerConfig] = None):
        self.config = config or LedgerConfig()
        self.energy: float = self.config.initial_energy
        self.current_cost: int = 0

    def can_afford(self, cost: float) -> bool:
        return cost <= self.energy

    def spend(self, amount: float) -> float:
        """Deduct ``amount``, flooring at zero.

        Returns:
            Remaining energy

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Spend amount must be non-negative, got {amount}")
        self.energy = max(0.0, self.energy - amount)
        logger.debug(f"Spent {amount}E, {self.energy}E remaining")
        return self.energy

    def refresh(self) -> float:
        """Regenerate a fixed increment, capped at the maximum.

        Returns:
            Energy after regeneration
        """
        self.energy = min(self.config.max_energy, self.energy + self.config.regeneration)
        logger.debug(f"Regenerated to {self.energy}E")
        return self.energy

    def set_current_cost(self, cost: int) -> None:
        self.current_cost = cost
