"""Spell casting orchestration for AetherCast.

The SpellCaster is responsible for:
1. Compiling source text into parsed spells
2. Computing the authoritative cost
3. Gating the cast against the resource ledger
4. Applying the spells to the simulation engine
5. Spending energy only when the cast succeeds

This is the layer a terminal, editor or web front-end talks to.
"""

from dataclasses import dataclass, field
from typing import Optional

from aethercast_core import FeedbackKind, ParsedSpell, SpellParser, SpellSyntaxError
from aethercast_core.utils.logging import get_logger, log_operation

from .cost_model import CostModel
from .engine import SimulationEngine
from .ledger import ResourceLedger

logger = get_logger("caster")

# Starter spell shown to new casters
DEFAULT_SPELL = """focus: Probability
anchor: Self
shift: +15%
cost: 30E
intent: "Increase odds of favorable outcome"
seal"""


@dataclass
class CompileReport:
    """Result of compiling a script without casting it."""
    success: bool
    message: str
    spells: list[ParsedSpell] = field(default_factory=list)
    cost: Optional[int] = None
    declared_cost: Optional[int] = None
    error: Optional[SpellSyntaxError] = None


@dataclass
class CastReport:
    """Result of a cast attempt."""
    success: bool
    message: str
    feedback: Optional[FeedbackKind] = None
    cost: Optional[int] = None
    energy_remaining: float = 0.0
    spells: list[ParsedSpell] = field(default_factory=list)


class SpellCaster:
    """Compiles, gates and casts spells for one caster session.

    Usage:
        caster = SpellCaster(engine, ledger)
        report = caster.cast(source)
    """

    def __init__(
        self,
        engine: SimulationEngine,
        ledger: ResourceLedger,
        parser: Optional[SpellParser] = None,
        cost_model: Optional[CostModel] = None,
    ):
        self.engine = engine
        self.ledger = ledger
        self.parser = parser or SpellParser()
        self.cost_model = cost_model or CostModel()

    def compile(self, source: str) -> CompileReport:
        """Parse and cost a script.

        On success the cost becomes the ledger's current cost.
        """
        if not source.strip():
            return CompileReport(False, "Empty spell code. Write a spell first.")

        try:
            spells = self.parser.parse(source)
        except SpellSyntaxError as e:
            logger.debug(f"Compile failed: {e}")
            return CompileReport(False, f"Spell error: {e}", error=e)

        cost = self.cost_model.compute(spells)
        declared = sum(spell.cost for spell in spells)
        self.ledger.set_current_cost(cost)

        message = f"Spell compiled successfully. Energy cost: {cost}E"
        if declared != cost:
            message += f" (declared {declared}E)"
        return CompileReport(True, message, spells=spells, cost=cost, declared_cost=declared)

    def cast(self, source: str) -> CastReport:
        """Compile, gate and apply a script.

        Returns:
            CastReport; energy is only spent when the engine accepts every spell
        """
        report = self.compile(source)
        if not report.success:
            return CastReport(False, report.message, energy_remaining=self.ledger.energy)

        cost = report.cost
        if not self.ledger.can_afford(cost):
            message = f"Not enough energy. Need {cost}E, have {_format_energy(self.ledger.energy)}E."
            log_operation(logger, "Cast gated", {"cost": cost, "energy": self.ledger.energy})
            return CastReport(
                False,
                message,
                feedback=FeedbackKind.ENERGY_INSUFFICIENT,
                cost=cost,
                energy_remaining=self.ledger.energy,
                spells=report.spells,
            )

        result = self.engine.apply_spell(report.spells)
        if result.success:
            self.ledger.spend(cost)

        return CastReport(
            result.success,
            result.message,
            feedback=result.feedback,
            cost=cost,
            energy_remaining=self.ledger.energy,
            spells=report.spells,
        )

    def regenerate(self) -> float:
        """Regenerate caster energy by the configured increment."""
        return self.ledger.refresh()


def _format_energy(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else f"{value:.1f}"
