"""Core spell and simulation models for AetherCast.

This module defines the data passed between the spell parser, the cost
model and the simulation engine.

AUTHORITY: SimulationState held by the engine is the singular source of truth.
Anything handed to a caller is a copy; mutating it never reaches the engine.

Design:
- ParsedSpell is immutable once the parser has produced it.
- SimulationEffect is immutable; the engine only ever removes effects.
- SimulationState is mutable, but only the engine's transitions write to it.
"""

from datetime import UTC, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field

from .utils.ids import generate_effect_id

# ============================================================================
# Enums and Type Definitions
# ============================================================================

ParamValue = Union[float, str]


class Focus(str, Enum):
    """Reality parameter a spell targets."""
    ENERGY = "Energy"
    PROBABILITY = "Probability"
    ENTROPY = "Entropy"
    TIME = "Time"


class AnchorType(str, Enum):
    """Spatial scope of a spell's effect."""
    SELF = "Self"
    OBJECT = "Object"
    ZONE = "Zone"


class ShiftDirection(str, Enum):
    """Sign of a requested shift."""
    INCREASE = "+"
    DECREASE = "-"


class FeedbackKind(str, Enum):
    """Feedback signals emitted when a spell is rejected."""
    ENERGY_OVERLOAD = "energy_overload"
    REALITY_FRACTURE = "reality_fracture"
    TIME_LOOP = "time_loop"
    ENERGY_INSUFFICIENT = "energy_insufficient"
    PARADOX = "paradox"


# ============================================================================
# Spell Models
# ============================================================================


class Anchor(BaseModel):
    """Targeting scope plus its optional parameters."""
    type: AnchorType = Field(description="Anchor type")
    params: dict[str, ParamValue] = Field(
        default_factory=dict,
        description="Anchor parameters; numeric when the value parses as a number",
    )

    class Config:
        frozen = True

    @property
    def radius(self) -> float:
        """Zone radius, defaulting to 1 when absent or non-numeric; never negative."""
        value = self.params.get("radius")
        if isinstance(value, (int, float)):
            return max(0.0, float(value))
        return 1.0


class Shift(BaseModel):
    """Direction and unsigned percentage of a shift."""
    direction: ShiftDirection = Field(description="+ or -")
    amount: int = Field(ge=0, description="Non-negative percentage")

    class Config:
        frozen = True

    @property
    def signed_amount(self) -> int:
        return self.amount if self.direction == ShiftDirection.INCREASE else -self.amount


class ParsedSpell(BaseModel):
    """One casting unit produced by the parser.

    `cost` is the value written by the spell's author in the `cost:` clause.
    It is informational only; the cost model computes the authoritative cost.
    """

    focus: Focus = Field(description="Targeted reality parameter")
    anchor: Anchor = Field(description="Targeting scope")
    shift: Shift = Field(description="Requested change")
    cost: int = Field(ge=0, description="Declared cost from the cost: clause")
    intent: str = Field(min_length=1, description="Free-text intent")
    is_bound: bool = Field(default=False, description="Chained to the following spell")
    is_sealed: bool = Field(default=False, description="Final spell of a sealed script")
    uses_hidden_protocol: bool = Field(
        default=False, description="Script contains a privileged keyword"
    )
    protocol_keywords: list[str] = Field(
        default_factory=list, description="Privileged keywords found in the script"
    )

    class Config:
        frozen = True

    @property
    def signed_shift(self) -> int:
        return self.shift.signed_amount


# ============================================================================
# Simulation Models
# ============================================================================


class SimulationEffect(BaseModel):
    """Time-bounded record of one applied spell's impact."""

    id: str = Field(default_factory=generate_effect_id, description="Unique effect ID")
    focus: str = Field(description="Focus value, or a protocol-specific label")
    anchor_type: AnchorType
    anchor_params: dict[str, ParamValue] = Field(default_factory=dict)
    shift_amount: int = Field(description="Signed shift applied")
    duration: int = Field(ge=0, description="Lifetime in milliseconds")
    start_time: float = Field(description="Creation timestamp in milliseconds")
    intensity: float = Field(ge=0.0, description="Derived magnitude")

    class Config:
        frozen = True

    def is_expired(self, now: float) -> bool:
        return now - self.start_time >= self.duration


class Dimensions(BaseModel):
    """Viewport sizing metadata. No effect on transitions."""
    width: int = 800
    height: int = 600


class SimulationState(BaseModel):
    """Mutable reality parameters owned by the simulation engine."""

    energy_level: float = Field(default=100.0)
    probability_shift: float = Field(default=0.0)
    entropy_level: float = Field(default=20.0)
    time_speed: float = Field(default=1.0)
    active_effects: list[SimulationEffect] = Field(default_factory=list)
    last_spell_focus: str = Field(default="")
    dimensions: Dimensions = Field(default_factory=Dimensions)

    def snapshot(self) -> "SimulationState":
        """Deep copy safe to hand to callers."""
        return self.model_copy(deep=True)


class SpellResult(BaseModel):
    """Outcome of applying one spell or a whole chain."""
    success: bool
    message: str
    feedback: Optional[FeedbackKind] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def ok(cls, message: str) -> "SpellResult":
        return cls(success=True, message=message)

    @classmethod
    def rejected(cls, message: str, feedback: Optional[FeedbackKind] = None) -> "SpellResult":
        return cls(success=False, message=message, feedback=feedback)
