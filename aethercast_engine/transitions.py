"""Guarded state transitions for AetherCast spells.

Each rule is evaluated against the current state without mutating it and
yields a Transition: the result, the field updates to commit, the effect to
record and any deferred corrections to schedule. The engine is the only
component that commits a Transition.

Evaluation order for one spell:
1. Global guard: |shift| above the safe limit is rejected unless privileged
2. Privileged spells dispatch on their first protocol keyword (table order)
3. Otherwise dispatch on focus (Energy, Probability, Entropy, Time)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from aethercast_core import FeedbackKind, Focus, ParsedSpell, SimulationEffect, SimulationState, SpellResult
from aethercast_core.protocols import (
    KERNEL_SPACE,
    PARADOX_ENGINE,
    PROTOCOL_KEYWORDS,
    QUANTUM_SUPERPOSITION,
    ROOT_ENTROPY,
    VOID_MANIFEST,
)

from .config import SimulationConfig


class Correction(str, Enum):
    """Deferred compensating transitions."""
    HALVE_PROBABILITY = "halve_probability"
    NORMALIZE_TIME = "normalize_time"


@dataclass
class DeferredCorrection:
    kind: Correction
    delay: int


@dataclass
class Transition:
    """Outcome of evaluating one spell against the current state."""
    result: SpellResult
    updates: dict[str, Any] = field(default_factory=dict)
    effect: Optional[SimulationEffect] = None
    corrections: list[DeferredCorrection] = field(default_factory=list)
    protocol: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.result.success


def _direction_word(shift: int, up: str = "increased", down: str = "decreased") -> str:
    return up if shift > 0 else down


class TransitionRules:
    """Per-focus guarded transition rules.

    Usage:
        rules = TransitionRules(SimulationConfig())
        transition = rules.evaluate(state, spell, now)
    """

    def __init__(self, config: SimulationConfig):
        self.config = config

    def evaluate(self, state: SimulationState, spell: ParsedSpell, now: float) -> Transition:
        """Evaluate a single spell.

        Args:
            state: Current state (read only)
            spell: Spell to evaluate
            now: Current time in milliseconds

        Returns:
            Transition describing what the engine should commit
        """
        shift = spell.signed_shift
        privileged = spell.uses_hidden_protocol

        if abs(shift) > self.config.max_safe_shift and not privileged:
            return Transition(
                SpellResult.rejected(
                    "Spell exceeds safe reality manipulation limits.",
                    FeedbackKind.REALITY_FRACTURE,
                )
            )

        if privileged:
            return self._evaluate_privileged(state, spell, shift, now)

        if spell.focus == Focus.ENERGY:
            return self._evaluate_energy(state, spell, shift, now)
        elif spell.focus == Focus.PROBABILITY:
            return self._evaluate_probability(state, spell, shift, now)
        elif spell.focus == Focus.ENTROPY:
            return self._evaluate_entropy(state, spell, shift, now)
        elif spell.focus == Focus.TIME:
            return self._evaluate_time(state, spell, shift, now)
        else:
            raise ValueError(f"Unknown focus: {spell.focus}")

    # ------------------------------------------------------------------
    # Focus rules
    # ------------------------------------------------------------------

    def _evaluate_energy(self, state: SimulationState, spell: ParsedSpell, shift: int, now: float) -> Transition:
        if state.energy_level + shift < 0:
            return Transition(
                SpellResult.rejected("Cannot reduce energy below zero.", FeedbackKind.ENERGY_INSUFFICIENT)
            )

        return Transition(
            SpellResult.ok(f"Energy level {_direction_word(shift)} by {abs(shift)}%."),
            updates={"energy_level": min(self.config.energy_ceiling, state.energy_level + shift)},
            effect=self._effect(spell, shift, self.config.energy_duration, now),
        )

    def _evaluate_probability(self, state: SimulationState, spell: ParsedSpell, shift: int, now: float) -> Transition:
        new_shift = state.probability_shift + shift
        transition = Transition(
            SpellResult.ok(f"Probability {_direction_word(shift)} by {abs(shift)}%."),
            updates={"probability_shift": new_shift},
            effect=self._effect(spell, shift, self.config.probability_duration, now),
        )

        if abs(new_shift) > self.config.probability_threshold:
            transition.result = SpellResult.ok(
                "Probability shifted drastically. Reality struggles to compensate."
            )
            transition.corrections.append(
                DeferredCorrection(Correction.HALVE_PROBABILITY, self.config.probability_correction_delay)
            )
        return transition

    def _evaluate_entropy(self, state: SimulationState, spell: ParsedSpell, shift: int, now: float) -> Transition:
        new_level = state.entropy_level + shift

        if new_level < 0:
            return Transition(SpellResult.rejected("Cannot reduce entropy below zero.", FeedbackKind.PARADOX))

        if new_level > self.config.entropy_ceiling and not spell.uses_hidden_protocol:
            return Transition(
                SpellResult.rejected("Entropy too high. Reality becoming unstable.", FeedbackKind.REALITY_FRACTURE)
            )

        return Transition(
            SpellResult.ok(f"Entropy level {_direction_word(shift)} by {abs(shift)}%."),
            updates={"entropy_level": new_level},
            effect=self._effect(spell, shift, self.config.entropy_duration, now),
        )

    def _evaluate_time(self, state: SimulationState, spell: ParsedSpell, shift: int, now: float) -> Transition:
        multiplier = 1 + shift / 100
        privileged = spell.uses_hidden_protocol

        if multiplier <= 0 and not privileged:
            return Transition(SpellResult.rejected("Cannot halt or reverse time flow.", FeedbackKind.TIME_LOOP))

        if multiplier > self.config.max_time_multiplier and not privileged:
            return Transition(SpellResult.rejected("Time acceleration too extreme.", FeedbackKind.TIME_LOOP))

        return Transition(
            SpellResult.ok(f"Time flow {_direction_word(shift, 'accelerated', 'decelerated')} by {abs(shift)}%."),
            updates={"time_speed": multiplier},
            effect=self._effect(spell, shift, self.config.time_duration, now),
            corrections=[DeferredCorrection(Correction.NORMALIZE_TIME, self.config.time_normalization_delay)],
        )

    # ------------------------------------------------------------------
    # Privileged protocols
    # ------------------------------------------------------------------

    def _evaluate_privileged(self, state: SimulationState, spell: ParsedSpell, shift: int, now: float) -> Transition:
        keyword = next((k for k in PROTOCOL_KEYWORDS if k in spell.protocol_keywords), None)

        if keyword == KERNEL_SPACE:
            effect = SimulationEffect(
                focus="KernelSpace",
                anchor_type=spell.anchor.type,
                anchor_params=dict(spell.anchor.params),
                shift_amount=shift * 2,
                duration=self.config.kernel_space_duration,
                start_time=now,
                intensity=abs(shift) / 50,
            )
            return Transition(
                SpellResult.ok("KERNEL ACCESS GRANTED: Spatial parameters reconfigured beyond normal limits."),
                effect=effect,
                protocol=keyword,
            )

        if keyword == ROOT_ENTROPY:
            level = max(0.0, min(self.config.privileged_entropy_ceiling, state.entropy_level + shift))
            return Transition(
                SpellResult.ok("ROOT ACCESS: Fundamental entropic constants modified."),
                updates={"entropy_level": level},
                protocol=keyword,
            )

        if keyword == VOID_MANIFEST:
            return Transition(
                SpellResult.ok("VOID MANIFESTATION: Energy created from quantum fluctuations."),
                updates={
                    "energy_level": state.energy_level + abs(shift),
                    "probability_shift": state.probability_shift + shift * 2,
                },
                protocol=keyword,
            )

        if keyword == QUANTUM_SUPERPOSITION:
            return Transition(
                SpellResult.ok("QUANTUM STATE ALIGNED: Probability wave functions collapsed to desired outcome."),
                updates={"probability_shift": shift * 3},
                protocol=keyword,
            )

        if keyword == PARADOX_ENGINE:
            return Transition(
                SpellResult.ok("PARADOX ENGINE ENGAGED: Contradictory states now coexisting."),
                updates={"time_speed": 10.0 if shift > 0 else 0.1},
                protocol=keyword,
            )

        return Transition(SpellResult.ok("Hidden protocol recognized, but effect is subtle."))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _effect(spell: ParsedSpell, shift: int, duration: int, now: float) -> SimulationEffect:
        return SimulationEffect(
            focus=spell.focus.value,
            anchor_type=spell.anchor.type,
            anchor_params=dict(spell.anchor.params),
            shift_amount=shift,
            duration=duration,
            start_time=now,
            intensity=abs(shift) / 100,
        )
