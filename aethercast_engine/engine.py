"""AetherCast Engine - Core simulation engine.

The SimulationEngine owns the single SimulationState of a session. It:
1. Evaluates parsed spells through TransitionRules
2. Commits accepted transitions (the only place state is written)
3. Records time-bounded effects and schedules their expiry
4. Runs deferred corrections (probability self-correction, time normalization)
5. Sweeps expired effects on demand or from a maintenance loop

Architecture:
- Uses aethercast_core models (ParsedSpell, SimulationState, SpellResult)
- Delegates guard logic to TransitionRules
- Delegates timing to DeferredScheduler against an injectable millisecond clock
- Knows nothing about the caster's resource ledger; gating happens upstream
"""

import asyncio
import logging
from typing import Optional, Sequence

from aethercast_core import ParsedSpell, SimulationEffect, SimulationState, SpellResult
from aethercast_core.models import Dimensions
from aethercast_core.utils.logging import get_logger, log_operation

from .config import SimulationConfig
from .scheduler import Clock, DeferredScheduler
from .transitions import Correction, Transition, TransitionRules

logger = get_logger("engine")

SUCCESS_MESSAGE = "Spell cast successfully! Reality shifts to your will."


class SimulationEngine:
    """Core simulation engine for AetherCast.

    Responsibilities:
    - State ownership (snapshots out, never aliases)
    - Sequential, short-circuiting application of spell chains
    - Effect lifecycle and deferred corrections

    Usage:
        engine = SimulationEngine()
        result = engine.apply_spell(parse_spell(source))
        engine.tick()  # once per second
    """

    def __init__(self, config: Optional[SimulationConfig] = None, clock: Optional[Clock] = None):
        """Initialize engine.

        Args:
            config: Bounds, timings and initial state; defaults if omitted
            clock: Millisecond clock; wall clock if omitted
        """
        self.config = config or SimulationConfig()
        self.scheduler = DeferredScheduler(clock)
        self.rules = TransitionRules(self.config)
        self._state = self._initial_state()

    @property
    def clock(self) -> Clock:
        return self.scheduler.clock

    def _initial_state(self) -> SimulationState:
        cfg = self.config
        return SimulationState(
            energy_level=cfg.initial_energy_level,
            probability_shift=cfg.initial_probability_shift,
            entropy_level=cfg.initial_entropy_level,
            time_speed=cfg.initial_time_speed,
            dimensions=Dimensions(width=cfg.width, height=cfg.height),
        )

    def reset(self) -> None:
        """Restore initial state and drop every pending deferred task."""
        self.scheduler.clear()
        self._state = self._initial_state()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_state(self) -> SimulationState:
        """Get a snapshot of the current simulation state.

        Returns:
            Deep copy; changes to it do not affect the engine
        """
        return self._state.snapshot()

    def set_dimensions(self, width: int, height: int) -> None:
        """Update viewport metadata."""
        self._state.dimensions = Dimensions(width=width, height=height)

    def apply_spell(self, spells: Sequence[ParsedSpell]) -> SpellResult:
        """Apply a chain of spells left to right.

        Stops at the first rejected spell and returns its result; spells
        already applied stay applied.

        Args:
            spells: Parsed spells in script order

        Returns:
            The first failure, or a terminal success result
        """
        self.scheduler.run_due()

        for index, spell in enumerate(spells):
            result = self._apply_single(spell)
            if not result.success:
                log_operation(logger, "Spell rejected", {
                    "index": index,
                    "focus": spell.focus.value,
                    "feedback": result.feedback.value if result.feedback else None,
                })
                return result

        return SpellResult.ok(SUCCESS_MESSAGE)

    def cleanup_expired_effects(self) -> int:
        """Remove every effect whose age has reached its duration.

        Idempotent; safe to call on any interval.

        Returns:
            Number of effects removed
        """
        now = self.clock()
        before = len(self._state.active_effects)
        self._state.active_effects = [
            effect for effect in self._state.active_effects if not effect.is_expired(now)
        ]
        removed = before - len(self._state.active_effects)
        if removed:
            logger.debug(f"Swept {removed} expired effect(s)")
        return removed

    def tick(self) -> None:
        """Run due deferred tasks, then sweep expired effects."""
        self.scheduler.run_due()
        self.cleanup_expired_effects()

    async def run_maintenance(
        self,
        interval: Optional[float] = None,
        stop_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Call `tick()` periodically until ``stop_event`` is set.

        Args:
            interval: Seconds between ticks; config sweep interval if omitted
            stop_event: Event that ends the loop; runs until cancelled if omitted
        """
        if interval is None:
            interval = self.config.sweep_interval / 1000
        stop_event = stop_event or asyncio.Event()

        logger.debug(f"Maintenance loop started (interval={interval}s)")
        while not stop_event.is_set():
            self.tick()
            try:
                await asyncio.wait_for(stop_event.wait(), timeout=interval)
            except asyncio.TimeoutError:
                continue
        logger.debug("Maintenance loop stopped")

    # ------------------------------------------------------------------
    # Transition commit
    # ------------------------------------------------------------------

    def _apply_single(self, spell: ParsedSpell) -> SpellResult:
        self._state.last_spell_focus = spell.focus.value

        transition = self.rules.evaluate(self._state, spell, self.clock())
        if transition.accepted:
            self._commit(transition)
        return transition.result

    def _commit(self, transition: Transition) -> None:
        """Write an accepted transition into state.

        This is the ONLY place SimulationState fields change in response to a spell.
        """
        for field_name, value in transition.updates.items():
            setattr(self._state, field_name, value)

        if transition.protocol:
            log_operation(logger, "Hidden protocol engaged", {
                "protocol": transition.protocol,
                "updates": transition.updates,
            }, level=logging.WARNING)

        if transition.effect is not None:
            self._add_effect(transition.effect)

        for correction in transition.corrections:
            if correction.kind == Correction.HALVE_PROBABILITY:
                self.scheduler.schedule(correction.delay, self._halve_probability, key=correction.kind.value)
            elif correction.kind == Correction.NORMALIZE_TIME:
                self.scheduler.schedule(correction.delay, self._normalize_time, key=correction.kind.value)

    def _add_effect(self, effect: SimulationEffect) -> None:
        self._state.active_effects.append(effect)
        effect_id = effect.id
        self.scheduler.schedule(effect.duration, lambda: self._expire_effect(effect_id), key=effect_id)

    # ------------------------------------------------------------------
    # Deferred tasks (read current state when they fire)
    # ------------------------------------------------------------------

    def _expire_effect(self, effect_id: str) -> None:
        self._state.active_effects = [e for e in self._state.active_effects if e.id != effect_id]

    def _halve_probability(self) -> None:
        self._state.probability_shift = self._state.probability_shift / 2
        logger.debug(f"Probability self-corrected to {self._state.probability_shift}")

    def _normalize_time(self) -> None:
        cfg = self.config
        self._state.time_speed = max(cfg.time_normal_min, min(cfg.time_normal_max, self._state.time_speed))
        logger.debug(f"Time speed normalized to {self._state.time_speed}")
