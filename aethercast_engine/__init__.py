"""AetherCast Engine - Simulation runtime for AetherCast spells.

The Engine applies parsed spells to a mutable simulation state, prices
scripts and gates casts against the caster's energy.

Core Components:
- SimulationEngine: State ownership, spell application, effect lifecycle
- TransitionRules: Guarded per-focus transitions and privileged protocols
- DeferredScheduler: Delayed compensating transitions and effect expiry
- CostModel: Authoritative energy cost of a script
- ResourceLedger: Caster's spendable energy pool
- SpellCaster: Compile -> cost -> gate -> apply -> spend orchestration

Usage:
    from aethercast_engine import SimulationEngine, ResourceLedger, SpellCaster

    caster = SpellCaster(SimulationEngine(), ResourceLedger())
    report = caster.cast(source)
"""

from .caster import CastReport, CompileReport, DEFAULT_SPELL, SpellCaster
from .config import AetherConfig, LedgerConfig, SimulationConfig
from .cost_model import CostModel, compute_cost
from .discovery import ProtocolDiscoveryTracker
from .engine import SimulationEngine
from .ledger import ResourceLedger
from .scheduler import DeferredScheduler
from .transitions import Transition, TransitionRules

__version__ = "0.1.0"

__all__ = [
    "SimulationEngine",
    "TransitionRules",
    "Transition",
    "DeferredScheduler",
    "CostModel",
    "compute_cost",
    "ResourceLedger",
    "SpellCaster",
    "CompileReport",
    "CastReport",
    "DEFAULT_SPELL",
    "ProtocolDiscoveryTracker",
    "AetherConfig",
    "SimulationConfig",
    "LedgerConfig",
]
