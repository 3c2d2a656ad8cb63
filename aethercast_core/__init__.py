"""AetherCast Core - Spell language foundation.

This package provides the spell language used by AetherCast simulations:

Models:
- Focus, AnchorType, ShiftDirection, FeedbackKind - Enumerations
- Anchor, Shift, ParsedSpell - Parsed spell records
- SimulationEffect, SimulationState, SpellResult - Engine data

Parsing:
- SpellParser, parse_spell - Script text to ParsedSpell list
- SpellSyntaxError - Raised for any malformed script

Protocols:
- PROTOCOL_KEYWORDS, detect_protocol_keywords - Privileged keyword table

ARCHITECTURAL PRINCIPLES:
1. Parsing is atomic (no partial spell lists)
2. Privileged keywords are a script-level property
3. The declared `cost:` clause is informational; the cost model is authoritative
"""

# ============================================================================
# Models
# ============================================================================

from .models import (
    # Enums
    Focus,
    AnchorType,
    ShiftDirection,
    FeedbackKind,
    # Spell records
    Anchor,
    Shift,
    ParsedSpell,
    # Simulation records
    SimulationEffect,
    SimulationState,
    Dimensions,
    SpellResult,
)

# ============================================================================
# Parsing
# ============================================================================

from .errors import SpellSyntaxError
from .parser import SpellParser, parse_spell

# ============================================================================
# Protocols
# ============================================================================

from .protocols import (
    PROTOCOL_KEYWORDS,
    DISCOUNT_KEYWORD,
    SURCHARGE_KEYWORD,
    detect_protocol_keywords,
)

# ============================================================================
# Public API
# ============================================================================

__all__ = [
    # === Models ===
    "Focus",
    "AnchorType",
    "ShiftDirection",
    "FeedbackKind",
    "Anchor",
    "Shift",
    "ParsedSpell",
    "SimulationEffect",
    "SimulationState",
    "Dimensions",
    "SpellResult",
    # === Parsing ===
    "SpellParser",
    "SpellSyntaxError",
    "parse_spell",
    # === Protocols ===
    "PROTOCOL_KEYWORDS",
    "DISCOUNT_KEYWORD",
    "SURCHARGE_KEYWORD",
    "detect_protocol_keywords",
]

# Version
__version__ = "0.1.0"
