"""Protocol discovery tracking (telemetry side channel).

Records which privileged keywords each caller has used and keeps a short
log of recent casts. Nothing here feeds back into the engine or the caster;
the local engine remains the source of truth for simulation state.
"""

from collections import deque
from datetime import UTC, datetime
from typing import Any

from aethercast_core.protocols import detect_protocol_keywords
from aethercast_core.utils.ids import generate_phenomenon_id
from aethercast_core.utils.logging import get_logger

logger = get_logger("discovery")

MAX_PHENOMENA = 10
FRAGMENT_LENGTH = 50

HINT_UNDISCOVERED = "Look for hidden patterns in the code"
HINT_DISCOVERED = "You've begun to see beyond the veil"


class ProtocolDiscoveryTracker:
    """Maps caller identity to the privileged keywords they have discovered."""

    def __init__(self, max_phenomena: int = MAX_PHENOMENA):
        self._discoveries: dict[str, list[str]] = {}
        self._phenomena: deque[dict[str, Any]] = deque(maxlen=max_phenomena)

    def record_cast(self, caller_id: str, spell_source: str, energy_cost: int = 0) -> list[str]:
        """Record a cast and update the caller's discoveries.

        Args:
            caller_id: Caller identity (e.g. client address)
            spell_source: Raw script text
            energy_cost: Cost reported by the caller

        Returns:
            Keywords discovered for the first time by this cast

        Raises:
            ValueError: If spell_source is empty
        """
        if not spell_source:
            raise ValueError("No spell code provided")

        self._phenomena.append({
            "id": generate_phenomenon_id(),
            "timestamp": datetime.now(UTC),
            "type": "spell_cast",
            "energy_cost": energy_cost or 0,
            "spell_fragment": spell_source[:FRAGMENT_LENGTH],
        })

        known = self._discoveries.setdefault(caller_id, [])
        new = [k for k in detect_protocol_keywords(spell_source) if k not in known]
        known.extend(new)
        if new:
            logger.info(f"Caller {caller_id} discovered {new}")
        return new

    def discoveries(self, caller_id: str) -> list[str]:
        return list(self._discoveries.get(caller_id, []))

    def hint(self, caller_id: str) -> str:
        return HINT_DISCOVERED if self._discoveries.get(caller_id) else HINT_UNDISCOVERED

    @property
    def phenomena(self) -> list[dict[str, Any]]:
        return list(self._phenomena)
