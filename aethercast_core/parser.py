"""AetherCast spell parser.

Turns spell source text into ParsedSpell records.

Script format (clauses in any order, one per line):

    focus: Probability
    anchor: Zone(radius:5)
    shift: +15%
    cost: 30E
    intent: "Increase odds of favorable outcome"
    seal

Several spells are chained with a line containing only ``bind``; only the
final spell carries ``seal``. Parsing is atomic: any malformed clause fails
the whole script and no spells are returned.
"""

import math
import re
from typing import Optional

from .errors import SpellSyntaxError
from .models import Anchor, AnchorType, Focus, ParamValue, ParsedSpell, Shift, ShiftDirection
from .protocols import detect_protocol_keywords
from .utils.logging import get_logger

logger = get_logger("parser")

CLAUSE_KEYS = ("focus", "anchor", "shift", "cost", "intent")
BIND_KEYWORD = "bind"
SEAL_KEYWORD = "seal"

_CLAUSE_LINE = re.compile(r"^\s*(?P<key>focus|anchor|shift|cost|intent)\s*:\s*(?P<value>.*?)\s*$")
_BIND_LINE = re.compile(r"^[ \t]*bind[ \t]*\r?$", re.MULTILINE)
_SEAL_TAIL = re.compile(r"(?:^|\s)seal\s*$")
_ANCHOR = re.compile(r"(?P<type>[A-Za-z]+)\s*(?:\((?P<params>[^)]*)\))?")
_SHIFT = re.compile(r"(?P<direction>[+\-])\s*(?P<amount>\d+)\s*%")
_COST = re.compile(r"(?P<amount>\d+)\s*E")
_INTENT = re.compile(r'"(?P<text>[^"]*)"')
_NUMBER = re.compile(r"[+\-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+\-]?\d+)?")

# Largest accepted values; keeps cost and transition arithmetic finite
MAX_SHIFT_AMOUNT = 1_000_000_000
MAX_DECLARED_COST = 1_000_000_000
MAX_PARAM_MAGNITUDE = 1e9


class SpellParser:
    """Parses AetherCast scripts into structured spells.

    Usage:
        spells = SpellParser().parse(source)
    """

    valid_focus_values = tuple(f.value for f in Focus)
    valid_anchor_types = tuple(a.value for a in AnchorType)

    def parse(self, source: str) -> list[ParsedSpell]:
        """Parse a full script.

        Args:
            source: Spell script text

        Returns:
            One ParsedSpell per segment, in script order

        Raises:
            SpellSyntaxError: If any segment is malformed or the script is unsealed
        """
        segments = [part.strip() for part in _BIND_LINE.split(source)]
        segments = [part for part in segments if part]
        if not segments:
            raise SpellSyntaxError("Empty script: write a spell first")

        # Privileged keywords are a property of the whole script
        keywords = detect_protocol_keywords(source)

        spells: list[ParsedSpell] = []
        last_index = len(segments) - 1
        for index, segment in enumerate(segments):
            is_last = index == last_index
            sealed = _SEAL_TAIL.search(segment) is not None

            if is_last and not sealed:
                raise SpellSyntaxError(
                    "Final spell must be sealed with 'seal' keyword", clause=SEAL_KEYWORD
                )
            if sealed and not is_last:
                raise SpellSyntaxError(
                    f"Only the final spell may be sealed (spell {index + 1} of {len(segments)})",
                    clause=SEAL_KEYWORD,
                )

            body = _SEAL_TAIL.sub("", segment) if sealed else segment
            clauses = self._extract_clauses(body)

            spells.append(
                ParsedSpell(
                    focus=self._parse_focus(clauses),
                    anchor=self._parse_anchor(clauses),
                    shift=self._parse_shift(clauses),
                    cost=self._parse_cost(clauses),
                    intent=self._parse_intent(clauses),
                    is_bound=not is_last,
                    is_sealed=is_last and sealed,
                    uses_hidden_protocol=bool(keywords),
                    protocol_keywords=list(keywords),
                )
            )

        logger.debug(f"Parsed {len(spells)} spell(s), protocols={keywords}")
        return spells

    # ------------------------------------------------------------------
    # Clause extraction
    # ------------------------------------------------------------------

    def _extract_clauses(self, segment: str) -> dict[str, str]:
        clauses: dict[str, str] = {}
        for line in segment.splitlines():
            match = _CLAUSE_LINE.match(line)
            if not match:
                continue
            key = match.group("key")
            if key in clauses:
                raise SpellSyntaxError(f"Duplicate '{key}:' in spell", clause=key)
            clauses[key] = match.group("value")
        return clauses

    @staticmethod
    def _require(clauses: dict[str, str], key: str) -> str:
        value = clauses.get(key)
        if value is None:
            raise SpellSyntaxError(f"Missing '{key}:' in spell", clause=key)
        return value

    def _parse_focus(self, clauses: dict[str, str]) -> Focus:
        value = self._require(clauses, "focus")
        if value not in self.valid_focus_values:
            raise SpellSyntaxError(
                f"Invalid focus value: {value}. Must be one of: {', '.join(self.valid_focus_values)}",
                clause="focus",
                valid_values=self.valid_focus_values,
            )
        return Focus(value)

    def _parse_anchor(self, clauses: dict[str, str]) -> Anchor:
        value = self._require(clauses, "anchor")
        match = _ANCHOR.fullmatch(value)
        if not match:
            raise SpellSyntaxError(f"Invalid anchor format: {value}", clause="anchor")

        anchor_type = match.group("type")
        if anchor_type not in self.valid_anchor_types:
            raise SpellSyntaxError(
                f"Invalid anchor type: {anchor_type}. Must be one of: {', '.join(self.valid_anchor_types)}",
                clause="anchor",
                valid_values=self.valid_anchor_types,
            )

        params = self._parse_anchor_params(match.group("params"))
        return Anchor(type=AnchorType(anchor_type), params=params)

    def _parse_anchor_params(self, raw: Optional[str]) -> dict[str, ParamValue]:
        params: dict[str, ParamValue] = {}
        if raw is None or not raw.strip():
            return params

        for pair in raw.split(","):
            key, sep, value = pair.partition(":")
            key, value = key.strip(), value.strip()
            if not sep or not key or not value:
                raise SpellSyntaxError(
                    f"Invalid anchor parameter: '{pair.strip()}'. Expected key:value",
                    clause="anchor",
                )
            param = coerce_param(value)
            if isinstance(param, float) and not (math.isfinite(param) and abs(param) <= MAX_PARAM_MAGNITUDE):
                raise SpellSyntaxError(
                    f"Anchor parameter out of range: '{key}:{value}'. Magnitude must not exceed {MAX_PARAM_MAGNITUDE:g}",
                    clause="anchor",
                )
            params[key] = param
        return params

    def _parse_shift(self, clauses: dict[str, str]) -> Shift:
        value = self._require(clauses, "shift")
        match = _SHIFT.fullmatch(value)
        if not match:
            raise SpellSyntaxError(
                f"Invalid shift format: {value}. Must be in format +XX% or -XX%",
                clause="shift",
            )
        amount = _bounded_int(match.group("amount"), MAX_SHIFT_AMOUNT)
        if amount is None:
            raise SpellSyntaxError(
                f"Shift too large: {value}. Must not exceed {MAX_SHIFT_AMOUNT}%",
                clause="shift",
            )
        return Shift(direction=ShiftDirection(match.group("direction")), amount=amount)

    def _parse_cost(self, clauses: dict[str, str]) -> int:
        value = self._require(clauses, "cost")
        match = _COST.fullmatch(value)
        if not match:
            raise SpellSyntaxError(
                f"Invalid cost format: {value}. Must be in format XXE", clause="cost"
            )
        amount = _bounded_int(match.group("amount"), MAX_DECLARED_COST)
        if amount is None:
            raise SpellSyntaxError(f"Cost too large: {value}", clause="cost")
        return amount

    def _parse_intent(self, clauses: dict[str, str]) -> str:
        message = 'Missing or improperly formatted intent. Must be in format: intent: "Your intention"'
        value = clauses.get("intent")
        if value is None:
            raise SpellSyntaxError(message, clause="intent")
        match = _INTENT.fullmatch(value)
        if not match or not match.group("text").strip():
            raise SpellSyntaxError(message, clause="intent")
        return match.group("text").strip()


def _bounded_int(digits: str, limit: int) -> Optional[int]:
    """Parse a digit string, or return None when it exceeds ``limit``."""
    digits = digits.lstrip("0") or "0"
    if len(digits) > len(str(limit)):
        return None
    value = int(digits)
    return value if value <= limit else None


def coerce_param(value: str) -> ParamValue:
    """Return ``value`` as a float when it is a numeric literal, else as text."""
    if _NUMBER.fullmatch(value):
        return float(value)
    return value


_default_parser = SpellParser()


def parse_spell(source: str) -> list[ParsedSpell]:
    """Parse ``source`` with a shared parser instance."""
    try:
        return _default_parser.parse(source)
    except SpellSyntaxError as e:
        logger.debug(f"Spell rejected by parser: {e}")
        raise
