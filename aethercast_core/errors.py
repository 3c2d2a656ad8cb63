"""Exceptions raised by the spell language."""

from typing import Iterable, Optional


class SpellSyntaxError(ValueError):
    """A spell script could not be parsed.

    Attributes:
        clause: Name of the offending clause (e.g. "anchor"), if any
        valid_values: Accepted values for enumerated clauses, if applicable
    """

    def __init__(
        self,
        message: str,
        clause: Optional[str] = None,
        valid_values: Iterable[str] = (),
    ):
        super().__init__(message)
        self.message = message
        self.clause = clause
        self.valid_values = tuple(valid_values)
