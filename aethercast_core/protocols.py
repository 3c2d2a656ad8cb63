"""Privileged ("hidden") protocol keywords.

A script mentioning any of these keywords anywhere in its text is flagged as
privileged: the engine bypasses its safety guards and the cost model applies
discounts or surcharges. The table order is significant; it is both the
order keywords are reported in and the precedence the engine dispatches on.
"""

PROTOCOL_KEYWORDS: tuple[str, ...] = (
    "kernel.space",
    "root.entropy",
    "void.manifest",
    "quantum.superposition",
    "paradox.engine",
)

KERNEL_SPACE = "kernel.space"
ROOT_ENTROPY = "root.entropy"
VOID_MANIFEST = "void.manifest"
QUANTUM_SUPERPOSITION = "quantum.superposition"
PARADOX_ENGINE = "paradox.engine"

# Cost adjustments
DISCOUNT_KEYWORD = VOID_MANIFEST
SURCHARGE_KEYWORD = PARADOX_ENGINE


def detect_protocol_keywords(text: str) -> list[str]:
    """Return the privileged keywords present in ``text``.

    Matching is case-insensitive substring search. Results follow table
    order and contain no duplicates.
    """
    lowered = text.lower()
    return [keyword for keyword in PROTOCOL_KEYWORDS if keyword in lowered]
