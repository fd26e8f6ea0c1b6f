"""
Edge weight codec.

Edge labels carry the traversal cost of an edge, conventionally written as
a cost prefix followed by an integer ("C3"). Plain integers ("3") are
accepted as well. Parsing is lenient: anything that does not yield a
non-zero integer counts as weight 1, so every edge stays traversable.
"""

import re
from typing import Optional

WEIGHT_PREFIX = "C"
DEFAULT_WEIGHT = 1

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_weight(label: Optional[str], prefix: str = WEIGHT_PREFIX) -> int:
    """
    Parse an edge label into an integer weight.

    Strips the prefix character if the label starts with it, then reads the
    leading integer of what remains (trailing text is ignored, so "C3 credits"
    is 3). Empty, missing, unparsable and zero-valued labels give 1.
    """
    if label is None:
        return DEFAULT_WEIGHT

    text = str(label).strip()
    if prefix and text.startswith(prefix):
        text = text[len(prefix):]

    match = _LEADING_INT.match(text)
    if not match:
        return DEFAULT_WEIGHT

    return int(match.group(1)) or DEFAULT_WEIGHT


def format_weight(weight: int, prefix: str = WEIGHT_PREFIX) -> str:
    """Format an integer weight as an edge label ("C<n>")."""
    return f"{prefix}{int(weight)}"
