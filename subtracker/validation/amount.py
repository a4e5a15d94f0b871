"""
Amount Parsing

The entry form collects the amount as free text. This module decides
whether that text is a usable amount.

IMPORTANT: Parsing NEVER guesses. "1,000", "$5" or "five" are not
numbers here; the caller treats None as "do not add anything".
"""

import math
import re
from typing import Optional, Union

# Optional sign, digits with an optional fraction (or a bare fraction),
# optional exponent. No thousands separators, no underscores, no inf/nan.
_AMOUNT_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")


def parse_amount(value: Union[str, int, float, None]) -> Optional[float]:
    """
    Parse an amount typed by the user.

    Args:
        value: Raw form input. Numbers are accepted as-is.

    Returns:
        The amount as a float, or None if it is not a finite,
        non-negative number.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        text = value.strip()
        if not _AMOUNT_PATTERN.match(text):
            return None
        amount = float(text)
    else:
        return None

    if not math.isfinite(amount) or amount < 0:
        return None

    # -0.0 would otherwise be stored with its sign
    return amount + 0.0
