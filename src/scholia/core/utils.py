"""Utility functions for scholia."""

import string
import time

_BASE36 = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


def to_base36(value: int) -> str:
    """
    Render a non-negative integer in base 36 (0-9a-z).

    Examples:
        >>> to_base36(0)
        '0'
        >>> to_base36(1295)
        'zz'
    """
    if value < 0:
        raise ValueError("to_base36 expects a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))
