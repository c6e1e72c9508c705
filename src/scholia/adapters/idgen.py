import secrets

from ..core.ports import IdGenerator
from ..core.utils import now_ms, to_base36


class TimeRandomId(IdGenerator):
    """
    Base36 millisecond timestamp followed by a random base36 suffix, upper-cased.

    Unique with very high probability inside one process; collisions are not
    detected.
    """

    def __init__(self, suffix_len: int = 6):
        self.suffix_len = suffix_len

    def new_id(self) -> str:
        suffix = "".join(secrets.choice("0123456789abcdefghijklmnopqrstuvwxyz") for _ in range(self.suffix_len))
        return (to_base36(now_ms()) + suffix).upper()
