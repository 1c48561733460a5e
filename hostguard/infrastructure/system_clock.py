"""System clock implementation using Python's monotonic timer."""

import time

from ..ports.clock import ClockPort


class SystemClock(ClockPort):
    """Default clock implementation using the process monotonic clock.

    Wall-clock adjustments (NTP steps, manual changes) do not affect it, so the
    CPU sampling window can never observe time moving backwards.
    """

    def monotonic_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000
