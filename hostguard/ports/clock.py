"""Clock port abstraction for time handling.

This module defines the clock abstraction to decouple the sampling window
from system time, making it easier to test and control time-dependent behavior.
"""

from abc import ABC, abstractmethod


class ClockPort(ABC):
    """Abstract clock interface for time operations.

    This port provides an abstraction over system time, allowing for:
    - Monotonic elapsed-time measurement immune to wall-clock adjustments
    - Easy testing with manual clocks
    """

    @abstractmethod
    def monotonic_ms(self) -> int:
        """Get the current reading of a monotonic clock in milliseconds.

        Returns:
            Milliseconds since an arbitrary fixed point.

        Note:
            Implementations MUST never return a value smaller than a previous
            reading from the same instance.
        """
        ...
