"""Domain enums for type safety and consistency."""

from enum import Enum


class OverloadReason(str, Enum):
    """Which signal tripped the overload verdict.

    CPU load is checked before memory, so CPU_LOAD_EXCEEDED wins when both trip.
    """

    NONE = "none"
    CPU_LOAD_EXCEEDED = "cpu_load_exceeded"
    MEMORY_BELOW_RESERVE = "memory_below_reserve"


class ValidationLevel(str, Enum):
    """Configuration validation issue severity levels."""

    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
