"""Domain services for hostguard.

This module contains the pure arithmetic and decision rules that do not
naturally belong to a single value object: two-decimal rounding, CPU load
between tick snapshots, and the overload policy.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from pydantic import ValidationError

from .enums import OverloadReason
from .exceptions import InvalidConfigurationError
from .models import (
    UNAVAILABLE_METRIC,
    OverloadThresholds,
    OverloadVerdict,
    ResourceMetrics,
    TickSnapshot,
)

BYTES_PER_GB = 1024**3
TWO_DECIMALS = Decimal("0.01")


def round_half_up(value: float) -> float:
    """Round to two decimals, ties away from zero.

    The value is formatted with its shortest repr before quantizing, so a
    literal such as 12.345 rounds to 12.35 even though its binary form is
    slightly below the tie. A value too large to quantize within the decimal
    context returns NaN.
    """
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return float(Decimal(str(value)).quantize(TWO_DECIMALS, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        return math.nan


def bytes_to_gb(num_bytes: int) -> float:
    """Convert a byte count to gigabytes (1024**3), rounded half-up."""
    return round_half_up(num_bytes / BYTES_PER_GB)


def cpu_load_between_ticks(previous: TickSnapshot, current: TickSnapshot) -> float:
    """Fraction of CPU time spent busy between two snapshots.

    Returns:
        Busy ratio in [0, 1], or NaN when no time elapsed or a counter went
        backwards (reset, wrapped, or a snapshot from another source)
    """
    deltas = [now - before for now, before in zip(current.as_tuple(), previous.as_tuple())]
    if any(delta < 0 for delta in deltas):
        return math.nan

    total = sum(deltas)
    if total <= 0:
        return math.nan

    idle = (current.idle - previous.idle) + (current.iowait - previous.iowait)
    return (total - idle) / total


class OverloadPolicy:
    """Decides whether the host is too busy to accept new work.

    Stateless; safe to share between threads.
    """

    @staticmethod
    def thresholds(
        max_cpu_load_average: float, min_reserved_memory_gb: float
    ) -> OverloadThresholds:
        """Build validated thresholds.

        Args:
            max_cpu_load_average: Highest tolerated load average, must be > 0
            min_reserved_memory_gb: Available memory to keep free, must be >= 0

        Returns:
            OverloadThresholds: Immutable thresholds

        Raises:
            InvalidConfigurationError: If either value is negative, zero where
                not allowed, or not finite
        """
        try:
            return OverloadThresholds(
                max_cpu_load_average=float(max_cpu_load_average),
                min_reserved_memory_gb=float(min_reserved_memory_gb),
            )
        except (ValidationError, TypeError, ValueError) as e:
            raise InvalidConfigurationError(
                f"Invalid overload thresholds: {e}",
                details={
                    "max_cpu_load_average": max_cpu_load_average,
                    "min_reserved_memory_gb": min_reserved_memory_gb,
                },
            ) from e

    def evaluate(
        self, metrics: ResourceMetrics, thresholds: OverloadThresholds
    ) -> OverloadVerdict:
        """Compare freshly sampled metrics against thresholds.

        CPU load is checked first and short-circuits. A metric that degraded to
        the sentinel never trips its branch.

        Args:
            metrics: Metrics from a single sample
            thresholds: Limits to compare against

        Returns:
            OverloadVerdict: Decision and the signal that tripped it
        """
        load_average = metrics.load_average
        if load_average != UNAVAILABLE_METRIC and load_average > thresholds.max_cpu_load_average:
            return OverloadVerdict(
                overloaded=True,
                reason=OverloadReason.CPU_LOAD_EXCEEDED,
                message=(
                    f"Current cpu load average {load_average} is too high, "
                    f"max_cpu_load_average={thresholds.max_cpu_load_average}"
                ),
            )

        available_gb = metrics.available_memory_gb
        if available_gb != UNAVAILABLE_METRIC and available_gb < thresholds.min_reserved_memory_gb:
            return OverloadVerdict(
                overloaded=True,
                reason=OverloadReason.MEMORY_BELOW_RESERVE,
                message=(
                    f"Current available memory {available_gb}G is too low, "
                    f"min_reserved_memory_gb={thresholds.min_reserved_memory_gb}G"
                ),
            )

        return OverloadVerdict(overloaded=False, reason=OverloadReason.NONE)
