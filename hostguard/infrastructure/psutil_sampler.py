"""psutil-backed hardware sampler.

Concrete implementation of the HardwareSamplerPort interface. Platform errors
are converted into typed Unavailable results and never propagate.
"""

from __future__ import annotations

import logging
import math
import os
from collections.abc import Callable
from typing import TypeVar

import psutil

from ..domain.models import TickSnapshot, Unavailable
from ..ports.hardware_sampler import HardwareSamplerPort

logger = logging.getLogger(__name__)

T = TypeVar("T")

# AttributeError covers APIs missing on this platform (e.g. os.getloadavg on Windows)
PLATFORM_ERRORS = (OSError, AttributeError, NotImplementedError, psutil.Error)

# Field names psutil uses for the same tick category on other platforms
TICK_ALIASES: dict[str, tuple[str, ...]] = {
    "irq": ("irq", "interrupt"),
    "softirq": ("softirq", "dpc"),
}


class PsutilHardwareSampler(HardwareSamplerPort):
    """Reads host counters through psutil and the os module."""

    def _read(self, metric: str, read: Callable[[], T]) -> T | Unavailable:
        try:
            return read()
        except PLATFORM_ERRORS as e:
            reason = str(e) or type(e).__name__
            logger.warning(f"Unable to read {metric} from platform: {reason}")
            return Unavailable(metric=metric, reason=reason)

    def total_memory_bytes(self) -> int | Unavailable:
        return self._read("total_memory", lambda: int(psutil.virtual_memory().total))

    def available_memory_bytes(self) -> int | Unavailable:
        return self._read("available_memory", lambda: int(psutil.virtual_memory().available))

    def free_disk_bytes(self, path: str) -> int | Unavailable:
        return self._read("free_disk", lambda: int(psutil.disk_usage(path).free))

    def current_ticks(self) -> TickSnapshot | Unavailable:
        """Aggregate CPU times across all cores, converted to milliseconds."""
        return self._read("cpu_ticks", self._tick_snapshot)

    def platform_load_average(self) -> float | Unavailable:
        """One-minute load average as reported natively by the OS."""
        reading = self._read("platform_load_average", lambda: float(os.getloadavg()[0]))
        return self._valid_load(reading, "platform_load_average")

    def processor_load_average(self) -> float | Unavailable:
        """psutil's load estimate, emulated from processor queue length on Windows."""
        reading = self._read("processor_load_average", lambda: float(psutil.getloadavg()[0]))
        return self._valid_load(reading, "processor_load_average")

    @staticmethod
    def _valid_load(reading: float | Unavailable, metric: str) -> float | Unavailable:
        # Some platforms report a negative value instead of failing
        if isinstance(reading, Unavailable):
            return reading
        if math.isnan(reading) or reading < 0:
            return Unavailable(metric=metric, reason=f"platform reported {reading}")
        return reading

    @staticmethod
    def _tick_snapshot() -> TickSnapshot:
        times = psutil.cpu_times()
        values: dict[str, int] = {}
        for category in TickSnapshot.CATEGORIES:
            seconds = 0.0
            for field in TICK_ALIASES.get(category, (category,)):
                if hasattr(times, field):
                    seconds = getattr(times, field)
                    break
            values[category] = max(0, int(seconds * 1000))
        return TickSnapshot(**values)
