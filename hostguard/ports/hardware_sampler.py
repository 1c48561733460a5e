"""Hardware sampler port - Abstract interface over platform counters.

This port defines the boundary between the usage estimator and whatever
facility the host platform offers for reading memory, disk, CPU tick and
load-average counters. Queries never raise into the caller: a counter the
platform cannot supply is reported as a typed Unavailable result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..domain.models import TickSnapshot, Unavailable


class HardwareSamplerPort(ABC):
    """Read-only queries over host-level resource counters."""

    @abstractmethod
    def total_memory_bytes(self) -> int | Unavailable:
        """Get total physical memory.

        Returns:
            Total physical memory in bytes, or Unavailable
        """
        ...

    @abstractmethod
    def available_memory_bytes(self) -> int | Unavailable:
        """Get physical memory available to new processes without swapping.

        Returns:
            Available physical memory in bytes, or Unavailable
        """
        ...

    @abstractmethod
    def free_disk_bytes(self, path: str) -> int | Unavailable:
        """Get free space on the volume holding a path.

        Args:
            path: Any path on the volume to inspect

        Returns:
            Free bytes on that volume, or Unavailable
        """
        ...

    @abstractmethod
    def current_ticks(self) -> TickSnapshot | Unavailable:
        """Get cumulative CPU time per tick category since boot.

        Returns:
            TickSnapshot aggregated across all cores, or Unavailable
        """
        ...

    @abstractmethod
    def platform_load_average(self) -> float | Unavailable:
        """Get the platform-reported one-minute load average.

        Returns:
            Load average, or Unavailable where the platform has no native concept of one
        """
        ...

    @abstractmethod
    def processor_load_average(self) -> float | Unavailable:
        """Get a processor-derived load estimate.

        Degraded-quality fallback used only when platform_load_average is
        unavailable.

        Returns:
            Estimated load average, or Unavailable
        """
        ...
