"""Usage estimator use case.

Turns raw platform counters into smoothed, rounded resource metrics. The
estimator owns its sampling window; two estimators never share state.
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, TypeVar

from ..domain.exceptions import (
    InvalidConfigurationError,
    MetricUnavailableError,
    TransientAnomalyError,
)
from ..domain.models import UNAVAILABLE_METRIC, ResourceMetrics, SampleWindow, Unavailable
from ..domain.services import bytes_to_gb, cpu_load_between_ticks, round_half_up

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..ports.clock import ClockPort
    from ..ports.hardware_sampler import HardwareSamplerPort

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DISK_PATH = "."
DEFAULT_CPU_WINDOW_MS = 950


class UsageEstimator:
    """Samples host metrics, rate-limiting CPU tick reads to one per window.

    Tick counters are cumulative, so CPU usage is the busy share of the tick
    delta between two snapshots. Calls arriving inside the window reuse the
    cached figure instead of reading counters again.

    Not safe for unsynchronized concurrent calls. Share one instance through
    AdmissionGuard, or give each consumer its own estimator.
    """

    def __init__(
        self,
        sampler: HardwareSamplerPort,
        clock: ClockPort,
        disk_path: str = DEFAULT_DISK_PATH,
        cpu_window_ms: int = DEFAULT_CPU_WINDOW_MS,
        window: SampleWindow | None = None,
    ):
        """Initialize the estimator.

        Args:
            sampler: Source of raw platform counters
            clock: Monotonic clock used for the CPU window
            disk_path: Any path on the volume whose free space is reported
            cpu_window_ms: Minimum milliseconds between two tick snapshots
            window: Pre-existing window state (a fresh one by default)

        Raises:
            InvalidConfigurationError: If cpu_window_ms is not positive
        """
        if cpu_window_ms <= 0:
            raise InvalidConfigurationError(
                f"CPU window must be positive, got {cpu_window_ms}ms",
                details={"cpu_window_ms": cpu_window_ms},
            )
        self._sampler = sampler
        self._clock = clock
        self._disk_path = disk_path
        self._cpu_window_ms = cpu_window_ms
        self._window = window if window is not None else SampleWindow()
        self._fallback_announced = False

    @property
    def disk_path(self) -> str:
        return self._disk_path

    @property
    def cpu_window_ms(self) -> int:
        return self._cpu_window_ms

    @property
    def window(self) -> SampleWindow:
        """The sampling window this estimator owns."""
        return self._window

    def sample(self) -> ResourceMetrics:
        """Take one sample of every metric.

        Each metric is computed independently; a failure degrades only that
        field to -1.0.

        Returns:
            ResourceMetrics: Rounded metrics for this instant
        """
        total_memory = self._sampler.total_memory_bytes()
        available_memory = self._sampler.available_memory_bytes()

        return ResourceMetrics(
            memory_usage_percent=self._guarded(
                "memory_usage_percent",
                lambda: self._memory_usage_percent(total_memory, available_memory),
            ),
            disk_available_gb=self._guarded("disk_available_gb", self._disk_available_gb),
            load_average=self._guarded("load_average", self._load_average),
            cpu_usage_percent=self._guarded("cpu_usage_percent", self._cpu_usage_percent),
            available_memory_gb=self._guarded(
                "available_memory_gb", lambda: self._available_memory_gb(available_memory)
            ),
        )

    def _guarded(self, metric: str, compute: Callable[[], float]) -> float:
        try:
            return compute()
        except MetricUnavailableError as e:
            logger.warning(f"Metric {metric} unavailable, reporting {UNAVAILABLE_METRIC}: {e}")
        except TransientAnomalyError as e:
            logger.warning(f"Discarding anomalous {metric}, reporting {UNAVAILABLE_METRIC}: {e}")
        return UNAVAILABLE_METRIC

    @staticmethod
    def _require(reading: T | Unavailable, metric: str) -> T:
        if isinstance(reading, Unavailable):
            raise MetricUnavailableError(metric, reading.reason)
        return reading

    @staticmethod
    def _finite(value: float, metric: str) -> float:
        if not math.isfinite(value):
            raise TransientAnomalyError(metric, value)
        return value

    @staticmethod
    def _percent(ratio: float, metric: str) -> float:
        value = round_half_up(ratio * 100)
        if math.isnan(value) or not 0 <= value <= 100:
            raise TransientAnomalyError(metric, value)
        return value

    def _memory_usage_percent(
        self, total: int | Unavailable, available: int | Unavailable
    ) -> float:
        total_bytes = self._require(total, "memory_usage_percent")
        available_bytes = self._require(available, "memory_usage_percent")
        if total_bytes <= 0:
            raise TransientAnomalyError("memory_usage_percent", float(total_bytes))
        return self._percent((total_bytes - available_bytes) / total_bytes, "memory_usage_percent")

    def _available_memory_gb(self, available: int | Unavailable) -> float:
        available_bytes = self._require(available, "available_memory_gb")
        if available_bytes < 0:
            raise TransientAnomalyError("available_memory_gb", float(available_bytes))
        return self._finite(bytes_to_gb(available_bytes), "available_memory_gb")

    def _disk_available_gb(self) -> float:
        free_bytes = self._require(
            self._sampler.free_disk_bytes(self._disk_path), "disk_available_gb"
        )
        if free_bytes < 0:
            raise TransientAnomalyError("disk_available_gb", float(free_bytes))
        return self._finite(bytes_to_gb(free_bytes), "disk_available_gb")

    def _load_average(self) -> float:
        reading = self._sampler.platform_load_average()
        if isinstance(reading, Unavailable):
            # Degraded source; say so once rather than on every sample
            if not self._fallback_announced:
                logger.warning(
                    f"Platform load average unavailable ({reading.reason}), "
                    "falling back to processor-derived estimate"
                )
                self._fallback_announced = True
            reading = self._sampler.processor_load_average()

        load_average = self._require(reading, "load_average")
        if not math.isfinite(load_average) or load_average < 0:
            raise TransientAnomalyError("load_average", load_average)
        return self._finite(round_half_up(load_average), "load_average")

    def _cpu_usage_percent(self) -> float:
        now_ms = self._clock.monotonic_ms()
        if not self._window.is_due(now_ms, self._cpu_window_ms):
            cached = self._window.cached_usage()
            return UNAVAILABLE_METRIC if cached is None else cached

        ticks = self._require(self._sampler.current_ticks(), "cpu_usage_percent")
        ratio = cpu_load_between_ticks(self._window.previous_ticks, ticks)
        self._window.advance(ticks, now_ms)

        try:
            usage = self._percent(ratio, "cpu_usage_percent")
        except TransientAnomalyError:
            # Served as -1.0 until the next window recomputes
            self._window.record_usage(None)
            raise
        self._window.record_usage(usage)
        logger.debug(f"CPU usage recomputed: {usage}% over window ending at {now_ms}ms")
        return usage
