"""Admission guard application service.

Orchestrates sampling and the overload policy behind one lock so a single
estimator can be shared by several threads.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from ..domain.exceptions import InvalidConfigurationError
from ..domain.services import OverloadPolicy

if TYPE_CHECKING:
    from ..domain.models import OverloadThresholds, OverloadVerdict, ResourceMetrics
    from .usage_estimator import UsageEstimator

logger = logging.getLogger(__name__)


class AdmissionGuard:
    """Decides whether this host may accept new work."""

    def __init__(
        self,
        estimator: UsageEstimator,
        thresholds: OverloadThresholds | None = None,
        policy: OverloadPolicy | None = None,
    ):
        """Initialize the admission guard.

        Args:
            estimator: Estimator whose window this guard serializes access to
            thresholds: Default thresholds used when a call supplies none
            policy: Overload policy (a stateless default by default)
        """
        self._estimator = estimator
        self._thresholds = thresholds
        self._policy = policy or OverloadPolicy()
        self._lock = threading.Lock()

    @property
    def thresholds(self) -> OverloadThresholds | None:
        return self._thresholds

    def sample(self) -> ResourceMetrics:
        """Sample metrics while holding the estimator lock."""
        with self._lock:
            return self._estimator.sample()

    def check(self, thresholds: OverloadThresholds | None = None) -> OverloadVerdict:
        """Sample fresh metrics and evaluate them.

        Args:
            thresholds: Limits for this call, or None to use the defaults

        Returns:
            OverloadVerdict: Decision and the signal that tripped it

        Raises:
            InvalidConfigurationError: If no thresholds are given or configured
        """
        return self.assess(thresholds)[1]

    def assess(
        self, thresholds: OverloadThresholds | None = None
    ) -> tuple[ResourceMetrics, OverloadVerdict]:
        """Like check, but also return the metrics the verdict was based on."""
        effective = thresholds if thresholds is not None else self._thresholds
        if effective is None:
            raise InvalidConfigurationError("No overload thresholds supplied or configured")

        metrics = self.sample()
        verdict = self._policy.evaluate(metrics, effective)
        if verdict.overloaded:
            logger.warning(verdict.message)
        return metrics, verdict

    def is_overloaded(
        self,
        max_cpu_load_average: float | None = None,
        min_reserved_memory_gb: float | None = None,
    ) -> bool:
        """Check whether CPU load or memory has crossed its threshold.

        Values left as None come from the configured thresholds.

        Returns:
            bool: True if the cpu or memory exceed the given thresholds

        Raises:
            InvalidConfigurationError: If a threshold is missing or invalid
        """
        if max_cpu_load_average is None and min_reserved_memory_gb is None:
            return self.check().overloaded

        defaults = self._thresholds
        if max_cpu_load_average is None:
            if defaults is None:
                raise InvalidConfigurationError("max_cpu_load_average is required")
            max_cpu_load_average = defaults.max_cpu_load_average
        if min_reserved_memory_gb is None:
            if defaults is None:
                raise InvalidConfigurationError("min_reserved_memory_gb is required")
            min_reserved_memory_gb = defaults.min_reserved_memory_gb

        thresholds = self._policy.thresholds(max_cpu_load_average, min_reserved_memory_gb)
        return self.check(thresholds).overloaded
