"""Infrastructure factory for creating adapters and dependencies.

This module follows the Factory pattern to centralize the creation of
infrastructure components, promoting loose coupling and testability.
"""

from __future__ import annotations

from ..application.admission_guard import AdmissionGuard
from ..application.usage_estimator import UsageEstimator
from ..ports.clock import ClockPort
from ..ports.configuration import ConfigurationPort
from ..ports.hardware_sampler import HardwareSamplerPort
from .config import HostGuardConfig
from .configuration_adapter import EnvironmentConfigurationAdapter
from .psutil_sampler import PsutilHardwareSampler
from .system_clock import SystemClock
from .watch_task import OverloadWatchTask


class InfrastructureFactory:
    """Factory for wiring hostguard components following hexagonal architecture.

    Every call builds new instances, so two estimators created here never
    share a sampling window.
    """

    @staticmethod
    def create_configuration_port() -> ConfigurationPort:
        """Create a configuration port adapter.

        Returns:
            ConfigurationPort implementation
        """
        return EnvironmentConfigurationAdapter()

    @staticmethod
    def create_hardware_sampler() -> HardwareSamplerPort:
        return PsutilHardwareSampler()

    @staticmethod
    def create_clock() -> ClockPort:
        return SystemClock()

    @staticmethod
    def create_usage_estimator(
        config: HostGuardConfig,
        sampler: HardwareSamplerPort | None = None,
        clock: ClockPort | None = None,
    ) -> UsageEstimator:
        """Create a usage estimator with its own sampling window.

        Args:
            config: Sampling configuration
            sampler: Hardware sampler (psutil-backed by default)
            clock: Clock (system monotonic clock by default)

        Returns:
            UsageEstimator: A fresh estimator
        """
        return UsageEstimator(
            sampler=sampler or InfrastructureFactory.create_hardware_sampler(),
            clock=clock or InfrastructureFactory.create_clock(),
            disk_path=config.disk_path,
            cpu_window_ms=config.cpu_window_ms,
        )

    @staticmethod
    def create_admission_guard(
        config: HostGuardConfig | None = None,
        sampler: HardwareSamplerPort | None = None,
        clock: ClockPort | None = None,
    ) -> AdmissionGuard:
        """Create an admission guard using configured thresholds.

        Args:
            config: Configuration, loaded from the environment when omitted
            sampler: Hardware sampler (psutil-backed by default)
            clock: Clock (system monotonic clock by default)

        Returns:
            AdmissionGuard: Guard wrapping a fresh estimator

        Raises:
            ConfigurationError: If configuration must be loaded and is invalid
        """
        if config is None:
            config = InfrastructureFactory.create_configuration_port().load_configuration()
        estimator = InfrastructureFactory.create_usage_estimator(config, sampler, clock)
        return AdmissionGuard(estimator, thresholds=config.to_thresholds())

    @staticmethod
    def create_watch_task(guard: AdmissionGuard, config: HostGuardConfig) -> OverloadWatchTask:
        return OverloadWatchTask(guard, interval=config.watch_interval_seconds)
