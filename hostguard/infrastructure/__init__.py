"""Infrastructure layer - Concrete implementations of ports."""

from .config import HostGuardConfig
from .configuration_adapter import EnvironmentConfigurationAdapter
from .factory import InfrastructureFactory
from .logging_config import setup_logging
from .psutil_sampler import PsutilHardwareSampler
from .system_clock import SystemClock
from .watch_task import OverloadWatchTask

__all__ = [
    "EnvironmentConfigurationAdapter",
    "HostGuardConfig",
    "InfrastructureFactory",
    "OverloadWatchTask",
    "PsutilHardwareSampler",
    "SystemClock",
    "setup_logging",
]
