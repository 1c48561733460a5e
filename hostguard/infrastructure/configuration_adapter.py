"""Configuration adapter implementation.

Concrete implementation of the ConfigurationPort interface.
Loads configuration from HOSTGUARD_* environment variables.
"""

from __future__ import annotations

import os
from typing import Any

import psutil
from pydantic import ValidationError

from ..domain.enums import ValidationLevel
from ..domain.exceptions import ConfigurationError
from ..domain.models import ValidationIssue, ValidationResult
from ..domain.services import BYTES_PER_GB
from ..ports.configuration import ConfigurationPort
from .config import HostGuardConfig

ENV_PREFIX = "HOSTGUARD_"

# Environment variable suffix -> (config field, converter)
ENV_FIELDS: dict[str, tuple[str, Any]] = {
    "DISK_PATH": ("disk_path", str),
    "CPU_WINDOW_MS": ("cpu_window_ms", int),
    "MAX_CPU_LOAD_AVERAGE": ("max_cpu_load_average", float),
    "MIN_RESERVED_MEMORY_GB": ("min_reserved_memory_gb", float),
    "WATCH_INTERVAL_SECONDS": ("watch_interval_seconds", float),
    "LOG_LEVEL": ("log_level", str),
}


class EnvironmentConfigurationAdapter(ConfigurationPort):
    """Adapter that loads configuration from environment variables."""

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        """Initialize the configuration adapter.

        Args:
            environ: Mapping to read instead of os.environ
        """
        self._environ = environ

    def load_configuration(self) -> HostGuardConfig:
        """Load hostguard configuration from environment variables.

        Unset variables fall back to HostGuardConfig defaults.

        Returns:
            HostGuardConfig: Validated configuration

        Raises:
            ConfigurationError: If a variable cannot be parsed or is out of range
        """
        environ = self._environ if self._environ is not None else os.environ
        values: dict[str, Any] = {}
        for suffix, (field, convert) in ENV_FIELDS.items():
            raw = environ.get(f"{ENV_PREFIX}{suffix}")
            if raw is None or not raw.strip():
                continue
            try:
                values[field] = convert(raw.strip())
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {ENV_PREFIX}{suffix}: {raw!r}",
                    details={"variable": f"{ENV_PREFIX}{suffix}", "value": raw},
                ) from e

        try:
            return HostGuardConfig(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Failed to load configuration: {str(e)}") from e

    def validate_configuration(self, config: HostGuardConfig) -> ValidationResult:
        """Check a configuration against the running host.

        Args:
            config: Configuration to validate

        Returns:
            ValidationResult: Result with validation status and any issues
        """
        result = ValidationResult(context="HostGuardConfig")

        if not os.path.exists(config.disk_path):
            result.add_issue(
                ValidationIssue(
                    level=ValidationLevel.ERROR,
                    category="DISK",
                    message=f"Disk path {config.disk_path} does not exist",
                    resolution="Point HOSTGUARD_DISK_PATH at a directory on the watched volume",
                    details={"disk_path": config.disk_path},
                )
            )

        cpu_count = os.cpu_count() or 1
        if config.max_cpu_load_average < 1:
            result.add_issue(
                ValidationIssue(
                    level=ValidationLevel.WARNING,
                    category="CPU",
                    message=(
                        f"max_cpu_load_average={config.max_cpu_load_average} is below one "
                        "runnable task; the host will report overload almost constantly"
                    ),
                    resolution=f"Consider a value near the CPU count ({cpu_count})",
                    details={"cpu_count": cpu_count},
                )
            )

        total_gb = psutil.virtual_memory().total / BYTES_PER_GB
        if config.min_reserved_memory_gb >= total_gb:
            result.add_issue(
                ValidationIssue(
                    level=ValidationLevel.WARNING,
                    category="MEMORY",
                    message=(
                        f"min_reserved_memory_gb={config.min_reserved_memory_gb} is not below "
                        f"total memory ({total_gb:.2f}G); the host will always be overloaded"
                    ),
                    resolution="Lower HOSTGUARD_MIN_RESERVED_MEMORY_GB",
                    details={"total_memory_gb": round(total_gb, 2)},
                )
            )

        result.diagnostics["disk_path"] = config.disk_path
        result.diagnostics["cpu_count"] = cpu_count
        result.diagnostics["cpu_window_ms"] = config.cpu_window_ms

        return result
