"""Configuration port interface.

Defines the protocol interface for loading hostguard settings.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..domain.models import ValidationResult
    from ..infrastructure.config import HostGuardConfig


class ConfigurationPort(Protocol):
    """Protocol interface for configuration operations."""

    def load_configuration(self) -> HostGuardConfig:
        """Load hostguard configuration from external sources.

        Returns:
            HostGuardConfig: Validated configuration

        Raises:
            ConfigurationError: If configuration is invalid or missing
        """
        ...

    def validate_configuration(self, config: HostGuardConfig) -> ValidationResult:
        """Check a configuration against the running host.

        Args:
            config: Configuration to validate

        Returns:
            ValidationResult: Result with validation status and any issues
        """
        ...
