"""Domain layer - Core business logic and entities."""

from .enums import OverloadReason, ValidationLevel
from .exceptions import (
    ConfigurationError,
    HostGuardError,
    InvalidConfigurationError,
    MetricUnavailableError,
    TransientAnomalyError,
)
from .models import (
    UNAVAILABLE_METRIC,
    OverloadThresholds,
    OverloadVerdict,
    ResourceMetrics,
    SampleWindow,
    TickSnapshot,
    Unavailable,
    ValidationIssue,
    ValidationResult,
)
from .services import OverloadPolicy, bytes_to_gb, cpu_load_between_ticks, round_half_up

__all__ = [
    # Exceptions
    "ConfigurationError",
    "HostGuardError",
    "InvalidConfigurationError",
    "MetricUnavailableError",
    "TransientAnomalyError",
    # Enums
    "OverloadReason",
    "ValidationLevel",
    # Models
    "UNAVAILABLE_METRIC",
    "OverloadThresholds",
    "OverloadVerdict",
    "ResourceMetrics",
    "SampleWindow",
    "TickSnapshot",
    "Unavailable",
    "ValidationIssue",
    "ValidationResult",
    # Services
    "OverloadPolicy",
    "bytes_to_gb",
    "cpu_load_between_ticks",
    "round_half_up",
]
