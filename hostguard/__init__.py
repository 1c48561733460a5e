"""hostguard - Host resource sampling and overload-based admission control."""

from .application.admission_guard import AdmissionGuard
from .application.usage_estimator import UsageEstimator
from .domain.enums import OverloadReason
from .domain.models import (
    UNAVAILABLE_METRIC,
    OverloadThresholds,
    OverloadVerdict,
    ResourceMetrics,
)
from .domain.services import OverloadPolicy
from .infrastructure.factory import InfrastructureFactory

__all__ = [
    "UNAVAILABLE_METRIC",
    "AdmissionGuard",
    "InfrastructureFactory",
    "OverloadPolicy",
    "OverloadReason",
    "OverloadThresholds",
    "OverloadVerdict",
    "ResourceMetrics",
    "UsageEstimator",
]
__version__ = "0.1.0"
