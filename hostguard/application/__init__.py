"""Application layer - Sampling and admission use cases."""

from .admission_guard import AdmissionGuard
from .usage_estimator import DEFAULT_CPU_WINDOW_MS, DEFAULT_DISK_PATH, UsageEstimator

__all__ = ["DEFAULT_CPU_WINDOW_MS", "DEFAULT_DISK_PATH", "AdmissionGuard", "UsageEstimator"]
