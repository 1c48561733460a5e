"""Domain models for hostguard.

This module contains the value objects and the sampling window entity with
strict Pydantic v2 validation. Domain models are free from any infrastructure
dependencies.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .enums import OverloadReason, ValidationLevel

# Explicit "metric not obtainable" value, distinct from any valid measurement.
UNAVAILABLE_METRIC = -1.0


class Unavailable(BaseModel):
    """Value object returned by a sampler query the platform cannot answer."""

    model_config = ConfigDict(frozen=True, strict=True)

    metric: str = Field(..., min_length=1, description="Name of the unavailable counter")
    reason: str = Field(default="", description="Why the platform could not supply it")


class TickSnapshot(BaseModel):
    """Cumulative CPU time per tick category since boot, in milliseconds.

    Counters are absolute and monotonic, not rates. Usage is derived from the
    delta between two snapshots.
    """

    model_config = ConfigDict(frozen=True, strict=True)

    CATEGORIES: ClassVar[tuple[str, ...]] = (
        "user",
        "nice",
        "system",
        "idle",
        "iowait",
        "irq",
        "softirq",
        "steal",
    )

    user: int = Field(default=0, ge=0)
    nice: int = Field(default=0, ge=0)
    system: int = Field(default=0, ge=0)
    idle: int = Field(default=0, ge=0)
    iowait: int = Field(default=0, ge=0)
    irq: int = Field(default=0, ge=0)
    softirq: int = Field(default=0, ge=0)
    steal: int = Field(default=0, ge=0)

    @classmethod
    def zero(cls) -> TickSnapshot:
        """Snapshot used before any sample has been taken."""
        return cls()

    @property
    def idle_total(self) -> int:
        """Ticks spent doing nothing, including waiting on I/O."""
        return self.idle + self.iowait

    @property
    def busy(self) -> int:
        """Ticks spent doing work."""
        return self.total - self.idle_total

    @property
    def total(self) -> int:
        return sum(getattr(self, name) for name in self.CATEGORIES)

    def as_tuple(self) -> tuple[int, ...]:
        return tuple(getattr(self, name) for name in self.CATEGORIES)


class SampleWindow(BaseModel):
    """Mutable windowing state owned by exactly one usage estimator.

    Not safe for concurrent mutation; callers needing shared access must go
    through a single lock-holding owner.
    """

    model_config = ConfigDict(validate_assignment=True)

    previous_ticks: TickSnapshot = Field(default_factory=TickSnapshot.zero)
    previous_sample_time_ms: int | None = Field(default=None)
    last_cpu_usage: float | None = Field(default=None)
    last_result_anomalous: bool = Field(default=False)

    def is_due(self, now_ms: int, interval_ms: int) -> bool:
        """Check whether enough time has passed to take a new tick snapshot.

        A clock reading earlier than the previous sample yields a negative
        elapsed time and keeps the gate closed.
        """
        if self.previous_sample_time_ms is None:
            return True
        return now_ms - self.previous_sample_time_ms >= interval_ms

    def advance(self, ticks: TickSnapshot, now_ms: int) -> None:
        """Replace the snapshot and its timestamp together.

        Raises:
            ValueError: If now_ms is earlier than the previous sample time
        """
        if self.previous_sample_time_ms is not None and now_ms < self.previous_sample_time_ms:
            raise ValueError(
                f"Sample time cannot move backwards ({now_ms} < {self.previous_sample_time_ms})"
            )
        self.previous_ticks = ticks
        self.previous_sample_time_ms = now_ms

    def record_usage(self, usage: float | None) -> None:
        """Record the outcome of the computation for the current window.

        None marks an anomalous computation. The last good figure is kept but
        not served until a later window succeeds.
        """
        if usage is None:
            self.last_result_anomalous = True
            return
        self.last_cpu_usage = usage
        self.last_result_anomalous = False

    def cached_usage(self) -> float | None:
        """CPU usage to serve while the gate is closed, or None if there is none."""
        if self.last_result_anomalous:
            return None
        return self.last_cpu_usage


class ResourceMetrics(BaseModel):
    """Smoothed host resource metrics returned by a single sample.

    Every figure is rounded half-up to two decimals, or is exactly -1.0 when the
    platform could not supply it. NaN never appears.
    """

    model_config = ConfigDict(frozen=True, strict=True, allow_inf_nan=False)

    PERCENT_FIELDS: ClassVar[tuple[str, ...]] = ("memory_usage_percent", "cpu_usage_percent")

    memory_usage_percent: float = Field(..., description="Physical memory in use, percent")
    disk_available_gb: float = Field(..., description="Free space on the watched volume, GB")
    load_average: float = Field(..., description="One-minute system load average")
    cpu_usage_percent: float = Field(..., description="Windowed CPU usage, percent")
    available_memory_gb: float = Field(
        default=UNAVAILABLE_METRIC, description="Available physical memory, GB"
    )

    @field_validator(
        "memory_usage_percent",
        "disk_available_gb",
        "load_average",
        "cpu_usage_percent",
        "available_memory_gb",
    )
    @classmethod
    def validate_sentinel_or_non_negative(cls, v: float) -> float:
        """Only -1.0 may be negative."""
        if v < 0 and v != UNAVAILABLE_METRIC:
            raise ValueError(f"Metric must be non-negative or {UNAVAILABLE_METRIC}, got {v}")
        return v

    @field_validator("memory_usage_percent", "cpu_usage_percent")
    @classmethod
    def validate_percent(cls, v: float) -> float:
        """Percentages are capped at 100."""
        if v > 100:
            raise ValueError(f"Percentage cannot exceed 100, got {v}")
        return v

    def unavailable_fields(self) -> list[str]:
        """Names of the metrics that degraded to the sentinel."""
        return [name for name, value in self if value == UNAVAILABLE_METRIC]


class OverloadThresholds(BaseModel):
    """Caller-supplied limits for the overload decision."""

    model_config = ConfigDict(frozen=True, strict=True, allow_inf_nan=False)

    max_cpu_load_average: float = Field(..., gt=0, description="Highest tolerated load average")
    min_reserved_memory_gb: float = Field(
        ..., ge=0, description="Available memory that must stay free, GB"
    )


class OverloadVerdict(BaseModel):
    """Outcome of evaluating metrics against thresholds."""

    model_config = ConfigDict(frozen=True, strict=True)

    overloaded: bool = Field(..., description="Whether new work should be refused")
    reason: OverloadReason = Field(default=OverloadReason.NONE, description="Signal that tripped")
    message: str = Field(default="", description="Human-readable explanation")

    @model_validator(mode="after")
    def validate_reason_matches(self) -> OverloadVerdict:
        if self.overloaded == (self.reason == OverloadReason.NONE):
            raise ValueError(
                f"Inconsistent verdict: overloaded={self.overloaded}, reason={self.reason.value}"
            )
        return self


class ValidationIssue(BaseModel):
    """Value object representing a configuration validation issue."""

    level: ValidationLevel = Field(..., description="Issue severity")
    category: str = Field(..., description="Issue category: DISK, CPU, MEMORY, CONFIG")
    message: str = Field(..., description="Human-readable issue description")
    resolution: str | None = Field(None, description="Suggested resolution steps")
    details: dict[str, Any] = Field(default_factory=dict, description="Additional context")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        """Ensure category is uppercase."""
        return v.upper()

    model_config = ConfigDict(frozen=True, strict=True)


class ValidationResult(BaseModel):
    """Aggregate root representing the complete validation result."""

    is_valid: bool = Field(default=True, description="Overall validation status")
    context: str = Field(default="", description="Validation context")
    issues: list[ValidationIssue] = Field(default_factory=list, description="All validation issues")
    diagnostics: dict[str, Any] = Field(default_factory=dict, description="Diagnostic information")

    def add_issue(self, issue: ValidationIssue) -> None:
        """Add a validation issue to the result."""
        self.issues.append(issue)
        if issue.level == ValidationLevel.ERROR:
            self.is_valid = False

    def get_issues_by_level(self, level: ValidationLevel) -> list[ValidationIssue]:
        """Get all issues of a specific level."""
        return [issue for issue in self.issues if issue.level == level]

    def has_errors(self) -> bool:
        """Check if validation has any errors."""
        return any(issue.level == ValidationLevel.ERROR for issue in self.issues)

    def has_warnings(self) -> bool:
        """Check if validation has any warnings."""
        return any(issue.level == ValidationLevel.WARNING for issue in self.issues)

    model_config = ConfigDict(strict=True)
