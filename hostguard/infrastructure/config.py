"""Configuration objects for the infrastructure layer."""

from __future__ import annotations

import os
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..application.usage_estimator import DEFAULT_CPU_WINDOW_MS, DEFAULT_DISK_PATH
from ..domain.models import OverloadThresholds

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def default_max_cpu_load_average() -> float:
    """Twice the logical CPU count, so a fully busy host is not yet overloaded."""
    return float((os.cpu_count() or 1) * 2)


class HostGuardConfig(BaseModel):
    """Strongly-typed settings for sampling and admission decisions."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        strict=True,
        frozen=True,
        allow_inf_nan=False,
    )

    # Sampling
    disk_path: str = Field(
        default=DEFAULT_DISK_PATH,
        min_length=1,
        description="Path on the volume whose free space is reported",
    )
    cpu_window_ms: int = Field(
        default=DEFAULT_CPU_WINDOW_MS,
        ge=1,
        le=60_000,
        description="Minimum milliseconds between two CPU tick snapshots",
    )

    # Overload thresholds
    max_cpu_load_average: float = Field(
        default_factory=default_max_cpu_load_average,
        gt=0,
        description="Load average above which the host is overloaded",
    )
    min_reserved_memory_gb: float = Field(
        default=0.3,
        ge=0,
        description="Available memory in GB below which the host is overloaded",
    )

    # Background watch
    watch_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        description="Seconds between two checks of the watch task",
    )

    log_level: LogLevel = Field(default="INFO", description="Logging level")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v

    def to_thresholds(self) -> OverloadThresholds:
        """Overload thresholds described by this configuration."""
        return OverloadThresholds(
            max_cpu_load_average=self.max_cpu_load_average,
            min_reserved_memory_gb=self.min_reserved_memory_gb,
        )
