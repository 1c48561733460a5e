"""Shared pytest fixtures for hostguard tests."""

from __future__ import annotations

import pytest

from hostguard.application.usage_estimator import UsageEstimator
from hostguard.domain.models import OverloadThresholds
from tests.mocks import ManualClock, StubHardwareSampler


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at 10 seconds."""
    return ManualClock(start_ms=10_000)


@pytest.fixture
def sampler() -> StubHardwareSampler:
    """Sampler reporting a healthy 16GB host."""
    return StubHardwareSampler()


@pytest.fixture
def estimator(sampler: StubHardwareSampler, clock: ManualClock) -> UsageEstimator:
    """Estimator with a fresh window over the stub sampler."""
    return UsageEstimator(sampler=sampler, clock=clock)


@pytest.fixture
def thresholds() -> OverloadThresholds:
    return OverloadThresholds(max_cpu_load_average=8.0, min_reserved_memory_gb=4.0)
