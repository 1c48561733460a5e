"""Integration tests against the counters of the machine running the suite."""

from __future__ import annotations

import time

import pytest

from hostguard.domain.models import UNAVAILABLE_METRIC
from hostguard.infrastructure.config import HostGuardConfig
from hostguard.infrastructure.factory import InfrastructureFactory
from hostguard.infrastructure.psutil_sampler import PsutilHardwareSampler

pytestmark = pytest.mark.integration


def test_real_sample_is_within_bounds(tmp_path):
    config = HostGuardConfig(disk_path=str(tmp_path), cpu_window_ms=100)
    estimator = InfrastructureFactory.create_usage_estimator(config)

    estimator.sample()
    time.sleep(0.15)
    metrics = estimator.sample()

    assert 0.0 < metrics.memory_usage_percent <= 100.0
    assert metrics.available_memory_gb > 0.0
    assert metrics.disk_available_gb >= 0.0
    assert metrics.cpu_usage_percent == UNAVAILABLE_METRIC or (
        0.0 <= metrics.cpu_usage_percent <= 100.0
    )
    assert metrics.load_average == UNAVAILABLE_METRIC or metrics.load_average >= 0.0


def test_ticks_only_move_forward():
    sampler = PsutilHardwareSampler()
    first = sampler.current_ticks()
    time.sleep(0.05)
    second = sampler.current_ticks()

    assert all(after >= before for before, after in zip(first.as_tuple(), second.as_tuple()))


def test_generous_thresholds_accept_work(tmp_path):
    config = HostGuardConfig(
        disk_path=str(tmp_path), max_cpu_load_average=10_000.0, min_reserved_memory_gb=0.0
    )
    guard = InfrastructureFactory.create_admission_guard(config)
    assert guard.is_overloaded() is False
