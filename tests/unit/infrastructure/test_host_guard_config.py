"""Unit tests for HostGuardConfig."""

from __future__ import annotations

import math
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from hostguard.domain.models import OverloadThresholds
from hostguard.infrastructure.config import HostGuardConfig, default_max_cpu_load_average


class TestDefaults:
    """Test default configuration values."""

    def test_defaults(self):
        config = HostGuardConfig()
        assert config.disk_path == "."
        assert config.cpu_window_ms == 950
        assert config.min_reserved_memory_gb == 0.3
        assert config.watch_interval_seconds == 5.0
        assert config.log_level == "INFO"

    def test_max_load_is_twice_cpu_count(self):
        with patch("hostguard.infrastructure.config.os.cpu_count", return_value=6):
            assert default_max_cpu_load_average() == 12.0
            assert HostGuardConfig().max_cpu_load_average == 12.0

    def test_unknown_cpu_count(self):
        with patch("hostguard.infrastructure.config.os.cpu_count", return_value=None):
            assert default_max_cpu_load_average() == 2.0


class TestValidation:
    """Test configuration validation rules."""

    @pytest.mark.parametrize(
        "field, value",
        [
            ("cpu_window_ms", 0),
            ("cpu_window_ms", 60_001),
            ("max_cpu_load_average", 0.0),
            ("max_cpu_load_average", math.inf),
            ("min_reserved_memory_gb", -0.5),
            ("watch_interval_seconds", 0.0),
            ("disk_path", ""),
            ("log_level", "VERBOSE"),
        ],
    )
    def test_rejected_values(self, field: str, value: object):
        with pytest.raises(ValidationError):
            HostGuardConfig(**{field: value})

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            HostGuardConfig(max_memory_gb=4.0)

    def test_strict_types(self):
        """Test that strings are not coerced into numbers."""
        with pytest.raises(ValidationError):
            HostGuardConfig(cpu_window_ms="950")

    def test_log_level_normalized(self):
        assert HostGuardConfig(log_level="debug").log_level == "DEBUG"

    def test_disk_path_stripped(self):
        assert HostGuardConfig(disk_path="  /data ").disk_path == "/data"

    def test_frozen(self):
        config = HostGuardConfig()
        with pytest.raises(ValidationError):
            config.cpu_window_ms = 10


class TestToThresholds:
    def test_to_thresholds(self):
        config = HostGuardConfig(max_cpu_load_average=4.0, min_reserved_memory_gb=1.5)
        assert config.to_thresholds() == OverloadThresholds(
            max_cpu_load_average=4.0, min_reserved_memory_gb=1.5
        )
