"""Tests for the hostguard command line interface."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from hostguard.cli.main import cli
from hostguard.domain.models import Unavailable
from hostguard.infrastructure.factory import InfrastructureFactory
from tests.mocks import GB, ManualClock, StubHardwareSampler

create_admission_guard = InfrastructureFactory.create_admission_guard


@pytest.fixture
def stub_sampler() -> StubHardwareSampler:
    return StubHardwareSampler()


@pytest.fixture(autouse=True)
def stub_host(stub_sampler: StubHardwareSampler):
    """Wire the CLI to a stub sampler and leave global logging alone."""

    def build_guard(config=None):
        return create_admission_guard(config, sampler=stub_sampler, clock=ManualClock(10_000))

    with (
        patch("hostguard.cli.main.setup_logging") as mock_setup_logging,
        patch(
            "hostguard.cli.main.InfrastructureFactory.create_admission_guard",
            side_effect=build_guard,
        ),
    ):
        yield mock_setup_logging


class TestCliGroup:
    """Test options shared by every command."""

    def setup_method(self):
        """Set up test fixtures."""
        self.runner = CliRunner()

    def test_help(self):
        result = self.runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "metrics" in result.output
        assert "check" in result.output
        assert "watch" in result.output

    def test_invalid_environment(self):
        result = self.runner.invoke(
            cli, ["metrics", "--no-settle"], env={"HOSTGUARD_CPU_WINDOW_MS": "soon"}
        )
        assert result.exit_code == 1
        assert "Invalid value for HOSTGUARD_CPU_WINDOW_MS" in result.output

    def test_log_level_option(self, stub_host):
        result = self.runner.invoke(cli, ["--log-level", "DEBUG", "metrics", "--no-settle"])
        assert result.exit_code == 0
        stub_host.assert_called_once_with("DEBUG")

    def test_log_level_from_environment(self, stub_host):
        result = self.runner.invoke(
            cli, ["metrics", "--no-settle"], env={"HOSTGUARD_LOG_LEVEL": "warning"}
        )
        assert result.exit_code == 0
        stub_host.assert_called_once_with("WARNING")


class TestMetricsCommand:
    """Test the metrics command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_table_output(self):
        result = self.runner.invoke(cli, ["metrics", "--no-settle"])
        assert result.exit_code == 0
        assert "Host Resources" in result.output
        assert "50.00%" in result.output
        assert "100.00 GB" in result.output

    def test_json_output(self):
        result = self.runner.invoke(cli, ["metrics", "--no-settle", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == {
            "memory_usage_percent": 50.0,
            "disk_available_gb": 100.0,
            "load_average": 1.0,
            "cpu_usage_percent": 50.0,
            "available_memory_gb": 8.0,
        }

    def test_unavailable_metric_rendered(self, stub_sampler: StubHardwareSampler):
        stub_sampler.free_disk = Unavailable(metric="free_disk", reason="No such file")
        result = self.runner.invoke(cli, ["metrics", "--no-settle"])
        assert result.exit_code == 0
        assert "unavailable" in result.output

    def test_disk_path_option(self, stub_sampler: StubHardwareSampler):
        result = self.runner.invoke(cli, ["metrics", "--no-settle", "-d", "/mnt/data"])
        assert result.exit_code == 0
        assert stub_sampler.disk_paths == ["/mnt/data"]

    def test_settle_waits_one_window(self):
        with patch("hostguard.cli.main.time.sleep") as mock_sleep:
            result = self.runner.invoke(
                cli, ["metrics", "--json"], env={"HOSTGUARD_CPU_WINDOW_MS": "1500"}
            )
        assert result.exit_code == 0
        mock_sleep.assert_called_once_with(1.5)


class TestCheckCommand:
    """Test the check command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_healthy_host_exits_zero(self):
        result = self.runner.invoke(cli, ["check", "--no-settle", "--max-load", "8"])
        assert result.exit_code == 0
        assert "Host can accept new work" in result.output

    def test_overloaded_host_exits_one(self, stub_sampler: StubHardwareSampler):
        stub_sampler.platform_load = 20.0
        result = self.runner.invoke(cli, ["check", "--no-settle", "--max-load", "8"])
        assert result.exit_code == 1
        assert "OVERLOADED" in result.output

    def test_overload_is_logged(
        self, stub_sampler: StubHardwareSampler, caplog: pytest.LogCaptureFixture
    ):
        stub_sampler.platform_load = 20.0
        with caplog.at_level(logging.WARNING, logger="hostguard.application.admission_guard"):
            result = self.runner.invoke(cli, ["check", "--no-settle", "--max-load", "8"])
        assert result.exit_code == 1
        assert "Current cpu load average 20.0 is too high" in caplog.text

    def test_settle_primes_window_before_check(self, stub_sampler: StubHardwareSampler):
        with patch("hostguard.cli.main.time.sleep") as mock_sleep:
            result = self.runner.invoke(cli, ["check", "--json"])
        assert result.exit_code == 0
        mock_sleep.assert_called_once_with(0.95)
        # One priming read, the check itself is inside the same window
        assert stub_sampler.tick_reads == 1

    def test_json_output(self, stub_sampler: StubHardwareSampler):
        # Arrange
        stub_sampler.available_memory = 2 * GB

        # Act
        result = self.runner.invoke(
            cli,
            ["check", "--no-settle", "--json", "--max-load", "8", "--reserved-memory", "4"],
        )

        # Assert
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["verdict"]["overloaded"] is True
        assert data["verdict"]["reason"] == "memory_below_reserve"
        assert data["metrics"]["available_memory_gb"] == 2.0
        assert data["thresholds"] == {"max_cpu_load_average": 8.0, "min_reserved_memory_gb": 4.0}

    def test_thresholds_default_to_configuration(self, stub_sampler: StubHardwareSampler):
        stub_sampler.platform_load = 3.0
        result = self.runner.invoke(
            cli,
            ["check", "--no-settle", "--json"],
            env={"HOSTGUARD_MAX_CPU_LOAD_AVERAGE": "2.5", "HOSTGUARD_MIN_RESERVED_MEMORY_GB": "1"},
        )
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["thresholds"]["max_cpu_load_average"] == 2.5
        assert data["verdict"]["reason"] == "cpu_load_exceeded"

    @pytest.mark.parametrize("args", [["--max-load", "0"], ["--reserved-memory", "-1"]])
    def test_invalid_thresholds(self, args: list[str]):
        result = self.runner.invoke(cli, ["check", "--no-settle", *args])
        assert result.exit_code == 2
        assert "Invalid overload thresholds" in result.output


class TestWatchCommand:
    """Test the watch command."""

    def setup_method(self):
        self.runner = CliRunner()

    def test_runs_requested_number_of_checks(self):
        result = self.runner.invoke(cli, ["watch", "--interval", "0.01", "--count", "3"])

        assert result.exit_code == 0
        assert "check 1: ok" in result.output
        assert "check 3: ok" in result.output
        assert "check 4" not in result.output
        # The listener only prints on state changes
        assert result.output.count("Host can accept new work") == 1

    def test_reports_overload(self, stub_sampler: StubHardwareSampler):
        stub_sampler.platform_load = 50.0
        result = self.runner.invoke(cli, ["watch", "-i", "0.01", "-n", "1"])
        assert result.exit_code == 0
        assert "check 1: overloaded" in result.output
        assert "OVERLOADED" in result.output

    @pytest.mark.parametrize("args", [["--interval", "0"], ["--count", "0"]])
    def test_rejects_invalid_options(self, args: list[str]):
        result = self.runner.invoke(cli, ["watch", *args])
        assert result.exit_code == 2
