"""Command line front-end for hostguard."""

from __future__ import annotations

import asyncio
import json
import time

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..application.admission_guard import AdmissionGuard
from ..domain.exceptions import ConfigurationError, InvalidConfigurationError
from ..domain.models import UNAVAILABLE_METRIC, OverloadVerdict, ResourceMetrics
from ..domain.services import OverloadPolicy
from ..infrastructure.config import HostGuardConfig
from ..infrastructure.configuration_adapter import EnvironmentConfigurationAdapter
from ..infrastructure.factory import InfrastructureFactory
from ..infrastructure.logging_config import setup_logging
from ..infrastructure.watch_task import OverloadWatchTask

METRIC_LABELS = {
    "memory_usage_percent": ("Memory usage", "%"),
    "available_memory_gb": ("Available memory", " GB"),
    "disk_available_gb": ("Disk available", " GB"),
    "load_average": ("Load average", ""),
    "cpu_usage_percent": ("CPU usage", "%"),
}


def _format_value(value: float, unit: str) -> str:
    if value == UNAVAILABLE_METRIC:
        return "[dim]unavailable[/dim]"
    return f"{value:.2f}{unit}"


def metrics_table(metrics: ResourceMetrics) -> Table:
    """Render metrics as a two-column table."""
    table = Table(title="Host Resources", box=box.ROUNDED)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    for field, (label, unit) in METRIC_LABELS.items():
        table.add_row(label, _format_value(getattr(metrics, field), unit))
    return table


def verdict_panel(verdict: OverloadVerdict) -> Panel:
    if verdict.overloaded:
        return Panel(verdict.message, title="OVERLOADED", style="bold red")
    return Panel("Host can accept new work", title="OK", style="bold green")


def _settle(guard: AdmissionGuard, config: HostGuardConfig) -> None:
    """Prime the CPU window so the next sample is not the since-boot average."""
    guard.sample()
    time.sleep(config.cpu_window_ms / 1000)


@click.group()
@click.option("--log-level", default=None, help="Override HOSTGUARD_LOG_LEVEL")
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Sample host resources and decide whether the host is overloaded."""
    try:
        config = EnvironmentConfigurationAdapter().load_configuration()
    except ConfigurationError as e:
        raise click.ClickException(e.message) from e

    setup_logging(log_level or config.log_level)
    ctx.obj = {"config": config, "console": Console()}


@cli.command()
@click.option("--disk-path", "-d", default=None, help="Path on the volume to measure")
@click.option("--settle/--no-settle", default=True, help="Wait one CPU window before sampling")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.pass_obj
def metrics(obj: dict, disk_path: str | None, settle: bool, as_json: bool) -> None:
    """Print one sample of host resource metrics."""
    config: HostGuardConfig = obj["config"]
    if disk_path:
        config = config.model_copy(update={"disk_path": disk_path})

    guard = InfrastructureFactory.create_admission_guard(config)
    if settle:
        _settle(guard, config)
    sample = guard.sample()

    if as_json:
        click.echo(sample.model_dump_json(indent=2))
    else:
        obj["console"].print(metrics_table(sample))


@cli.command()
@click.option("--max-load", type=float, default=None, help="Maximum tolerated load average")
@click.option("--reserved-memory", type=float, default=None, help="Memory in GB to keep free")
@click.option("--settle/--no-settle", default=True, help="Wait one CPU window before sampling")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def check(
    ctx: click.Context,
    max_load: float | None,
    reserved_memory: float | None,
    settle: bool,
    as_json: bool,
) -> None:
    """Exit with status 1 when the host is overloaded."""
    config: HostGuardConfig = ctx.obj["config"]
    try:
        thresholds = OverloadPolicy.thresholds(
            max_load if max_load is not None else config.max_cpu_load_average,
            reserved_memory if reserved_memory is not None else config.min_reserved_memory_gb,
        )
    except InvalidConfigurationError as e:
        raise click.BadParameter(e.message) from e

    guard = InfrastructureFactory.create_admission_guard(config)
    if settle:
        _settle(guard, config)
    sample, verdict = guard.assess(thresholds)

    if as_json:
        payload = {
            "verdict": verdict.model_dump(mode="json"),
            "metrics": sample.model_dump(mode="json"),
            "thresholds": thresholds.model_dump(mode="json"),
        }
        click.echo(json.dumps(payload, indent=2))
    else:
        console: Console = ctx.obj["console"]
        console.print(metrics_table(sample))
        console.print(verdict_panel(verdict))

    ctx.exit(1 if verdict.overloaded else 0)


@cli.command()
@click.option(
    "--interval",
    "-i",
    type=click.FloatRange(min=0, min_open=True),
    default=None,
    help="Seconds between checks",
)
@click.option(
    "--count", "-n", type=click.IntRange(min=1), default=None, help="Stop after this many checks"
)
@click.pass_obj
def watch(obj: dict, interval: float | None, count: int | None) -> None:
    """Re-check the host periodically and report state changes."""
    config: HostGuardConfig = obj["config"]
    console: Console = obj["console"]

    if interval is None:
        interval = config.watch_interval_seconds

    guard = InfrastructureFactory.create_admission_guard(config)
    task = OverloadWatchTask(guard, interval=interval)
    task.add_listener(lambda verdict: console.print(verdict_panel(verdict)))

    try:
        asyncio.run(_watch(task, count, console))
    except KeyboardInterrupt:
        console.print("[dim]Stopped[/dim]")


async def _watch(task: OverloadWatchTask, count: int | None, console: Console) -> None:
    checks = 0
    while count is None or checks < count:
        verdict = await task.run_once()
        checks += 1
        status = "[red]overloaded[/red]" if verdict.overloaded else "[green]ok[/green]"
        console.print(f"check {checks}: {status}")
        if count is None or checks < count:
            await asyncio.sleep(task.interval)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
