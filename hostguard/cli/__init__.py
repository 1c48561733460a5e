"""CLI tools for hostguard."""

from .main import check, cli, metrics, watch

__all__ = ["check", "cli", "metrics", "watch"]
