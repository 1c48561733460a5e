"""Ports layer - Interfaces the core consumes."""

from .clock import ClockPort
from .configuration import ConfigurationPort
from .hardware_sampler import HardwareSamplerPort

__all__ = [
    "ClockPort",
    "ConfigurationPort",
    "HardwareSamplerPort",
]
