"""Data models for cputemp."""

from cputemp.models.dirsize_models import DirSizeEntry
from cputemp.models.temperature_models import (
    AggregateStats,
    SensorNode,
    TemperatureSample,
)

__all__ = [
    "AggregateStats",
    "DirSizeEntry",
    "SensorNode",
    "TemperatureSample",
]
