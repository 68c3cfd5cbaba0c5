"""Aggregate statistics over per-core temperature readings."""

from __future__ import annotations

from collections.abc import Iterable

from cputemp.models.temperature_models import AggregateStats
from cputemp.temperature.errors import NoDataError


def aggregate(readings: Iterable[float], source: str = "sensor") -> AggregateStats:
    """Reduce one poll of per-core readings to count, max, min and average.

    Args:
        readings: Per-core temperatures in Celsius.
        source: Name of the tool the readings came from, for error messages.

    Returns
    -------
        AggregateStats for the readings.

    Raises
    ------
        NoDataError: If readings is empty.
    """
    temps = list(readings)
    if not temps:
        raise NoDataError(source)

    highest = lowest = temps[0]
    total = 0.0
    for temp in temps:
        if temp > highest:
            highest = temp
        if temp < lowest:
            lowest = temp
        total += temp

    # Summation error can push the mean one ulp outside [min, max]
    avg = min(max(total / len(temps), lowest), highest)

    return AggregateStats(
        core_count=len(temps),
        max=highest,
        min=lowest,
        avg=avg,
    )
