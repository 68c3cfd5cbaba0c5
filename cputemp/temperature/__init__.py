"""CPU temperature acquisition.

Provides platform-specific temperature readers behind one abstract base
class and a factory. Supports Linux (lm-sensors) and Windows
(OpenHardwareMonitor).

Example:
    >>> from cputemp.temperature import get_cpu_temperature
    >>> stats = get_cpu_temperature()
    >>> print(stats.core_count, stats.max, stats.min, stats.avg)
"""

from cputemp.temperature.base import TemperatureReader
from cputemp.temperature.errors import (
    NoDataError,
    TemperatureError,
    TemperatureFetchError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolStartupTimeoutError,
    UnsupportedPlatformError,
)
from cputemp.temperature.factory import (
    TemperatureReaderFactory,
    get_cpu_temperature,
    resolve,
)
from cputemp.temperature.stats import aggregate

__all__ = [
    "NoDataError",
    "TemperatureError",
    "TemperatureFetchError",
    "TemperatureReader",
    "TemperatureReaderFactory",
    "ToolExecutionError",
    "ToolNotFoundError",
    "ToolStartupTimeoutError",
    "UnsupportedPlatformError",
    "aggregate",
    "get_cpu_temperature",
    "resolve",
]
