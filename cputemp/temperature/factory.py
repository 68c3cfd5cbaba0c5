"""Factory for platform-specific CPU temperature readers."""

import platform

from cputemp.models.temperature_models import AggregateStats
from cputemp.temperature.base import TemperatureReader
from cputemp.temperature.errors import (
    TemperatureError,
    TemperatureFetchError,
    UnsupportedPlatformError,
)


class TemperatureReaderFactory:
    """Factory for creating the temperature reader of a platform.

    Linux reads ``sensors`` output, Windows talks to OpenHardwareMonitor.
    """

    SUPPORTED_SYSTEMS = ("Linux", "Windows")

    @staticmethod
    def create(system: str | None = None) -> TemperatureReader:
        """Create a temperature reader.

        Args:
            system: Operating system identifier as returned by
                ``platform.system()``. Defaults to the running system.

        Returns
        -------
            TemperatureReader subclass instance

        Raises
        ------
            UnsupportedPlatformError: For any system but Linux and Windows
        """
        if system is None:
            system = platform.system()

        if system == "Linux":
            from cputemp.temperature.linux import SensorsTemperatureReader

            return SensorsTemperatureReader()
        elif system == "Windows":
            from cputemp.temperature.windows import OpenHardwareMonitorReader

            return OpenHardwareMonitorReader()
        else:
            raise UnsupportedPlatformError(system)


def resolve(system: str | None = None) -> TemperatureReader:
    """Get the temperature reader for a platform.

    Convenience wrapper around TemperatureReaderFactory.create().
    """
    return TemperatureReaderFactory.create(system)


def get_cpu_temperature(reader: TemperatureReader | None = None) -> AggregateStats:
    """Fetch aggregate CPU temperatures for this host.

    Args:
        reader: Reader to use. Resolved for the running system when None.

    Returns
    -------
        AggregateStats of the current poll

    Raises
    ------
        TemperatureFetchError: Wrapping the reader or resolution error.
    """
    if reader is None:
        try:
            reader = resolve()
        except TemperatureError as e:
            raise TemperatureFetchError(
                f"error creating CPU temperature getter: {e}"
            ) from e

    try:
        return reader.fetch()
    except TemperatureError as e:
        raise TemperatureFetchError(f"error fetching CPU temperature: {e}") from e
