"""Base class for CPU temperature readers - implemented per platform."""

from abc import ABC, abstractmethod

from cputemp.models.temperature_models import AggregateStats


class TemperatureReader(ABC):
    """Abstract base class for CPU temperature readers."""

    @property
    @abstractmethod
    def tool_name(self) -> str:
        """Name of the OS collaborator the reader depends on."""
        pass

    @abstractmethod
    def prepare(self) -> None:
        """
        Check that the OS collaborator is usable and start it if needed.

        Called once at startup. Implementations must be idempotent.

        Raises:
            TemperatureError: If the collaborator is missing or not ready
        """
        pass

    @abstractmethod
    def fetch(self) -> AggregateStats:
        """
        Read all per-core temperatures once and aggregate them.

        Returns:
            AggregateStats for the current poll

        Raises:
            TemperatureError: If no reading could be obtained
        """
        pass
