"""Errors raised while acquiring CPU temperatures."""

from __future__ import annotations


class TemperatureError(Exception):
    """Base exception for temperature acquisition errors."""

    pass


class ToolNotFoundError(TemperatureError):
    """Raised when the OS tool that reports temperatures is not installed."""

    def __init__(self, tool: str, searched: list[str] | None = None) -> None:
        self.tool = tool
        self.searched = searched or []
        message = f"Required tool not found: {tool}"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(message)


class ToolExecutionError(TemperatureError):
    """Raised when the tool exists but failed to run or to answer."""

    def __init__(self, tool: str, reason: str) -> None:
        self.tool = tool
        self.reason = reason
        super().__init__(f"{tool} failed: {reason}")


class ToolStartupTimeoutError(TemperatureError):
    """Raised when a launched helper never starts answering requests."""

    def __init__(self, url: str, attempts: int) -> None:
        self.url = url
        self.attempts = attempts
        super().__init__(f"{url} did not become ready after {attempts} attempts")


class NoDataError(TemperatureError):
    """Raised when the tool ran but reported no per-core temperature."""

    def __init__(self, source: str) -> None:
        self.source = source
        super().__init__(f"No CPU core temperature found in {source} output")


class UnsupportedPlatformError(TemperatureError):
    """Raised on operating systems without a temperature reader."""

    def __init__(self, system: str) -> None:
        self.system = system
        super().__init__(f"Unsupported operating system: {system or 'unknown'}")


class TemperatureFetchError(TemperatureError):
    """Facade error adding context to a reader failure.

    The original error is available as ``__cause__``.
    """

    pass
