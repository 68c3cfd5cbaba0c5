"""Centralized logging for cputemp.

Explicit logging that has to be configured once before use.

Usage:
    from cputemp.utils.logger import Logger

    # Configure once at startup (required before any logging)
    Logger.configure(level="INFO", timestamps=True)

    # Get a logger anywhere in the codebase
    log = Logger.get("exporter")
    log.info("Serving /metrics on :9100")
"""

import logging
import sys
from enum import Enum
from pathlib import Path
from typing import TextIO


class LogLevel(Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_logging_level(self) -> int:
        """Convert to Python logging level."""
        level: int = getattr(logging, self.value)
        return level


class LoggerNotConfiguredError(Exception):
    """Raised when trying to use Logger before calling Logger.configure()."""

    def __init__(self) -> None:
        super().__init__(
            "Logger not configured. Call Logger.configure() at application startup."
        )


class Logger:
    """Centralized logging for cputemp.

    Must be configured once before use. Asking for a logger before
    configuration raises LoggerNotConfiguredError.

    Example:
        >>> Logger.configure(level="INFO", output="stderr")
        >>> Logger.configure(level="DEBUG", output="exporter.log")
        >>> log = Logger.get("temperature.linux")
        >>> log.debug("Running sensors...")
    """

    _configured: bool = False
    _root_name: str = "cputemp"

    @classmethod
    def configure(
        cls,
        level: str | LogLevel = "INFO",
        output: str | Path | TextIO | None = None,
        timestamps: bool = True,
        include_location: bool = False,
    ) -> None:
        """Configure the logger. Must be called before any logging.

        Args:
            level: Log level - "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"
                or a LogLevel enum value.
            output: Where to send logs:
                - None: stderr (default, stdout is left to command output)
                - "stderr": sys.stderr
                - "stdout": sys.stdout
                - str/Path: File path
                - TextIO: Any file-like object
            timestamps: Include timestamps in messages (default True).
            include_location: Include [filename:lineno] (default False).
        """
        if isinstance(level, str):
            level = LogLevel(level.upper())

        logger = logging.getLogger(cls._root_name)
        logger.setLevel(level.to_logging_level())

        for existing_handler in logger.handlers[:]:
            logger.removeHandler(existing_handler)
            existing_handler.close()

        new_handler: logging.Handler
        if output is None or output == "stderr":
            new_handler = logging.StreamHandler(sys.stderr)
        elif output == "stdout":
            new_handler = logging.StreamHandler(sys.stdout)
        elif isinstance(output, str | Path):
            new_handler = logging.FileHandler(str(output))
        elif hasattr(output, "write"):
            new_handler = logging.StreamHandler(output)
        else:
            raise ValueError(f"Invalid output: {type(output)}")

        new_handler.setLevel(level.to_logging_level())

        parts = []
        if timestamps:
            parts.append("%(asctime)s")
        parts.append("%(levelname)s")
        parts.append("[%(name)s]")
        if include_location:
            parts.append("[%(filename)s:%(lineno)d]")
        parts.append("%(message)s")

        new_handler.setFormatter(logging.Formatter(" ".join(parts)))
        logger.addHandler(new_handler)
        logger.propagate = False

        cls._configured = True

    @classmethod
    def get(cls, name: str | None = None) -> logging.Logger:
        """Get a logger instance.

        Args:
            name: Logger name (appended to "cputemp."). If None, returns the
                root cputemp logger.

        Returns:
            Logger instance.

        Raises:
            LoggerNotConfiguredError: If configure() hasn't been called.
        """
        if not cls._configured:
            raise LoggerNotConfiguredError()

        if name:
            return logging.getLogger(f"{cls._root_name}.{name}")
        return logging.getLogger(cls._root_name)

    @classmethod
    def set_level(cls, level: str | LogLevel) -> None:
        """Change log level without reconfiguring.

        Raises:
            LoggerNotConfiguredError: If configure() hasn't been called.
        """
        if not cls._configured:
            raise LoggerNotConfiguredError()

        if isinstance(level, str):
            level = LogLevel(level.upper())

        logger = logging.getLogger(cls._root_name)
        logger.setLevel(level.to_logging_level())
        for handler in logger.handlers:
            handler.setLevel(level.to_logging_level())

    @classmethod
    def is_configured(cls) -> bool:
        """Check if logger has been configured."""
        return cls._configured

    @classmethod
    def ensure_configured(cls) -> None:
        """Configure with defaults unless configure() already ran.

        Library entry points call this so they can be used outside the CLI.
        """
        if not cls._configured:
            cls.configure(level="INFO", timestamps=True)
