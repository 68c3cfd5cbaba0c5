"""cputemp utilities - shared helpers."""

from cputemp.utils.env import (
    EnvVarError,
    EnvVarTypeError,
    get_env,
)
from cputemp.utils.logger import (
    Logger,
    LoggerNotConfiguredError,
    LogLevel,
)

__all__ = [
    # Env
    "EnvVarError",
    "EnvVarTypeError",
    "LogLevel",
    # Logger
    "Logger",
    "LoggerNotConfiguredError",
    "get_env",
]
