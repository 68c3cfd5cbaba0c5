"""Shared pytest fixtures."""

from io import StringIO

import pytest

from cputemp.utils.logger import Logger


@pytest.fixture(autouse=True)
def configured_logger():
    """Configure logging into a buffer so modules can ask for loggers."""
    output = StringIO()
    Logger.configure(level="DEBUG", output=output, timestamps=False)
    return output
