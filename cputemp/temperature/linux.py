"""Linux CPU temperature reader built on lm-sensors' ``sensors`` command."""

from __future__ import annotations

import re
import shutil
import subprocess
from pathlib import Path

from cputemp.models.temperature_models import AggregateStats, TemperatureSample
from cputemp.temperature.base import TemperatureReader
from cputemp.temperature.errors import ToolExecutionError, ToolNotFoundError
from cputemp.temperature.stats import aggregate
from cputemp.utils.env import get_env
from cputemp.utils.logger import Logger

# coretemp prints one "Core N:" line per physical core
CORE_LINE_PREFIX = "Core "
CORE_TEMPERATURE_RE = re.compile(r"([+-]\d+\.\d+)°C")
FALLBACK_SENSORS_PATH = "/usr/bin/sensors"


def parse_sensors_output(output: str) -> TemperatureSample:
    """Extract per-core temperatures from ``sensors`` text output.

    Only lines starting with ``Core `` are considered, and only the first
    temperature on each of them (the current reading; ``high`` and ``crit``
    thresholds follow it).

    Args:
        output: Complete stdout of the sensors command.

    Returns
    -------
        Core temperatures in Celsius, in output order. Empty if none matched.
    """
    temps: TemperatureSample = []
    for line in output.splitlines():
        if not line.startswith(CORE_LINE_PREFIX):
            continue
        match = CORE_TEMPERATURE_RE.search(line)
        if match:
            temps.append(float(match.group(1)))
    return temps


class SensorsTemperatureReader(TemperatureReader):
    """CPU temperature reader for Linux systems.

    Runs ``sensors`` (lm-sensors) on every poll and aggregates the
    ``Core N`` readings reported by the coretemp driver.
    """

    def __init__(self, command: str | None = None, timeout: float = 5.0) -> None:
        """Initialize the reader.

        Args:
            command: Name or absolute path of the sensors executable. Defaults
                to CPUTEMP_SENSORS_COMMAND or "sensors".
            timeout: Seconds to wait for one sensors run.
        """
        self._command = command or get_env(
            "CPUTEMP_SENSORS_COMMAND", default="sensors"
        )
        self._timeout = timeout
        self._executable: str | None = None
        self._log = Logger.get("temperature.linux")

    @property
    def tool_name(self) -> str:
        """Name of the sensors executable."""
        return self._command

    def prepare(self) -> None:
        """Resolve the sensors executable.

        Raises
        ------
            ToolNotFoundError: If sensors is neither on PATH nor at
                /usr/bin/sensors.
        """
        if self._executable is not None:
            return

        path = shutil.which(self._command)
        if path is None and Path(FALLBACK_SENSORS_PATH).is_file():
            path = FALLBACK_SENSORS_PATH
        if path is None:
            searched = [self._command, FALLBACK_SENSORS_PATH]
            raise ToolNotFoundError(self._command, searched)

        self._log.debug(f"Using sensors at {path}")
        self._executable = path

    def fetch(self) -> AggregateStats:
        """Run sensors once and aggregate the per-core readings.

        Raises
        ------
            ToolNotFoundError: If sensors is not installed.
            ToolExecutionError: If sensors cannot start, times out or fails.
            NoDataError: If no ``Core`` line carried a temperature.
        """
        self.prepare()
        output = self._run_sensors()
        temps = parse_sensors_output(output)
        self._log.debug(f"Parsed {len(temps)} core temperatures: {temps}")
        return aggregate(temps, source=self._command)

    def _run_sensors(self) -> str:
        """Invoke sensors and return its stdout."""
        assert self._executable is not None
        try:
            result = subprocess.run(
                [self._executable],
                check=False,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolExecutionError(
                self._command, f"timed out after {self._timeout}s"
            ) from e
        except OSError as e:
            raise ToolExecutionError(self._command, str(e)) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            reason = f"exit status {result.returncode}"
            if stderr:
                reason += f": {stderr}"
            raise ToolExecutionError(self._command, reason)

        return result.stdout or ""
