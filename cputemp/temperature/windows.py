"""Windows CPU temperature reader backed by OpenHardwareMonitor.

Windows has no stock command that reports per-core temperatures, so the
exporter ships OpenHardwareMonitor next to itself:

    tools/OpenHardwareMonitor/OpenHardwareMonitor.exe

With its remote web server enabled, OpenHardwareMonitor serves the whole
sensor tree as JSON on ``http://127.0.0.1:8085/data.json``. The reader
launches the helper once, waits for that endpoint to answer, then reads the
``CPU Core #N`` children of every ``Temperatures`` group on each poll.
"""

from __future__ import annotations

import subprocess
import sys
import threading
import time
from collections.abc import Iterator
from pathlib import Path

import psutil
import requests
from pydantic import ValidationError

from cputemp.models.temperature_models import AggregateStats, SensorNode
from cputemp.temperature.base import TemperatureReader
from cputemp.temperature.errors import (
    ToolExecutionError,
    ToolNotFoundError,
    ToolStartupTimeoutError,
)
from cputemp.temperature.stats import aggregate
from cputemp.utils.env import get_env
from cputemp.utils.logger import Logger

HELPER_NAME = "OpenHardwareMonitor.exe"
HELPER_RELATIVE_PATH = Path("tools") / "OpenHardwareMonitor" / HELPER_NAME
DEFAULT_DATA_URL = "http://127.0.0.1:8085/data.json"

TEMPERATURES_GROUP = "Temperatures"
CORE_SENSOR_PREFIX = "CPU Core #"
CELSIUS_SUFFIX = " °C"

STARTUP_ATTEMPTS = 10
STARTUP_TIMEOUT_SECONDS = 1.0
STARTUP_RETRY_DELAY_SECONDS = 1.0


def helper_candidates() -> list[Path]:
    """Return the locations searched for the OpenHardwareMonitor executable.

    The directory of the running program comes first, then the current
    working directory. CPUTEMP_OHM_PATH, when set, replaces both.
    """
    override = get_env("CPUTEMP_OHM_PATH")
    if override:
        return [Path(override)]

    program_dir = Path(sys.argv[0]).resolve().parent
    return [program_dir / HELPER_RELATIVE_PATH, Path.cwd() / HELPER_RELATIVE_PATH]


def find_helper(candidates: list[Path] | None = None) -> Path:
    """Locate the OpenHardwareMonitor executable.

    Raises
    ------
        ToolNotFoundError: If none of the candidates is a file.
    """
    candidates = candidates if candidates is not None else helper_candidates()
    for path in candidates:
        if path.is_file():
            return path
    raise ToolNotFoundError(HELPER_NAME, [str(p) for p in candidates])


def iter_core_temperatures(node: SensorNode) -> Iterator[float]:
    """Yield every CPU core temperature in a sensor tree, depth first.

    A reading is taken from each direct child of a ``Temperatures`` group
    whose label starts with ``CPU Core #``. Package, GPU and disk sensors
    are skipped, as are values that do not parse.
    """
    if node.text == TEMPERATURES_GROUP:
        for child in node.children:
            if not child.text.startswith(CORE_SENSOR_PREFIX):
                continue
            raw = child.value.removesuffix(CELSIUS_SUFFIX)
            try:
                yield float(raw)
            except ValueError:
                continue

    for child in node.children:
        yield from iter_core_temperatures(child)


class OpenHardwareMonitorReader(TemperatureReader):
    """CPU temperature reader for Windows systems."""

    def __init__(
        self,
        url: str | None = None,
        helper_path: Path | None = None,
        startup_attempts: int = STARTUP_ATTEMPTS,
        startup_timeout: float = STARTUP_TIMEOUT_SECONDS,
        retry_delay: float = STARTUP_RETRY_DELAY_SECONDS,
        request_timeout: float = 5.0,
    ) -> None:
        """Initialize the reader.

        Args:
            url: JSON endpoint of the helper. Defaults to CPUTEMP_OHM_URL or
                http://127.0.0.1:8085/data.json.
            helper_path: Explicit helper executable; searched for when None.
            startup_attempts: Requests made while waiting for the helper.
            startup_timeout: Timeout of each startup request in seconds.
            retry_delay: Pause between startup requests in seconds.
            request_timeout: Timeout of the per-poll request in seconds.
        """
        self.url = url or get_env("CPUTEMP_OHM_URL", default=DEFAULT_DATA_URL)
        self._helper_path = helper_path
        self._startup_attempts = startup_attempts
        self._startup_timeout = startup_timeout
        self._retry_delay = retry_delay
        self._request_timeout = request_timeout

        self._ready = False
        self._process: subprocess.Popen | None = None
        self._watcher: threading.Thread | None = None
        self._helper_error: str | None = None
        self._lock = threading.Lock()
        self._log = Logger.get("temperature.windows")

    @property
    def tool_name(self) -> str:
        """Name of the helper executable."""
        return HELPER_NAME

    def prepare(self) -> None:
        """Locate and launch the helper, then wait for its endpoint.

        Raises
        ------
            ToolNotFoundError: If the helper executable is missing.
            ToolStartupTimeoutError: If the endpoint never answered 200.
        """
        if self._ready:
            return

        helper = self._helper_path or find_helper()
        self._log.debug(f"Found {HELPER_NAME} at {helper}")

        if self._helper_running():
            self._log.info(f"{HELPER_NAME} already running, reusing it")
        else:
            self._launch_helper(helper)

        self.wait_until_ready()
        self._ready = True

    def fetch(self) -> AggregateStats:
        """Read the sensor tree once and aggregate the core temperatures.

        Raises
        ------
            ToolExecutionError: If the helper exited with an error, or the
                endpoint failed or returned something that is not a tree.
            NoDataError: If the tree has no CPU core temperature.
        """
        self.prepare()
        with self._lock:
            if self._helper_error is not None:
                raise ToolExecutionError(HELPER_NAME, self._helper_error)

        root = self._read_tree()
        temps = list(iter_core_temperatures(root))
        self._log.debug(f"Parsed {len(temps)} core temperatures: {temps}")
        return aggregate(temps, source=HELPER_NAME)

    def wait_until_ready(self) -> None:
        """Poll the endpoint until it answers 200 or the attempts run out.

        Raises
        ------
            ToolStartupTimeoutError: After startup_attempts failed requests.
        """
        self._log.info(f"Waiting for {HELPER_NAME} at {self.url}")
        for attempt in range(1, self._startup_attempts + 1):
            try:
                response = requests.get(self.url, timeout=self._startup_timeout)
            except requests.Timeout:
                self._log.info(
                    f"Attempt {attempt}: request timed out after "
                    f"{self._startup_timeout}s"
                )
            except requests.RequestException as e:
                self._log.info(f"Attempt {attempt}: request failed: {e}")
            else:
                if response.status_code == 200:
                    self._log.info(f"Attempt {attempt}: {HELPER_NAME} is ready")
                    return
                self._log.info(
                    f"Attempt {attempt}: request failed with status "
                    f"{response.status_code}"
                )

            if attempt < self._startup_attempts:
                time.sleep(self._retry_delay)

        raise ToolStartupTimeoutError(self.url, self._startup_attempts)

    def _read_tree(self) -> SensorNode:
        try:
            response = requests.get(self.url, timeout=self._request_timeout)
            response.raise_for_status()
            return SensorNode.model_validate(response.json())
        except requests.RequestException as e:
            raise ToolExecutionError(HELPER_NAME, f"request failed: {e}") from e
        except (ValueError, ValidationError, RecursionError) as e:
            raise ToolExecutionError(HELPER_NAME, f"invalid sensor tree: {e}") from e

    def _helper_running(self) -> bool:
        for proc in psutil.process_iter(["name"]):
            if (proc.info.get("name") or "").lower() == HELPER_NAME.lower():
                return True
        return False

    def _launch_helper(self, helper: Path) -> None:
        self._log.info(f"Starting {helper}")
        try:
            self._process = subprocess.Popen(
                [str(helper)],
                cwd=str(helper.parent),
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            raise ToolExecutionError(HELPER_NAME, str(e)) from e

        self._watcher = threading.Thread(target=self._watch_helper, daemon=True)
        self._watcher.start()

    def _watch_helper(self) -> None:
        """Record a failed helper exit so the next fetch reports it."""
        assert self._process is not None
        returncode = self._process.wait()
        if returncode == 0:
            self._log.info(f"{HELPER_NAME} exited")
            return
        self._log.error(f"{HELPER_NAME} exited with status {returncode}")
        with self._lock:
            self._helper_error = f"exited with status {returncode}"
