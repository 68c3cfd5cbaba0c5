"""Exporter command helper that runs the Prometheus exporter."""

from __future__ import annotations

from cputemp.exporter import run_exporter
from cputemp.temperature.errors import TemperatureError
from cputemp.utils.logger import Logger


def run_exporter_command(port: int, interval: float, keep_going: bool) -> int:
    """Run the exporter until it fails or is interrupted.

    Args:
        port: TCP port of the /metrics endpoint.
        interval: Refresh interval in seconds.
        keep_going: Log failed refreshes instead of exiting.

    Returns
    -------
        Process exit status: 0 after Ctrl+C, 1 after any failure.
    """
    log = Logger.get("exporter")
    log.info(f"Exporting CPU temperatures on port {port} every {interval}s")

    try:
        run_exporter(port, interval_seconds=interval, exit_on_error=not keep_going)
    except (TemperatureError, RuntimeError) as e:
        log.error(str(e))
        return 1
    except OSError as e:
        log.error(f"Cannot serve metrics on port {port}: {e}")
        return 1

    return 0
