"""Prometheus exporter for aggregate CPU core temperatures."""

from __future__ import annotations

import threading
import time

from prometheus_client import CollectorRegistry, Gauge, start_http_server

from cputemp.models.temperature_models import AggregateStats
from cputemp.temperature.base import TemperatureReader
from cputemp.temperature.errors import TemperatureError
from cputemp.temperature.factory import get_cpu_temperature, resolve
from cputemp.utils.logger import Logger

DEFAULT_INTERVAL_SECONDS = 10.0


class MetricsPublisher:
    """Daemon that refreshes the CPU temperature gauges at fixed intervals.

    The four gauges live in their own registry, which is what the HTTP
    server exposes. Each refresh overwrites all of them.
    """

    def __init__(
        self,
        reader: TemperatureReader,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        registry: CollectorRegistry | None = None,
        exit_on_error: bool = True,
    ):
        """Create the publisher and register its gauges.

        Args:
            reader: Temperature reader polled on every cycle.
            interval_seconds: Refresh interval in seconds. Must be positive.
            registry: Registry to register the gauges in. A fresh one is
                created when None.
            exit_on_error: Stop the loop on the first failed refresh. When
                False, failures are logged and the gauges keep their last
                values.
        """
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be greater than zero")

        self.reader = reader
        self.interval_seconds = interval_seconds
        self.exit_on_error = exit_on_error
        self.registry = registry if registry is not None else CollectorRegistry()

        self.core_count = Gauge(
            "cpu_core_count", "Number of CPU cores", registry=self.registry
        )
        self.temperature_max = Gauge(
            "cpu_core_temperature_max",
            "Maximum temperature of all CPU cores",
            registry=self.registry,
        )
        self.temperature_min = Gauge(
            "cpu_core_temperature_min",
            "Minimum temperature of all CPU cores",
            registry=self.registry,
        )
        self.temperature_avg = Gauge(
            "cpu_core_temperature_avg",
            "Average temperature of all CPU cores",
            registry=self.registry,
        )

        self._stop_event = threading.Event()
        self._thread = threading.Thread(target=self._run, daemon=True)
        self._thread_started = False
        self._error: TemperatureError | None = None
        self._log = Logger.get("exporter")

    def refresh(self) -> AggregateStats:
        """Fetch temperatures once and overwrite the gauges.

        Raises
        ------
            TemperatureFetchError: If the reader failed. Gauges are untouched.
        """
        stats = get_cpu_temperature(self.reader)

        self.core_count.set(stats.core_count)
        self.temperature_max.set(stats.max)
        self.temperature_min.set(stats.min)
        self.temperature_avg.set(stats.avg)
        self._log.debug(
            f"Collected CPU metrics: cores={stats.core_count}, "
            f"max={stats.max:.2f}, min={stats.min:.2f}, avg={stats.avg:.2f}"
        )
        return stats

    def start(self) -> None:
        """Start the background refresh thread."""
        if self._thread_started:
            return
        self._thread_started = True
        self._thread.start()

    def stop(self) -> None:
        """Stop the background refresh thread."""
        if not self._thread_started:
            return
        self._stop_event.set()
        self._thread.join()

    def is_running(self) -> bool:
        """Return True while the refresh thread is alive."""
        return self._thread.is_alive()

    def join(self, timeout: float | None = None) -> None:
        """Wait for the refresh thread to finish."""
        self._thread.join(timeout)

    @property
    def error(self) -> TemperatureError | None:
        """Error that stopped the loop, if any."""
        return self._error

    def _run(self) -> None:
        while not self._stop_event.is_set():
            start = time.monotonic()
            try:
                self.refresh()
            except TemperatureError as e:
                if self.exit_on_error:
                    self._log.error(f"Error collecting metrics: {e}")
                    self._error = e
                    return
                self._log.warning(f"Skipping refresh, keeping last values: {e}")

            remaining = self.interval_seconds - (time.monotonic() - start)
            if remaining > 0:
                self._stop_event.wait(remaining)


def run_exporter(
    port: int,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    exit_on_error: bool = True,
    reader: TemperatureReader | None = None,
    addr: str = "0.0.0.0",
) -> None:
    """Serve /metrics and refresh the gauges until one of them fails.

    Args:
        port: TCP port of the metrics endpoint.
        interval_seconds: Refresh interval in seconds.
        exit_on_error: Treat any failed refresh as fatal.
        reader: Temperature reader; resolved for the running system if None.
        addr: Address the metrics endpoint binds to.

    Raises
    ------
        TemperatureError: If the platform is unsupported, the OS tool is not
            usable, or a refresh failed while exit_on_error is set.
        OSError: If the metrics port cannot be bound.
        RuntimeError: If the HTTP server or the refresh loop died on its own.
    """
    Logger.ensure_configured()
    log = Logger.get("exporter")

    if reader is None:
        reader = resolve()
    reader.prepare()

    publisher = MetricsPublisher(
        reader, interval_seconds=interval_seconds, exit_on_error=exit_on_error
    )

    server, server_thread = start_http_server(
        port, addr=addr, registry=publisher.registry
    )
    log.info(f"Starting HTTP server on {addr}:{port}")

    publisher.start()
    interrupted = False
    try:
        while publisher.is_running() and server_thread.is_alive():
            publisher.join(timeout=1.0)
    except KeyboardInterrupt:
        interrupted = True
        log.info("Stopping exporter...")
    finally:
        server_alive = server_thread.is_alive()
        loop_alive = publisher.is_running()
        publisher.stop()
        if server_alive:
            server.shutdown()

    if publisher.error is not None:
        raise publisher.error
    if not interrupted and not server_alive:
        raise RuntimeError("metrics HTTP server stopped unexpectedly")
    if not interrupted and not loop_alive:
        raise RuntimeError("temperature refresh loop stopped unexpectedly")
