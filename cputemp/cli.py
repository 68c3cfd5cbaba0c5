#!/usr/bin/env python3
"""cputemp CLI - Command-line interface for cputemp."""

import click

from cputemp.exporter import DEFAULT_INTERVAL_SECONDS
from cputemp.utils.env import EnvVarTypeError, get_env
from cputemp.utils.logger import Logger


def _configure_logging(debug: bool) -> None:
    if not Logger.is_configured():
        level = get_env("CPUTEMP_LOG_LEVEL", default="INFO")
        try:
            Logger.configure(level=level, timestamps=True)
        except ValueError:
            raise click.UsageError(
                f"CPUTEMP_LOG_LEVEL={level!r} is not a log level "
                "(DEBUG, INFO, WARNING, ERROR, CRITICAL)"
            ) from None
    if debug:
        Logger.set_level("DEBUG")


def _parse_port(ctx: click.Context, param: click.Parameter, value: str) -> int:
    try:
        port = int(value)
    except ValueError:
        raise click.BadParameter(f"{value!r} is not a port number") from None
    if not 0 < port < 65536:
        raise click.BadParameter(f"{port} is out of range (1-65535)")
    return port


@click.group()
def cputemp():
    """cputemp command-line tool for CPU temperature export and host utilities."""
    _configure_logging(debug=False)


@click.command()
@click.option(
    "--port",
    default="80",
    show_default=True,
    callback=_parse_port,
    help="Port of the /metrics endpoint",
)
@click.option(
    "--interval",
    type=float,
    help="Seconds between temperature refreshes (default: CPUTEMP_INTERVAL or 10)",
)
@click.option(
    "--keep-going",
    is_flag=True,
    help="Keep the last values when a refresh fails instead of exiting",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Enable debug logging",
)
def exporter(port, interval, keep_going, debug):
    r"""Export CPU core temperatures as Prometheus gauges.

    \b
    Serves cpu_core_count, cpu_core_temperature_max,
    cpu_core_temperature_min and cpu_core_temperature_avg on /metrics.
    Linux hosts need lm-sensors, Windows hosts need
    tools/OpenHardwareMonitor/OpenHardwareMonitor.exe.

    \b
    Examples:
      cputemp exporter                     # Serve on port 80
      cputemp exporter --port 9101 --debug # Custom port, verbose logs
      cputemp exporter --keep-going        # Survive failed refreshes
    """
    from cputemp.commands.exporter_cmd import run_exporter_command

    _configure_logging(debug)

    if interval is None:
        try:
            interval = get_env(
                "CPUTEMP_INTERVAL", default=DEFAULT_INTERVAL_SECONDS, as_type=float
            )
        except EnvVarTypeError as e:
            raise click.BadParameter(str(e), param_hint="CPUTEMP_INTERVAL") from None

    if interval <= 0:
        raise click.BadParameter("must be greater than zero", param_hint="--interval")

    status = run_exporter_command(port=port, interval=interval, keep_going=keep_going)
    if status:
        raise SystemExit(status)


@cputemp.command()
@click.option(
    "-s",
    "--summarize",
    is_flag=True,
    help="Show the size of each first-level entry of every DIR",
)
@click.option(
    "-H",
    "--human-readable",
    is_flag=True,
    help="Print sizes in human readable format (e.g., 1.00 KB, 234.00 MB)",
)
@click.argument("dirs", nargs=-1, type=click.Path())
@click.pass_context
def du(ctx, summarize, human_readable, dirs):
    r"""Report disk usage of directories.

    \b
    Examples:
      cputemp du /var/log           # Total size of /var/log
      cputemp du -s -H /var         # Size of every entry in /var
    """
    from cputemp.commands.du_cmd import run_du

    if not dirs:
        click.echo(ctx.get_help())
        return

    status = run_du(dirs, summarize=summarize, human_readable=human_readable)
    if status:
        raise SystemExit(status)


@cputemp.command()
@click.option("--verbose", "-v", is_flag=True, help="Show detailed version information")
def version(verbose):
    """Display cputemp version information."""
    from cputemp.commands.version_cmd import run_version

    run_version(verbose=verbose)


cputemp.add_command(exporter)


if __name__ == "__main__":
    cputemp()
