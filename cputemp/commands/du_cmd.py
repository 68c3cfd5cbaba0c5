"""du command - report disk usage of directories."""

from __future__ import annotations

import click

from cputemp.dirsize import format_size, measure, measure_children
from cputemp.models.dirsize_models import DirSizeEntry
from cputemp.utils.logger import Logger


def _format_entry(entry: DirSizeEntry, human_readable: bool) -> str:
    size = format_size(entry.size_bytes) if human_readable else str(entry.size_bytes)
    return f"{size}\t{entry.path}"


def run_du(dirs: tuple[str, ...], summarize: bool, human_readable: bool) -> int:
    """Print the size of each directory, or of each of its entries.

    Args:
        dirs: Paths to measure.
        summarize: Print one line per first-level entry of each path
            instead of one line per path.
        human_readable: Print sizes as 1.50 KB, 234.00 MB, ...

    Returns
    -------
        0 if every path was measured, 1 if any failed.
    """
    log = Logger.get("du")
    status = 0

    for path in dirs:
        try:
            entries = measure_children(path) if summarize else [measure(path)]
        except OSError as e:
            log.error(f"Error getting size of {path}: {e}")
            status = 1
            continue

        for entry in entries:
            click.echo(_format_entry(entry, human_readable))

    return status
