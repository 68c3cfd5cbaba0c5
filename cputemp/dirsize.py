"""Directory size helpers behind the du command."""

from __future__ import annotations

import os
from pathlib import Path

from cputemp.models.dirsize_models import DirSizeEntry

# Windows shortcuts and symlink placeholders are not followed
SKIPPED_EXTENSIONS = (".lnk", ".symlink")

_UNITS = (
    ("TB", 1 << 40),
    ("GB", 1 << 30),
    ("MB", 1 << 20),
    ("KB", 1 << 10),
)


def get_size(path: str | Path) -> int:
    """Return the size of a file, or the total size of a directory tree.

    Symbolic links are not followed and count as zero, as do paths ending in
    ``.lnk`` or ``.symlink``.

    Args:
        path: File or directory to measure.

    Returns
    -------
        Size in bytes.

    Raises
    ------
        OSError: If path or anything below it cannot be read.
    """
    path = Path(path)
    if path.suffix.lower() in SKIPPED_EXTENSIONS or path.is_symlink():
        return 0

    if not path.is_dir():
        return path.stat().st_size

    total = 0
    with os.scandir(path) as entries:
        for entry in entries:
            if entry.is_symlink():
                continue
            if entry.is_dir(follow_symlinks=False):
                total += get_size(entry.path)
            elif Path(entry.name).suffix.lower() not in SKIPPED_EXTENSIONS:
                total += entry.stat(follow_symlinks=False).st_size
    return total


def list_children(path: str | Path) -> list[str]:
    """Return the names of the entries directly inside a directory, sorted.

    Raises
    ------
        OSError: If path is not a readable directory.
    """
    with os.scandir(path) as entries:
        return sorted(entry.name for entry in entries)


def measure(path: str | Path) -> DirSizeEntry:
    """Measure one path."""
    return DirSizeEntry(path=str(path), size_bytes=get_size(path))


def measure_children(path: str | Path) -> list[DirSizeEntry]:
    """Measure every entry directly inside a directory."""
    return [measure(Path(path) / name) for name in list_children(path)]


def format_size(size: int) -> str:
    """Format a byte count with binary units.

    Examples:
        >>> format_size(512)
        '512 bytes'
        >>> format_size(1536)
        '1.50 KB'
    """
    for unit, factor in _UNITS:
        if size >= factor:
            return f"{size / factor:.2f} {unit}"
    return f"{size} bytes"
