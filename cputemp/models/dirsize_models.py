"""Models for the du command output."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DirSizeEntry:
    """Disk usage of a single path.

    Attributes:
        path: Path as it was given or discovered.
        size_bytes: Total size of the regular files under path, in bytes.
    """

    path: str
    size_bytes: int
