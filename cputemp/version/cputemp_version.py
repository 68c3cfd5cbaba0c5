from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Version:
    """
    Semantic version information for cputemp.

    Major, minor and patch numbers following semver, plus the release date.
    """
    major: int
    minor: int
    patch: int
    released: date

    def __str__(self) -> str:
        """Return the semantic version string (e.g., '0.3.0')."""
        return f"{self.major}.{self.minor}.{self.patch}"

    def full_version(self) -> str:
        """Return the version with its release date."""
        return f"{self} (released {self.released.isoformat()})"

    def semver(self) -> tuple[int, int, int]:
        """Return semantic version as tuple (major, minor, patch)."""
        return (self.major, self.minor, self.patch)


CPUTEMP_VERSION = Version(major=0, minor=3, patch=0, released=date(2026, 10, 19))
