"""Tests for the cputemp version information."""

from datetime import date

from cputemp.version.cputemp_version import Version


def test_version_methods():
    """Test Version class methods."""
    v = Version(major=1, minor=2, patch=3, released=date(2023, 1, 1))

    assert str(v) == "1.2.3"
    assert v.semver() == (1, 2, 3)
    assert v.full_version() == "1.2.3 (released 2023-01-01)"


def test_cputemp_version_instance():
    """Test the global CPUTEMP_VERSION instance."""
    import cputemp
    from cputemp.version import CPUTEMP_VERSION

    assert isinstance(CPUTEMP_VERSION, Version)
    assert cputemp.__version__ == str(CPUTEMP_VERSION)
