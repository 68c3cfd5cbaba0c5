"""cputemp - CPU temperature Prometheus exporter and host utilities."""

from cputemp.version.cputemp_version import CPUTEMP_VERSION, Version

__version__ = str(CPUTEMP_VERSION)
__version_info__ = CPUTEMP_VERSION

__all__ = [
    "CPUTEMP_VERSION",
    "Version",
    "__version__",
    "__version_info__",
]
