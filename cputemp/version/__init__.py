from cputemp.version.cputemp_version import CPUTEMP_VERSION, Version

__all__ = ["CPUTEMP_VERSION", "Version"]
