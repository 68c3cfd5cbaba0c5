"""
Version command - displays cputemp version information
"""

import platform

import click

from cputemp.version import CPUTEMP_VERSION


def run_version(verbose: bool = False) -> None:
    """
    Display cputemp version information.

    Args:
        verbose: If True, also show the release date and the platform
    """
    if verbose:
        click.echo(f"cputemp version {CPUTEMP_VERSION.full_version()}")
        click.echo(f"  Platform: {platform.system()} {platform.release()}")
        click.echo(f"  Python:   {platform.python_version()}")
    else:
        click.echo(f"cputemp {CPUTEMP_VERSION}")
