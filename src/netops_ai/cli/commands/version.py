"""Version information command"""

import platform
import sys
from importlib.metadata import PackageNotFoundError, version as dist_version

import click

from ... import __version__


DEPENDENCIES = ["aiohttp", "click", "python-dateutil", "python-dotenv"]


@click.command()
def version():
    """Show NetOps AI Core version and system information"""
    click.echo("NETOPS AI CORE")
    click.echo("=" * 50)

    click.echo(f"\nVersion Information:")
    click.echo(f"   NetOps AI Core Version: {__version__}")

    click.echo(f"\nPipeline:")
    click.echo(f"   event -> relevant CVEs -> prompt -> watsonx.ai -> verdict")

    click.echo(f"\nSystem Information:")
    click.echo(f"   Python Version: {sys.version.split()[0]}")
    click.echo(f"   Platform: {platform.platform()}")

    click.echo(f"\nDependencies:")
    for dist in DEPENDENCIES:
        try:
            click.echo(f"   {dist}: {dist_version(dist)}")
        except PackageNotFoundError:
            click.echo(f"   {dist}: missing")
