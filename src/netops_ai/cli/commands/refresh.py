"""CVE cache refresh command"""

import asyncio
import sys

import click

from ...core.errors import FeedUnavailable
from ...processing.engine import AICoreEngine


@click.command()
@click.pass_context
def refresh(ctx):
    """Refresh the CVE cache if it is older than the freshness window

    Example:
        netops-ai refresh
    """
    config = ctx.obj['config']

    async def process():
        async with AICoreEngine(config) as engine:
            await engine.store.ensure_fresh()
            return len(engine.store.snapshot()), engine.store.last_refresh

    try:
        count, last_refresh = asyncio.run(process())
    except FeedUnavailable as e:
        click.echo(f"Error: CVE feed unavailable: {e}", err=True)
        sys.exit(1)

    click.echo(f"{count} CVEs cached in {config.cve_cache_file}")
    if last_refresh:
        click.echo(f"Last refresh: {last_refresh.isoformat()}")
