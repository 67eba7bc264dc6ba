"""Cached CVE listing command"""

import asyncio
import logging

import click

from ...core.errors import FeedUnavailable
from ...processing.engine import AICoreEngine
from ...retrieval.context import render_context
from ...retrieval.matcher import find_relevant
from ..formatters.json import JSONFormatter
from ..formatters.table import TableFormatter


@click.command()
@click.option('--match', 'match_text', help='Only show CVEs relevant to this event text')
@click.option('--context', 'show_context', is_flag=True, help='Print the prompt context block instead')
@click.option('--format', type=click.Choice(['table', 'json']), default='table', help='Output format')
@click.pass_context
def cves(ctx, match_text, show_context, format):
    """Show cached CVEs, or the ones relevant to an event

    Examples:
        netops-ai cves
        netops-ai cves --match "Interface on router-01 (Cisco) down"
        netops-ai cves --match "BGP flap on edge-2" --context
    """
    config = ctx.obj['config']

    async def process():
        async with AICoreEngine(config) as engine:
            try:
                await engine.store.ensure_fresh()
            except FeedUnavailable as e:
                logging.warning(f"Using existing CVE cache: {e}")
            return engine.store.snapshot(), engine.store.last_refresh

    records, last_refresh = asyncio.run(process())

    if match_text is not None:
        records = find_relevant(records, match_text)

    if show_context:
        click.echo(render_context(records), nl=False)
    elif format == 'json':
        click.echo(JSONFormatter.format_records(records))
    else:
        click.echo(TableFormatter.format_records(records, last_refresh))
