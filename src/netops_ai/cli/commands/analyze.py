"""Single event analysis command"""

import asyncio
import logging

import click

from ...core.errors import FeedUnavailable
from ...core.models import Event
from ...processing.engine import AICoreEngine
from ..formatters.json import JSONFormatter
from ..formatters.table import TableFormatter


@click.command()
@click.option('--type', 'event_type', required=True, help='Event type label, e.g. syslog')
@click.option('--message', required=True, help='Event message text')
@click.option('--source-host', help='Host that emitted the event')
@click.option('--source-ip', help='Address of the emitting host')
@click.option('--category', help='Event category')
@click.option('--format', type=click.Choice(['json', 'table']), default='json', help='Output format')
@click.pass_context
def analyze(ctx, event_type, message, source_host, source_ip, category, format):
    """Classify one event with watsonx

    Example:
        netops-ai analyze --type syslog --message "Interface on router-01 (Cisco) down"
    """
    config = ctx.obj['config']
    event = Event(type=event_type, message=message, source_host=source_host,
                  source_ip=source_ip, category=category)

    async def process():
        async with AICoreEngine(config) as engine:
            try:
                await engine.store.ensure_fresh()
            except FeedUnavailable as e:
                logging.warning(f"Continuing with existing CVE cache: {e}")
            return await engine.dispatch(event)

    verdict = asyncio.run(process())

    if format == 'table':
        click.echo(TableFormatter.format_verdict(verdict))
    else:
        click.echo(JSONFormatter.format_verdict(verdict))
