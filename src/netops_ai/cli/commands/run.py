"""Event stream processing command"""

import asyncio
import json
import logging
import sys

import click

from ...core.errors import InvalidEvent
from ...core.models import Event
from ...processing.engine import AICoreEngine
from ..formatters.json import JSONFormatter


@click.command()
@click.option('--input', '-i', 'input_file', type=click.File('r'), default='-',
              help='File of newline-delimited JSON events (default: stdin)')
@click.pass_context
def run(ctx, input_file):
    """Classify a stream of JSON events, one verdict per line

    The CVE cache is refreshed in the background while events are processed.

    Example:
        echo '{"type": "syslog", "message": "Cisco ASA failover"}' | netops-ai run
    """
    config = ctx.obj['config']
    lines = [line for line in input_file if line.strip()]

    async def process():
        semaphore = asyncio.Semaphore(config.max_concurrent_events)

        async with AICoreEngine(config) as engine:
            async with engine.refresher():

                async def handle(line_no: int, line: str) -> str:
                    try:
                        event = Event.from_dict(json.loads(line))
                    except (ValueError, InvalidEvent) as e:
                        logging.warning(f"Skipping invalid event on line {line_no}: {e}")
                        return json.dumps({'line': line_no, 'error': str(e)})

                    async with semaphore:
                        verdict = await engine.dispatch(event)
                    return JSONFormatter.format_verdict(verdict, compact=True)

                tasks = [handle(i, line) for i, line in enumerate(lines, start=1)]
                return await asyncio.gather(*tasks)

    if not lines:
        click.echo("No events to process", err=True)
        sys.exit(1)

    for output in asyncio.run(process()):
        click.echo(output)
