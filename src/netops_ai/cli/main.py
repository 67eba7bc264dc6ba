"""NetOps AI CLI Main Entry Point"""

import logging
from pathlib import Path
from typing import Optional

import click

from ..config.settings import AICoreConfig
from .commands.analyze import analyze
from .commands.config import config_cmd
from .commands.cves import cves
from .commands.refresh import refresh
from .commands.run import run
from .commands.version import version


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str, log_file: Optional[str] = None):
    """Setup logging configuration"""
    handlers = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt='%Y-%m-%d %H:%M:%S',
        handlers=handlers,
        force=True,
    )


@click.group()
@click.option('--log-level', default=None, help='Logging level (default: NETOPS_LOG_LEVEL or INFO)')
@click.option('--log-file', default=None, help='Also write logs to this file')
@click.option('--env-file', default=None, help='Path to a .env file')
@click.pass_context
def cli(ctx, log_level, log_file, env_file):
    """NetOps AI Core CLI

    Classifies network-operations events with watsonx.ai, grounding each
    prompt in recent CVEs for networking-equipment vendors.
    """
    config = AICoreConfig.from_env(env_file)

    if log_level:
        config.log_level = log_level
    if log_file:
        config.log_file = log_file
    setup_logging(config.log_level, config.log_file)

    ctx.ensure_object(dict)
    ctx.obj['config'] = config


# Register commands
cli.add_command(refresh)
cli.add_command(cves)
cli.add_command(analyze)
cli.add_command(run)
cli.add_command(config_cmd, name='config')
cli.add_command(version)


if __name__ == '__main__':
    cli()
