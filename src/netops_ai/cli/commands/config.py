"""Configuration management commands"""

import os

import click

from ...clients.credentials import parse_keys
from ...config.settings import AICoreConfig


ENV_VARS = [
    'WATSONX_API_KEYS',
    'WATSONX_API_KEY',
    'WATSONX_REGION',
    'WATSONX_PROJECT_ID',
    'WATSONX_MODEL_ID',
    'WATSONX_URL',
    'WATSONX_TEMPERATURE',
    'WATSONX_MAX_NEW_TOKENS',
    'WATSONX_TIMEOUT_SECONDS',
    'IBM_IAM_TOKEN_URL',
    'NVD_API_KEY',
    'NETOPS_CVE_CACHE_FILE',
    'NETOPS_FRESHNESS_WINDOW',
    'NETOPS_REFRESH_INTERVAL',
    'NETOPS_SEVERITY_THRESHOLD',
    'NETOPS_VENDOR_ALLOWLIST',
    'NETOPS_LOG_LEVEL',
    'NETOPS_LOG_FILE',
]

SECRET_VARS = {'WATSONX_API_KEYS', 'WATSONX_API_KEY', 'NVD_API_KEY'}


def _mask(value: str) -> str:
    return f"{value[:4]}..." if len(value) > 8 else "***"


@click.command('config')
@click.option('--show-env', is_flag=True, help='Show all environment variables')
@click.option('--validate', is_flag=True, help='Validate configuration')
@click.option('--env-file', help='Specify custom .env file path')
@click.pass_context
def config_cmd(ctx, show_env, validate, env_file):
    """Show current NetOps AI configuration

    Example:
        netops-ai config
        netops-ai config --show-env
        netops-ai config --validate
        netops-ai config --env-file /path/to/custom.env
    """
    if env_file:
        config = AICoreConfig.from_env(env_file)
    else:
        config = ctx.obj['config']

    click.echo("NETOPS AI CORE CONFIGURATION")
    click.echo("=" * 50)

    keys = parse_keys(config.watsonx_api_keys)
    click.echo(f"\nwatsonx.ai:")
    click.echo(f"   API Keys: {len(keys)} configured" if keys else "   API Keys: Not Set")
    click.echo(f"   Region: {config.watsonx_region}")
    click.echo(f"   Project ID: {config.watsonx_project_id or 'Not Set'}")
    click.echo(f"   Model: {config.watsonx_model_id}")
    click.echo(f"   Endpoint: {config.generation_url}")
    click.echo(f"   Temperature: {config.watsonx_temperature}")
    click.echo(f"   Max New Tokens: {config.watsonx_max_new_tokens}")
    click.echo(f"   IAM Token URL: {config.iam_token_url}")

    click.echo(f"\nCVE Cache:")
    nvd_status = f"Set ({_mask(config.nvd_api_key)})" if config.nvd_api_key else "Not Set"
    click.echo(f"   NVD API Key: {nvd_status}")
    click.echo(f"   NVD Endpoint: {config.nvd_base_url}")
    click.echo(f"   Cache File: {config.cve_cache_file}")
    click.echo(f"   Freshness Window: {config.freshness_window}s")
    click.echo(f"   Refresh Interval: {config.refresh_interval}s")
    click.echo(f"   Fetch Window: {config.fetch_window_days} days")
    click.echo(f"   Severity Threshold: {config.severity_threshold}")
    click.echo(f"   Vendors: {', '.join(config.vendor_allowlist)}")

    click.echo(f"\nLogging:")
    click.echo(f"   Log Level: {config.log_level}")
    click.echo(f"   Log File: {config.log_file or 'stderr only'}")

    if show_env:
        click.echo(f"\nEnvironment Variables:")
        for var in ENV_VARS:
            value = os.getenv(var)
            if value and var in SECRET_VARS:
                display_value = _mask(value)
            else:
                display_value = value or "Not Set"
            click.echo(f"   {var}: {display_value}")

    if validate:
        click.echo(f"\nConfiguration Validation:")
        issues = config.validate()

        if not issues:
            click.echo("   Configuration looks good!")
        else:
            click.echo("   Issues found:")
            for issue in issues:
                click.echo(f"      - {issue}")
