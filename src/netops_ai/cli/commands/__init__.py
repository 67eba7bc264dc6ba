"""CLI commands package"""

from .refresh import refresh
from .cves import cves
from .analyze import analyze
from .run import run
from .config import config_cmd
from .version import version

__all__ = ['refresh', 'cves', 'analyze', 'run', 'config_cmd', 'version']
