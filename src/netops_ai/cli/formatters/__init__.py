"""Output formatters for NetOps AI CLI"""

from .table import TableFormatter
from .json import JSONFormatter

__all__ = ['TableFormatter', 'JSONFormatter']
