"""
Output modules for ntpping
"""

from .console import ConsoleOutput
from .formatter import Formatter, DEFAULT_TEMPLATE, format_duration
from .json_export import JsonExporter

__all__ = ['ConsoleOutput', 'Formatter', 'DEFAULT_TEMPLATE', 'format_duration', 'JsonExporter']
