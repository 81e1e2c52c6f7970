"""
Query engine and probe loop for ntpping
"""

from .base import BaseQuery
from .ntp import NTPQuery
from .resolver import resolve_to_ip, is_ip_literal, initial_target
from .chain import ProbeLoop, decide

__all__ = [
    'BaseQuery', 'NTPQuery', 'ProbeLoop', 'decide',
    'resolve_to_ip', 'is_ip_literal', 'initial_target',
]
