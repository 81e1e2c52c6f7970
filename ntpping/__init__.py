"""
ntpping - NTP Ping and Chain Tracer

Queries an NTP server repeatedly and follows the chain of reference
servers up to stratum 1, printing one line per reply.
"""

__version__ = "1.0.0"
__author__ = "ntpping"
