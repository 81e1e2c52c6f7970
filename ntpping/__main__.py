"""
ntpping - NTP Ping and Chain Tracer

Entry point for running as a module:
    python -m ntpping <address>
"""

from .cli import main

if __name__ == '__main__':
    main()
