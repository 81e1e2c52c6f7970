"""
Logging setup for ntpping
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbosity: int = 0) -> logging.Logger:
    """
    Route the ``ntpping`` logger through rich on standard error.
    
    Args:
        verbosity: 0 for warnings only, 1 for info, 2 or more for debug
        
    Returns:
        The package logger
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    
    logger = logging.getLogger('ntpping')
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_time=False,
        )
    )
    logger.propagate = False
    return logger
