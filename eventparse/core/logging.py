"""
Logging configuration module.
"""

import logging
import sys
from typing import Optional

from .config import settings


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure logging for command-line use.
    
    The library itself never calls this; embedding applications keep
    control of their own handlers.
    
    Args:
        level: Log level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        
    Returns:
        The package root logger
    """
    log_level = level or settings.log_level
    
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True
    )
    
    return logging.getLogger("eventparse")


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger.
    
    Args:
        name: Logger name (usually __name__)
        
    Returns:
        Logger instance
    """
    if name == "eventparse" or name.startswith("eventparse."):
        return logging.getLogger(name)
    return logging.getLogger(f"eventparse.{name}")
