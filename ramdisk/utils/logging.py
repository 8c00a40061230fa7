"""
Logging configuration utilities.

This module provides functions for setting up and configuring logging.
"""
import logging
import sys


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the application.

    Status lines go to standard output so that a launch agent's
    StandardOutPath captures them.
    
    Args:
        debug: Whether to enable debug logging
    """
    level = logging.DEBUG if debug else logging.INFO
    
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
        stream=sys.stdout
    )
    
    logger = logging.getLogger('ramdisk')
    logger.setLevel(level)
