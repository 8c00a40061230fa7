"""
Validation utilities.

This module provides functions for validating prerequisites.
"""
import logging
import shutil
import sys

from ramdisk.config import REQUIRED_TOOLS
from ramdisk.utils.command import CommandRunner, SimulationMode

logger = logging.getLogger('ramdisk')


def check_prerequisites(cmd_runner: CommandRunner) -> None:
    """
    Check for the platform and the required tools.

    Args:
        cmd_runner: CommandRunner instance for executing commands

    Raises:
        RuntimeError: If prerequisites are not met
    """
    # In simulation mode, just log what would be checked
    if cmd_runner.simulation_mode == SimulationMode.SIMULATE:
        logger.info("Checking for required tools (simulated)")
        for tool in REQUIRED_TOOLS:
            logger.info(f"Tool '{tool}' would be checked")
        return

    if sys.platform != "darwin":
        raise RuntimeError(f"RAM disks for Derived Data require macOS, this is {sys.platform}")

    missing_tools = [tool for tool in REQUIRED_TOOLS if not shutil.which(tool)]

    if missing_tools:
        raise RuntimeError(
            f"Missing required tools: {', '.join(missing_tools)}\n"
            "These are part of macOS; check that the system is intact and try again"
        )
