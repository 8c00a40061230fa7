"""
Spotlight registration module.

Instruments finds symbols through Spotlight, so the RAM disk is added to the
index once it is mounted.
"""
import logging

from ramdisk.config import MDUTIL, RamDiskConfig
from ramdisk.core.exceptions import RamDiskError
from ramdisk.utils.command import CommandRunner
from ramdisk.utils.format import TermColors, colorize

logger = logging.getLogger('ramdisk')


def enable_spotlight_indexing(config: RamDiskConfig, cmd_runner: CommandRunner) -> bool:
    """
    Turn on Spotlight indexing for the mount path.

    Failures are logged and do not undo the mount.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        True if mdutil succeeded
    """
    try:
        result = cmd_runner.run([MDUTIL, str(config.mount_path), "-i", "on"])
    except RamDiskError as e:
        logger.warning(colorize(f"Could not enable Spotlight indexing on {config.mount_path}: {e}",
                               TermColors.WARNING, cmd_runner.colored_output))
        return False

    logger.info(result.stdout.rstrip())
    return True
