"""
Filesystem mounting module.

This module mounts the formatted RAM disk on the Derived Data directory.
"""
import logging

from ramdisk.config import DISKUTIL, MKDIR, RamDiskConfig
from ramdisk.core.exceptions import CommandFailedError, MountError
from ramdisk.utils.command import CommandRunner
from ramdisk.utils.format import TermColors, colorize

logger = logging.getLogger('ramdisk')


def _create_directory(config: RamDiskConfig, cmd_runner: CommandRunner) -> None:
    """
    Create the mount point and its parents if they don't exist.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Raises:
        MountError: If the directory cannot be created
    """
    try:
        cmd_runner.run([MKDIR, "-p", str(config.mount_path)])
    except CommandFailedError as e:
        raise MountError(f"Failed to create {config.mount_path}: {e}") from e


def mount_ram_disk(device: str, config: RamDiskConfig, cmd_runner: CommandRunner) -> str:
    """
    Mount the formatted device on the Derived Data directory.

    Args:
        device: Device path returned by the filesystem policy
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        Output of diskutil mount

    Raises:
        MountError: If mount command fails
    """
    _create_directory(config, cmd_runner)

    try:
        result = cmd_runner.run([DISKUTIL, "mount", "-mountPoint", str(config.mount_path), device])
    except CommandFailedError as e:
        raise MountError(f"Failed to mount {device} to {config.mount_path}: {e}") from e

    logger.info(result.stdout.rstrip())
    logger.info(colorize(f"Mounted {device} to {config.mount_path}",
                         TermColors.SUCCESS, cmd_runner.colored_output))
    return result.stdout
