"""
RAM disk detection and allocation module.

This module checks whether the Derived Data directory is already served by a
mounted disk and asks hdiutil for a new memory-backed device.
"""
import logging
from typing import Optional

from ramdisk.config import DISKUTIL, HDIUTIL, MOUNT, RamDiskConfig
from ramdisk.core.exceptions import AllocationError, CommandFailedError, PatternNotFound, RamDiskError
from ramdisk.core.parser import parse_allocated_disk, parse_mounted_disk_count, parse_volume_info
from ramdisk.utils.command import CommandRunner
from ramdisk.utils.format import TermColors, bytes_to_human_readable, colorize

logger = logging.getLogger('ramdisk')


def _query_mount_point(config: RamDiskConfig, cmd_runner: CommandRunner) -> Optional[bool]:
    """
    Ask diskutil which volume holds the mount path.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        True or False when diskutil answered with a property list, None otherwise
    """
    mount_path = str(config.mount_path)
    try:
        result = cmd_runner.run([DISKUTIL, "info", "-plist", mount_path], check=False)
    except RamDiskError as e:
        logger.debug(f"diskutil info unavailable, falling back to the mount table: {e}")
        return None

    info = parse_volume_info(result.stdout)
    if info is None:
        return None

    mount_point = info.get("MountPoint", "")
    device_node = info.get("DeviceNode", "")
    logger.debug(f"{mount_path} is on {device_node or 'unknown device'} mounted at {mount_point or 'nowhere'}")

    return mount_point == mount_path and device_node.startswith("/dev/disk")


def _mount_table_has_ram_disk(config: RamDiskConfig, cmd_runner: CommandRunner) -> bool:
    """
    Look for exactly one mount table line with a disk mounted on the mount path.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        True if exactly one line matches, False otherwise
    """
    try:
        output = cmd_runner.run([MOUNT], check=False).stdout
    except RamDiskError as e:
        logger.warning(colorize(f"Could not read the mount table: {e}",
                               TermColors.WARNING, cmd_runner.colored_output))
        return False

    matches = parse_mounted_disk_count(output, config.mount_path)
    if matches == 1:
        logger.info("RAM disk is already mounted.")
        logger.info(output.rstrip())
        return True

    if matches > 1:
        logger.warning(colorize(f"Found {matches} disks mounted on {config.mount_path}, treating as not mounted",
                               TermColors.WARNING, cmd_runner.colored_output))
    return False


def ram_disk_exists(config: RamDiskConfig, cmd_runner: CommandRunner) -> bool:
    """
    Check if a disk is already mounted on the Derived Data path.

    Detection never fails: anything ambiguous reads as "not mounted" so that
    the caller goes on to create the disk.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        True if the RAM disk already exists
    """
    if config.prefer_structured_queries:
        mounted = _query_mount_point(config, cmd_runner)
        if mounted is not None:
            if mounted:
                logger.info("RAM disk is already mounted.")
            return mounted

    return _mount_table_has_ram_disk(config, cmd_runner)


def create_ram_disk(config: RamDiskConfig, cmd_runner: CommandRunner) -> Optional[str]:
    """
    Allocate an unmounted memory-backed block device.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        Disk number (e.g. "7" for /dev/disk7), or None if hdiutil did not
        report exactly one disk

    Raises:
        AllocationError: If hdiutil fails
    """
    logger.info(f"Creating {bytes_to_human_readable(config.size_bytes)} RAM disk ({config.blocks} blocks)")

    try:
        result = cmd_runner.run([HDIUTIL, "attach", "-nomount", f"ram://{config.blocks}"])
    except CommandFailedError as e:
        raise AllocationError(f"Failed to allocate RAM disk: {e}") from e

    logger.info(f"output {result.stdout.strip()}")

    try:
        disk = parse_allocated_disk(result.stdout)
    except PatternNotFound as e:
        logger.error(colorize(f"RAM disk was not created: {e}",
                             TermColors.ERROR, cmd_runner.colored_output))
        return None

    logger.debug(f"Allocated /dev/disk{disk}")
    return disk
