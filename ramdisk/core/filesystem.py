"""
Filesystem creation module.

This module formats the freshly allocated RAM disk. Each supported filesystem
is a policy exposing a single provision() step that turns the raw disk number
into the device path to mount.
"""
import logging
from typing import Dict, Type

from ramdisk.config import DISKUTIL, NEWFS_HFS, FilesystemType, RamDiskConfig
from ramdisk.core.exceptions import CommandFailedError, FilesystemError, PatternNotFound
from ramdisk.core.parser import parse_apfs_operation_disk
from ramdisk.utils.command import CommandRunner

logger = logging.getLogger('ramdisk')


class FilesystemPolicy:
    """Base class for the ways of formatting the RAM disk"""

    filesystem_type: FilesystemType

    def __init__(self, config: RamDiskConfig, cmd_runner: CommandRunner):
        self.config = config
        self.cmd_runner = cmd_runner

    def provision(self, disk: str) -> str:
        """
        Format the disk.

        Args:
            disk: Disk number returned by the allocator

        Returns:
            Device path to mount

        Raises:
            FilesystemError: If formatting fails
        """
        raise NotImplementedError


class HFSFilesystem(FilesystemPolicy):
    """Journaled HFS+ written directly on the raw device"""

    filesystem_type = FilesystemType.HFS

    def provision(self, disk: str) -> str:
        drive = f"/dev/rdisk{disk}"
        try:
            result = self.cmd_runner.run([NEWFS_HFS, "-v", self.config.volume_label, drive])
        except CommandFailedError as e:
            raise FilesystemError(f"Failed to create HFS+ filesystem on {drive}: {e}") from e

        logger.info(result.stdout.rstrip())
        logger.info(f"Created HFS+ filesystem on {drive}")
        return drive


class APFSFilesystem(FilesystemPolicy):
    """
    APFS container holding a single volume.

    diskutil names the container and the volume it creates, so the device is
    re-read from its output after each step.
    """

    filesystem_type = FilesystemType.APFS

    def _apfs_operation(self, cmd, description: str) -> str:
        try:
            result = self.cmd_runner.run(cmd)
        except CommandFailedError as e:
            raise FilesystemError(f"Failed to {description}: {e}") from e

        logger.info(result.stdout.rstrip())
        try:
            return parse_apfs_operation_disk(result.stdout)
        except PatternNotFound as e:
            raise FilesystemError(f"Failed to {description}: {e}") from e

    def provision(self, disk: str) -> str:
        container = self._apfs_operation(
            [DISKUTIL, "apfs", "createContainer", f"/dev/disk{disk}"],
            f"create APFS container on /dev/disk{disk}"
        )
        logger.info(f"Created APFS container {container}")

        volume = self._apfs_operation(
            [DISKUTIL, "apfs", "addVolume", container, "APFS", self.config.volume_label, "-nomount"],
            f"add APFS volume to {container}"
        )
        logger.info(f"Created APFS volume {volume}")
        return f"/dev/{volume}"


FILESYSTEM_POLICIES: Dict[FilesystemType, Type[FilesystemPolicy]] = {
    FilesystemType.HFS: HFSFilesystem,
    FilesystemType.APFS: APFSFilesystem,
}


def get_filesystem_policy(config: RamDiskConfig, cmd_runner: CommandRunner) -> FilesystemPolicy:
    """
    Select the formatting policy for the configured filesystem.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        FilesystemPolicy instance
    """
    return FILESYSTEM_POLICIES[config.filesystem](config, cmd_runner)
