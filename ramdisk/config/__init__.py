"""
Configuration for the RAM disk.

This module holds the constants of the tool and the immutable configuration
value built from them once at startup and passed to every step.
"""
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

# Constants
RAMDISK_GB = 4  # Size of the RAM disk in GiB
BLOCKS_PER_GIB = 1024 * 2048  # 512-byte blocks
DERIVED_DATA_RELATIVE_PATH = Path("Library") / "Developer" / "Xcode" / "DerivedData"
VOLUME_LABEL = "DerivedData"
DEFAULT_ENCODING = "utf-8"

# External tools
MOUNT = "/sbin/mount"
HDIUTIL = "/usr/bin/hdiutil"
NEWFS_HFS = "/sbin/newfs_hfs"
DISKUTIL = "/usr/sbin/diskutil"
MKDIR = "/bin/mkdir"
MDUTIL = "/usr/bin/mdutil"

REQUIRED_TOOLS = [MOUNT, HDIUTIL, NEWFS_HFS, DISKUTIL, MKDIR, MDUTIL]


class FilesystemType(Enum):
    """Filesystems the RAM disk can be formatted with"""
    HFS = "hfs"    # Journaled HFS+, formatted in one step
    APFS = "apfs"  # Container then volume


DEFAULT_FILESYSTEM = FilesystemType.HFS


def default_mount_path(home: Optional[Path] = None) -> Path:
    """
    Build the Derived Data path for a home directory.

    Args:
        home: Home directory, the invoking user's when omitted

    Returns:
        Absolute path of Xcode's Derived Data directory
    """
    if home is None:
        home = Path.home()
    return Path(home) / DERIVED_DATA_RELATIVE_PATH


@dataclass(frozen=True)
class RamDiskConfig:
    """
    Settings for one provisioning run.

    Attributes:
        size_gib: Capacity of the RAM disk in GiB
        mount_path: Directory the volume is mounted on
        filesystem: Filesystem the disk is formatted with
        volume_label: Name given to the formatted volume
        encoding: Encoding used to decode tool output
        check_exit_status: Treat a non-zero tool exit status as a failure
        prefer_structured_queries: Query diskutil property lists before parsing mount output
    """
    size_gib: int = RAMDISK_GB
    mount_path: Path = field(default_factory=default_mount_path)
    filesystem: FilesystemType = DEFAULT_FILESYSTEM
    volume_label: str = VOLUME_LABEL
    encoding: str = DEFAULT_ENCODING
    check_exit_status: bool = True
    prefer_structured_queries: bool = True

    def __post_init__(self):
        if self.size_gib <= 0:
            raise ValueError(f"RAM disk size must be positive, got {self.size_gib} GiB")
        # Normalise to Path for callers passing strings
        object.__setattr__(self, "mount_path", Path(self.mount_path))
        if not self.mount_path.is_absolute():
            raise ValueError(f"Mount path must be absolute: {self.mount_path}")
        if not isinstance(self.filesystem, FilesystemType):
            object.__setattr__(self, "filesystem", FilesystemType(self.filesystem))

    @property
    def blocks(self) -> int:
        """Number of 512-byte blocks requested from hdiutil"""
        return self.size_gib * BLOCKS_PER_GIB

    @property
    def size_bytes(self) -> int:
        return self.blocks * 512

    @classmethod
    def default(cls, home: Optional[Path] = None, **overrides) -> "RamDiskConfig":
        """
        Build the configuration for the invoking user.

        Args:
            home: Home directory to build the mount path from
            **overrides: Any other field to change from its default

        Returns:
            RamDiskConfig instance
        """
        return cls(mount_path=default_mount_path(home), **overrides)
