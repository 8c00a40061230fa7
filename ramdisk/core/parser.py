"""
Tool output parsing module.

This module extracts device identifiers from the text printed by macOS disk
tools. Each regular expression below is a contract with the wording of one
tool on an English-language system; the property-list query is preferred
where diskutil offers one.
"""
import logging
import plistlib
import re
from pathlib import Path
from typing import Any, Dict, Optional, Union
from xml.parsers.expat import ExpatError

from ramdisk.core.exceptions import PatternNotFound

logger = logging.getLogger('ramdisk')

# hdiutil attach: "/dev/disk7          \t \t"
ALLOCATED_DISK_PATTERN = re.compile(r"/dev/disk(\d+)", re.IGNORECASE)

# diskutil apfs createContainer / addVolume: "Disk from APFS operation: disk7s1"
APFS_OPERATION_PATTERN = re.compile(r"Disk from APFS operation: (\S+)[ \t]*\n")


def mounted_disk_pattern(mount_path: Union[str, Path]) -> re.Pattern:
    """
    Build the pattern matching a mount table line for a disk mounted on a path.

    mount prints lines such as
    "/dev/disk4 on /Users/me/Library/Developer/Xcode/DerivedData (hfs, local, nodev, nosuid, mounted by me)".

    Args:
        mount_path: Directory the disk is expected on

    Returns:
        Compiled case-insensitive pattern, matching within a single line
    """
    return re.compile(rf"/dev/disk.*{re.escape(str(mount_path))}.*mounted", re.IGNORECASE)


def count_matches(pattern: re.Pattern, text: str) -> int:
    return sum(1 for _ in pattern.finditer(text))


def extract_single(pattern: re.Pattern, text: str, description: str) -> str:
    """
    Extract the first group of the only match of a pattern.

    Args:
        pattern: Compiled pattern with one group
        text: Tool output
        description: What is being extracted, for the error message

    Returns:
        Matched group

    Raises:
        PatternNotFound: If there is no match or more than one
    """
    matches = list(pattern.finditer(text))
    if len(matches) != 1:
        raise PatternNotFound(
            f"Expected exactly one {description} in tool output, found {len(matches)}: {text.strip()!r}"
        )
    return matches[0].group(1)


def parse_mounted_disk_count(text: str, mount_path: Union[str, Path]) -> int:
    """Count the mount table lines describing a disk mounted on mount_path."""
    return count_matches(mounted_disk_pattern(mount_path), text)


def parse_allocated_disk(text: str) -> str:
    """
    Extract the disk number from hdiutil attach output.

    Args:
        text: Output of hdiutil attach

    Returns:
        Disk number, e.g. "7" for /dev/disk7

    Raises:
        PatternNotFound: If no disk or more than one disk is reported
    """
    return extract_single(ALLOCATED_DISK_PATTERN, text, "allocated disk")


def parse_apfs_operation_disk(text: str) -> str:
    """
    Extract the disk produced by a diskutil apfs operation.

    Args:
        text: Output of diskutil apfs createContainer or addVolume

    Returns:
        Disk identifier, e.g. "disk7s1"

    Raises:
        PatternNotFound: If the operation did not report exactly one disk
    """
    return extract_single(APFS_OPERATION_PATTERN, text, "APFS operation disk")


def parse_volume_info(text: str) -> Optional[Dict[str, Any]]:
    """
    Parse the property list printed by diskutil info -plist.

    Args:
        text: Output of diskutil info -plist

    Returns:
        Dictionary of volume properties, or None if the output is not a property list
    """
    if not text.strip():
        return None
    try:
        info = plistlib.loads(text.encode("utf-8"))
    except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
        logger.debug(f"diskutil output is not a property list: {e}")
        return None
    if not isinstance(info, dict):
        return None
    return info
