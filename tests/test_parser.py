"""
Tests for the tool output grammars. Inputs are captured macOS tool output.
"""

import pytest

from ramdisk.core.exceptions import PatternNotFound
from ramdisk.core.parser import (
    ALLOCATED_DISK_PATTERN,
    extract_single,
    parse_allocated_disk,
    parse_apfs_operation_disk,
    parse_mounted_disk_count,
    parse_volume_info,
)

from conftest import MOUNT_PATH, fixture_text


@pytest.mark.parametrize("fixture,expected", [
    ("mount_without_ramdisk.txt", 0),
    ("mount_with_ramdisk.txt", 1),
    ("mount_with_two_ramdisks.txt", 2),
])
def test_mounted_disk_count(fixture, expected):
    assert parse_mounted_disk_count(fixture_text(fixture), MOUNT_PATH) == expected


def test_mounted_disk_pattern_is_case_insensitive():
    line = f"/DEV/DISK4 on {MOUNT_PATH.upper()} (hfs, local, MOUNTED by dev)\n"
    assert parse_mounted_disk_count(line, MOUNT_PATH) == 1


def test_mounted_disk_pattern_requires_mounted_on_same_line():
    text = f"/dev/disk4 on {MOUNT_PATH} (hfs, local)\nsomething mounted elsewhere\n"
    assert parse_mounted_disk_count(text, MOUNT_PATH) == 0


def test_mounted_disk_pattern_escapes_path():
    text = "/dev/disk4 on /Users/aXb (hfs, mounted by dev)\n"
    assert parse_mounted_disk_count(text, "/Users/a.b") == 0


def test_parse_allocated_disk():
    assert parse_allocated_disk("Attached: /dev/disk7\n") == "7"
    assert parse_allocated_disk(fixture_text("hdiutil_attach.txt")) == "7"


def test_parse_allocated_disk_without_disk():
    with pytest.raises(PatternNotFound):
        parse_allocated_disk("hdiutil: attach failed - No such file or directory\n")


def test_parse_allocated_disk_ambiguous():
    with pytest.raises(PatternNotFound):
        parse_allocated_disk("/dev/disk7\n/dev/disk8\n")


def test_parse_apfs_operation_disk():
    assert parse_apfs_operation_disk(fixture_text("apfs_create_container.txt")) == "disk7"
    assert parse_apfs_operation_disk(fixture_text("apfs_add_volume.txt")) == "disk7s1"


def test_parse_apfs_operation_disk_requires_line_end():
    with pytest.raises(PatternNotFound):
        parse_apfs_operation_disk("Disk from APFS operation: disk7s1")


def test_parse_apfs_operation_disk_missing():
    with pytest.raises(PatternNotFound):
        parse_apfs_operation_disk("Error: -69808: Some information was unavailable\n")


def test_extract_single_error_names_description():
    with pytest.raises(PatternNotFound, match="allocated disk"):
        extract_single(ALLOCATED_DISK_PATTERN, "", "allocated disk")


def test_parse_volume_info():
    info = parse_volume_info(fixture_text("diskutil_info_ramdisk.plist"))
    assert info["MountPoint"] == MOUNT_PATH
    assert info["DeviceNode"] == "/dev/disk4"


@pytest.mark.parametrize("text", [
    "",
    "Could not find disk: /Users/dev/Library/Developer/Xcode/DerivedData\n",
    "<?xml version=\"1.0\"?><plist><dict><key>x",
])
def test_parse_volume_info_not_a_plist(text):
    assert parse_volume_info(text) is None
