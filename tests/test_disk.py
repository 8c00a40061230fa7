"""
Tests for RAM disk detection and allocation.
"""

import pytest

from ramdisk.core.disk import create_ram_disk, ram_disk_exists
from ramdisk.core.exceptions import AllocationError, CommandDecodingFailed, CommandFailedError

from conftest import MOUNT_PATH, fixture_text


@pytest.mark.parametrize("fixture,expected", [
    ("mount_without_ramdisk.txt", False),
    ("mount_with_ramdisk.txt", True),
    ("mount_with_two_ramdisks.txt", False),
])
def test_exists_from_mount_table(mount_table_config, make_runner, fixture, expected):
    runner = make_runner({("mount",): fixture_text(fixture)})
    assert ram_disk_exists(mount_table_config, runner) is expected
    assert runner.commands == [["/sbin/mount"]]


def test_exists_mount_table_failure_reads_as_absent(mount_table_config, make_runner):
    runner = make_runner({("mount",): CommandFailedError("Unable to execute /sbin/mount")})
    assert ram_disk_exists(mount_table_config, runner) is False


def test_exists_undecodable_mount_table_reads_as_absent(mount_table_config, make_runner):
    runner = make_runner({("mount",): b"/dev/disk4 on \xff\xfe"})
    assert ram_disk_exists(mount_table_config, runner) is False


def test_exists_from_diskutil_plist(config, make_runner):
    runner = make_runner({
        ("diskutil", "info"): fixture_text("diskutil_info_ramdisk.plist"),
        ("mount",): fixture_text("mount_without_ramdisk.txt"),
    })
    assert ram_disk_exists(config, runner) is True
    assert runner.commands == [["/usr/sbin/diskutil", "info", "-plist", MOUNT_PATH]]


def test_plain_directory_is_not_a_ram_disk(config, make_runner):
    runner = make_runner({
        ("diskutil", "info"): fixture_text("diskutil_info_data_volume.plist"),
        ("mount",): fixture_text("mount_with_ramdisk.txt"),
    })
    assert ram_disk_exists(config, runner) is False
    assert runner.calls("mount") == []


def test_falls_back_to_mount_table_without_plist(config, make_runner):
    runner = make_runner({
        ("diskutil", "info"): (1, "Could not find disk: " + MOUNT_PATH + "\n"),
        ("mount",): fixture_text("mount_with_ramdisk.txt"),
    })
    assert ram_disk_exists(config, runner) is True
    assert runner.tool_names() == ["diskutil", "mount"]


def test_falls_back_when_diskutil_cannot_run(config, make_runner):
    runner = make_runner({
        ("diskutil", "info"): CommandFailedError("Unable to execute /usr/sbin/diskutil"),
        ("mount",): fixture_text("mount_without_ramdisk.txt"),
    })
    assert ram_disk_exists(config, runner) is False
    assert runner.tool_names() == ["diskutil", "mount"]


def test_create_ram_disk(config, make_runner):
    runner = make_runner({("hdiutil", "attach"): "...: /dev/disk7\n"})
    assert create_ram_disk(config, runner) == "7"
    assert runner.commands == [["/usr/bin/hdiutil", "attach", "-nomount", "ram://8388608"]]


def test_create_ram_disk_requests_blocks_for_capacity(make_runner):
    from ramdisk.config import RamDiskConfig
    config = RamDiskConfig.default(home="/Users/dev", size_gib=4)
    runner = make_runner({("hdiutil",): fixture_text("hdiutil_attach.txt")})
    create_ram_disk(config, runner)
    assert runner.commands[0][-1] == f"ram://{4 * 1024 * 2048}"


def test_create_ram_disk_without_disk_in_output(config, make_runner):
    runner = make_runner({("hdiutil", "attach"): "hdiutil: attach: no disk\n"})
    assert create_ram_disk(config, runner) is None


def test_create_ram_disk_with_two_disks_in_output(config, make_runner):
    runner = make_runner({("hdiutil", "attach"): "/dev/disk7\n/dev/disk8\n"})
    assert create_ram_disk(config, runner) is None


def test_create_ram_disk_tool_failure(config, make_runner):
    runner = make_runner({("hdiutil", "attach"): (1, "hdiutil: attach failed - Resource busy\n")})
    with pytest.raises(AllocationError, match="Resource busy"):
        create_ram_disk(config, runner)


def test_create_ram_disk_undecodable_output(config, make_runner):
    runner = make_runner({("hdiutil", "attach"): b"/dev/disk7 \xff\n"})
    with pytest.raises(CommandDecodingFailed):
        create_ram_disk(config, runner)
