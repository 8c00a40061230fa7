"""
Base exceptions for ramdisk.

This module defines the hierarchy of exceptions used by ramdisk.
"""
from typing import Optional


class RamDiskError(Exception):
    """Base exception for RAM disk errors"""
    pass


class CommandDecodingFailed(RamDiskError):
    """Exception raised when a tool's output cannot be decoded as text"""
    pass


class CommandFailedError(RamDiskError):
    """Exception raised when a tool cannot be launched or exits with a non-zero status"""

    def __init__(self, message: str, returncode: Optional[int] = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class PatternNotFound(RamDiskError):
    """Exception raised when an expected identifier is missing or ambiguous in tool output"""
    pass


class AllocationError(RamDiskError):
    """Exception raised when there's an error allocating the memory-backed device"""
    pass


class FilesystemError(RamDiskError):
    """Exception raised when there's an error in filesystem creation"""
    pass


class MountError(RamDiskError):
    """Exception raised when there's an error in mounting"""
    pass


class LaunchAgentError(RamDiskError):
    """Exception raised when there's an error writing the launch agent"""
    pass
