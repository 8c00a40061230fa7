"""
ramdisk - Memory-backed Derived Data volume for Xcode

This package provides tools for creating a RAM disk and mounting it over
Xcode's Derived Data directory so that builds avoid persistent-disk I/O.
"""

__version__ = "0.1.0"
