"""
Formatting utilities.

This module provides functions for formatting sizes and consistent terminal
output formatting.
"""


# ANSI Terminal Colors
class TermColors:
    """ANSI color codes for terminal output"""
    INFO = '\033[94m'     # Blue for informational messages
    SUCCESS = '\033[92m'  # Green for success messages 
    WARNING = '\033[93m'  # Yellow for warnings
    ERROR = '\033[91m'    # Red for errors
    SIM = '\033[96m'      # Cyan for simulation messages
    BOLD = '\033[1m'      # Bold text
    ENDC = '\033[0m'      # End color


def colorize(message: str, color: str, enabled: bool = True) -> str:
    """
    Add color to a message if color output is enabled.
    
    Args:
        message: The message to colorize
        color: The color to use (from TermColors)
        enabled: Whether colorization is enabled
        
    Returns:
        Colorized message or original message if colors disabled
    """
    if not enabled:
        return message
    return f"{color}{message}{TermColors.ENDC}"


def bytes_to_human_readable(size_bytes: int) -> str:
    """
    Convert bytes to human readable format using binary units (KiB, MiB, GiB, TiB).
    
    Args:
        size_bytes: Size in bytes
        
    Returns:
        Human readable size string with proper binary unit
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    
    for unit in ['KiB', 'MiB', 'GiB', 'TiB', 'PiB', 'EiB']:
        size_bytes /= 1024
        if size_bytes < 1024:
            return f"{size_bytes:.2f} {unit}"
    
    return f"{size_bytes:.2f} EiB"
