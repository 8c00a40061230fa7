"""
Launch agent generation.

This module writes the property list that makes launchd run the tool once at
login. LaunchOnlyOnce keeps launchd from starting a second, concurrent run.
"""
import logging
import plistlib
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from ramdisk.core.exceptions import LaunchAgentError
from ramdisk.utils.command import CommandRunner, SimulationMode
from ramdisk.utils.format import TermColors, colorize

logger = logging.getLogger('ramdisk')

AGENT_LABEL = "local.derived-data-ramdisk"


def launch_agent_path(home: Optional[Path] = None, label: str = AGENT_LABEL) -> Path:
    """Location of the agent's property list in the user's LaunchAgents directory."""
    if home is None:
        home = Path.home()
    return Path(home) / "Library" / "LaunchAgents" / f"{label}.plist"


def build_launch_agent(label: str = AGENT_LABEL, program_arguments: Optional[List[str]] = None) -> Dict[str, Any]:
    """
    Build the launch agent definition.

    Args:
        label: launchd job label
        program_arguments: Command launchd runs, this interpreter running the package by default

    Returns:
        Dictionary ready for plistlib
    """
    if program_arguments is None:
        program_arguments = [sys.executable, "-m", "ramdisk"]

    return {
        "Label": label,
        "ProgramArguments": list(program_arguments),
        "RunAtLoad": True,
        "LaunchOnlyOnce": True,
    }


def write_launch_agent(
    path: Path,
    cmd_runner: CommandRunner,
    label: str = AGENT_LABEL,
    program_arguments: Optional[List[str]] = None
) -> Dict[str, Any]:
    """
    Write the launch agent property list, or log it in simulation mode.

    Args:
        path: Destination of the property list
        cmd_runner: CommandRunner instance, for its simulation mode
        label: launchd job label
        program_arguments: Command launchd runs

    Returns:
        The written agent definition

    Raises:
        LaunchAgentError: If the file cannot be written
    """
    agent = build_launch_agent(label, program_arguments)
    path = Path(path)

    if cmd_runner.simulation_mode == SimulationMode.SIMULATE:
        logger.info(f"Would write launch agent to {path}:")
        logger.info(plistlib.dumps(agent).decode("utf-8"))
        return agent

    try:
        path.parent.mkdir(exist_ok=True, parents=True)
        with open(path, "wb") as f:
            plistlib.dump(agent, f)
    except OSError as e:
        raise LaunchAgentError(f"Failed to write launch agent {path}: {e}") from e

    logger.info(colorize(f"Wrote launch agent {path}", TermColors.SUCCESS, cmd_runner.colored_output))
    logger.info(f"Load it with: launchctl load {path}")
    return agent
