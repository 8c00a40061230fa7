"""
Command-line interface for ramdisk.

This module handles argument parsing and runs the RAM disk setup once.
"""
import argparse
import logging
import os
import sys
from typing import List, Optional

from ramdisk.utils.logging import setup_logging
from ramdisk.utils.command import CommandRunner, SimulationMode
from ramdisk.utils.format import TermColors, colorize
from ramdisk.utils.validation import check_prerequisites
from ramdisk.config import RamDiskConfig
from ramdisk.config.launchagent import launch_agent_path, write_launch_agent
from ramdisk.core.provision import setup_ram_disk
from ramdisk.core.exceptions import LaunchAgentError

logger = logging.getLogger('ramdisk')


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Arguments to parse, sys.argv when omitted

    Returns:
        Namespace containing parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="Create a RAM disk for Xcode's Derived Data and mount it in place"
    )

    parser.add_argument(
        "--install-agent",
        action="store_true",
        help="Write a launch agent to ~/Library/LaunchAgents that runs this tool once at login"
    )

    # Simulation options
    parser.add_argument(
        "-s", "--simulate",
        action="store_true",
        help="Simulate operations without making any changes to the system"
    )

    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output"
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    return parser.parse_args(argv)


def display_simulation_summary(cmd_runner: CommandRunner) -> None:
    """
    Display a summary of the simulation.

    Args:
        cmd_runner: CommandRunner instance for executing commands
    """
    if cmd_runner.simulation_mode != SimulationMode.SIMULATE:
        return

    report = cmd_runner.get_simulation_report()

    # Get terminal width
    try:
        terminal_width = os.get_terminal_size().columns
    except (AttributeError, OSError):
        terminal_width = 80

    stars = "*" * terminal_width

    print(f"\n{colorize(stars, TermColors.SIM, cmd_runner.colored_output)}")
    print(colorize("SIMULATION COMPLETE - NO CHANGES WERE MADE", TermColors.SIM + TermColors.BOLD,
                   cmd_runner.colored_output))
    print(f"{colorize(stars, TermColors.SIM, cmd_runner.colored_output)}\n")

    print(colorize("The following operations would have been performed:", TermColors.SUCCESS,
                   cmd_runner.colored_output))
    print(report)

    print(f"\n{colorize('To execute these operations for real, run without the --simulate flag.', TermColors.SIM, cmd_runner.colored_output)}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function.

    Args:
        argv: Command-line arguments, sys.argv when omitted

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = None
    try:
        args = parse_arguments(argv)

        # Set up logging
        setup_logging(args.debug)

        config = RamDiskConfig.default()

        # Create the command runner with appropriate simulation mode
        cmd_runner = CommandRunner(
            SimulationMode.SIMULATE if args.simulate else SimulationMode.DISABLED,
            colored_output=not args.no_color,
            encoding=config.encoding,
            check_exit_status=config.check_exit_status
        )

        if args.simulate:
            logger.info("Running in simulation mode - NO CHANGES WILL BE MADE")

        if args.install_agent:
            try:
                write_launch_agent(launch_agent_path(), cmd_runner)
            except LaunchAgentError as e:
                logger.error(str(e))
                return 1
            return 0

        # Check prerequisites
        try:
            check_prerequisites(cmd_runner)
        except RuntimeError as e:
            logger.error(str(e))
            return 1

        result = setup_ram_disk(config, cmd_runner)

        if args.simulate:
            display_simulation_summary(cmd_runner)

        return 0 if result.success else 1

    except KeyboardInterrupt:
        logger.error("Operation cancelled by user")
        return 130

    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        if args is not None and args.debug:
            import traceback
            traceback.print_exc()
        return 1


# For module import compatibility
if __name__ == "__main__":
    sys.exit(main())
