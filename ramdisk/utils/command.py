"""
Command execution utilities.

This module provides tools for executing system tools with simplified simulation support.
"""
import logging
import os
import subprocess
import uuid
from enum import Enum
from typing import Dict, List

from ramdisk.config import DEFAULT_ENCODING
from ramdisk.core.exceptions import CommandDecodingFailed, CommandFailedError
from ramdisk.utils.format import TermColors, colorize

logger = logging.getLogger('ramdisk')

# First disk number handed out in simulation mode
SIMULATED_FIRST_DISK = 4


class SimulationMode(Enum):
    """Enumeration for simulation modes"""
    DISABLED = 0  # Normal operation
    SIMULATE = 1  # Simulate operations


class CommandRunner:
    """
    Class responsible for command execution with simulation support.
    Acts as a wrapper around subprocess.run that decodes captured output.

    Commands block until the tool exits; no timeout is enforced.
    """
    def __init__(
        self,
        simulation_mode: SimulationMode,
        colored_output: bool = True,
        encoding: str = DEFAULT_ENCODING,
        check_exit_status: bool = True
    ):
        """
        Initialize the command runner.

        Args:
            simulation_mode: Simulation mode to operate in
            colored_output: Whether to use colored output in terminal
            encoding: Encoding used to decode tool output
            check_exit_status: Whether a non-zero exit status is reported as a failure
        """
        self.simulation_mode = simulation_mode
        self.colored_output = colored_output
        self.encoding = encoding
        self.check_exit_status = check_exit_status
        self.commands_run = []

        # Generate a unique simulation ID
        self.simulation_id = str(uuid.uuid4())[:8]

        # Keep track of simulated disks for consistent identifiers
        self._next_simulated_disk = SIMULATED_FIRST_DISK

    def run(self, cmd: List[str], check: bool = True, **kwargs) -> subprocess.CompletedProcess:
        """
        Run a system tool or simulate running it.

        Args:
            cmd: Command to run as list of strings
            check: Whether to check for non-zero return code
            **kwargs: Additional arguments to pass to subprocess.run

        Returns:
            CompletedProcess instance whose stdout and stderr are decoded text

        Raises:
            CommandDecodingFailed: If stdout cannot be decoded with the configured encoding
            CommandFailedError: If the tool cannot be launched, or exits non-zero while checked
        """
        cmd_str = ' '.join(cmd)
        logger.debug(f"Command requested: {cmd_str}")

        # Keep track of this command
        cmd_record = {
            "command": list(cmd),
            "simulated": self.simulation_mode == SimulationMode.SIMULATE
        }
        self.commands_run.append(cmd_record)

        # For simulation mode
        if self.simulation_mode == SimulationMode.SIMULATE:
            sim_prefix = colorize(f"[SIM:{self.simulation_id}]", TermColors.SIM, self.colored_output)
            logger.info(f"{sim_prefix} Would execute: {cmd_str}")

            # Create a simulated completed process
            return self._simulate_command(cmd)

        # For real execution mode
        completed = self._execute(cmd, **kwargs)

        stdout = self.decode(completed.stdout, cmd_str)
        stderr = (completed.stderr or b"").decode(self.encoding, errors="replace")
        if stderr:
            logger.debug(f"Stderr of {cmd_str}: {stderr.strip()}")

        result = subprocess.CompletedProcess(
            args=list(cmd),
            returncode=completed.returncode,
            stdout=stdout,
            stderr=stderr
        )

        if result.returncode != 0:
            if check and self.check_exit_status:
                logger.error(colorize(f"Command failed: {cmd_str}", TermColors.ERROR, self.colored_output))
                logger.error(f"Return code: {result.returncode}")
                logger.error(f"Stdout: {stdout}")
                logger.error(f"Stderr: {stderr}")
                raise CommandFailedError(
                    f"{cmd_str} exited with status {result.returncode}: {(stderr or stdout).strip()}",
                    returncode=result.returncode,
                    output=stdout
                )
            logger.debug(f"Ignoring exit status {result.returncode} of {cmd_str}")

        return result

    def _execute(self, cmd: List[str], **kwargs) -> subprocess.CompletedProcess:
        """
        Launch the tool and wait for it, capturing raw output.

        Args:
            cmd: Command to run as list of strings
            **kwargs: Additional arguments to pass to subprocess.run

        Returns:
            CompletedProcess with stdout and stderr as bytes

        Raises:
            CommandFailedError: If the tool cannot be launched
        """
        try:
            return subprocess.run(cmd, capture_output=True, **kwargs)
        except OSError as e:
            logger.error(colorize(f"Command could not be started: {' '.join(cmd)}", TermColors.ERROR, self.colored_output))
            raise CommandFailedError(f"Unable to execute {' '.join(cmd)}: {e}") from e

    def decode(self, data: bytes, cmd_str: str = "") -> str:
        """
        Decode captured output with the configured encoding.

        Args:
            data: Captured bytes
            cmd_str: Command line, for the error message

        Returns:
            Decoded text

        Raises:
            CommandDecodingFailed: If the bytes are not valid in the encoding
        """
        if not data:
            return ""
        try:
            return data.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise CommandDecodingFailed(
                f"Output of '{cmd_str}' could not be decoded as {self.encoding}: {e}"
            ) from e

    def _simulate_command(self, cmd: List[str]) -> subprocess.CompletedProcess:
        """
        Generate simulated output for a command.

        Args:
            cmd: Command to simulate

        Returns:
            CompletedProcess with simulated output
        """
        # Create a base result with empty output
        result = subprocess.CompletedProcess(
            args=list(cmd),
            returncode=0,
            stdout="",
            stderr=""
        )

        # Get command base name
        cmd_name = os.path.basename(cmd[0]) if cmd else ""

        # Handle common commands by name
        if cmd_name == "hdiutil":
            return self._handle_hdiutil_simulation(cmd, result)
        elif cmd_name == "diskutil":
            return self._handle_diskutil_simulation(cmd, result)
        elif cmd_name == "newfs_hfs":
            result.stdout = f"Initialized {cmd[-1]} as a HFS Plus volume with a journal\n"
        elif cmd_name == "mdutil":
            result.stdout = f"{cmd[1]}:\n\tIndexing enabled.\n"

        # mount, mkdir: an empty mount table and a silent mkdir
        return result

    def _new_simulated_disk(self) -> str:
        disk = f"disk{self._next_simulated_disk}"
        self._next_simulated_disk += 1
        return disk

    def _handle_hdiutil_simulation(self, cmd: List[str], result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
        """Simulate hdiutil command output"""
        if "attach" in cmd:
            result.stdout = f"/dev/{self._new_simulated_disk()}          \t \t\n"
        return result

    def _handle_diskutil_simulation(self, cmd: List[str], result: subprocess.CompletedProcess) -> subprocess.CompletedProcess:
        """Simulate diskutil command output"""
        if "createContainer" in cmd:
            source = os.path.basename(cmd[-1])
            container = self._new_simulated_disk()
            result.stdout = (
                f"Started APFS operation on {source}\n"
                f"Creating a new empty APFS Container\n"
                f"Disk from APFS operation: {container}\n"
                f"Finished APFS operation on {source}\n"
            )
        elif "addVolume" in cmd:
            container = cmd[cmd.index("addVolume") + 1]
            result.stdout = (
                f"Exporting new APFS Volume from APFS Container Reference {container}\n"
                f"Disk from APFS operation: {container}s1\n"
                f"Finished APFS operation on {container}\n"
            )
        elif "mount" in cmd:
            result.stdout = f"Volume on {cmd[-1]} mounted\n"
        elif "info" in cmd:
            # Nothing is mounted yet on the simulated system
            result.returncode = 1
            result.stdout = f"Could not find disk: {cmd[-1]}\n"

        return result

    def get_simulation_report(self) -> str:
        """
        Generate a report of all simulated commands.

        Returns:
            Formatted string with report of simulated commands
        """
        if self.simulation_mode != SimulationMode.SIMULATE:
            return "Simulation mode is not active."

        report = []
        report.append("=" * 80)
        report.append(f"SIMULATION REPORT [ID: {self.simulation_id}]")
        report.append("=" * 80)
        report.append("")

        # Group commands by type
        command_groups: Dict[str, List[dict]] = {}
        for cmd_record in self.commands_run:
            cmd = cmd_record["command"]
            cmd_type = os.path.basename(cmd[0]) if cmd else "unknown"
            command_groups.setdefault(cmd_type, []).append(cmd_record)

        # Report by command type
        for cmd_type, cmd_records in command_groups.items():
            report.append(f"{cmd_type.upper()} COMMANDS:")
            report.append("-" * 40)

            for i, cmd_record in enumerate(cmd_records, 1):
                cmd_str = ' '.join(cmd_record["command"])
                report.append(f"{i}. {cmd_str}")

            report.append("")

        # Summary
        report.append("-" * 80)
        report.append(f"Total commands simulated: {len(self.commands_run)}")
        report.append("=" * 80)

        return "\n".join(report)
