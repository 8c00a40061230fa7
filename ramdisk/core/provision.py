"""
RAM disk provisioning workflow.

This module sequences detection, allocation, formatting, mounting and
Spotlight registration. Each run is a single attempt: a failed step ends the
run without undoing earlier steps, and running the tool again is the retry.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from ramdisk.config import RamDiskConfig
from ramdisk.core.disk import create_ram_disk, ram_disk_exists
from ramdisk.core.exceptions import RamDiskError
from ramdisk.core.filesystem import get_filesystem_policy
from ramdisk.core.mount import mount_ram_disk
from ramdisk.core.spotlight import enable_spotlight_indexing
from ramdisk.utils.command import CommandRunner
from ramdisk.utils.format import TermColors, colorize

logger = logging.getLogger('ramdisk')


class ProvisionState(Enum):
    """States of the provisioning workflow"""
    START = "start"
    CHECK_EXISTING = "check_existing"
    ALREADY_MOUNTED = "already_mounted"
    ALLOCATING = "allocating"
    FORMATTING = "formatting"
    MOUNTING = "mounting"
    INDEXING = "indexing"
    DONE = "done"
    FAILED = "failed"


TERMINAL_STATES = {ProvisionState.ALREADY_MOUNTED, ProvisionState.DONE, ProvisionState.FAILED}


@dataclass
class ProvisionResult:
    """Outcome of one provisioning run"""
    state: ProvisionState
    message: str
    device: Optional[str] = None
    indexed: bool = False
    states: List[ProvisionState] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.state in (ProvisionState.ALREADY_MOUNTED, ProvisionState.DONE)


class RamDiskProvisioner:
    """
    State machine creating the Derived Data RAM disk.

    Each state handler performs one step and returns the next state.
    """
    def __init__(self, config: RamDiskConfig, cmd_runner: CommandRunner):
        self.config = config
        self.cmd_runner = cmd_runner
        self.filesystem = get_filesystem_policy(config, cmd_runner)
        self.state = ProvisionState.START
        self.states: List[ProvisionState] = [ProvisionState.START]
        self.disk: Optional[str] = None
        self.device: Optional[str] = None
        self.indexed = False
        self.message = ""

    def _transition(self, state: ProvisionState) -> None:
        logger.debug(f"{self.state.value} -> {state.value}")
        self.state = state
        self.states.append(state)

    def _check_existing(self) -> ProvisionState:
        if ram_disk_exists(self.config, self.cmd_runner):
            self.message = "RAM disk for Derived Data already exists."
            return ProvisionState.ALREADY_MOUNTED
        return ProvisionState.ALLOCATING

    def _allocate(self) -> ProvisionState:
        self.disk = create_ram_disk(self.config, self.cmd_runner)
        if self.disk is None:
            self.message = "Unable to create RAM disk."
            return ProvisionState.FAILED
        return ProvisionState.FORMATTING

    def _format(self) -> ProvisionState:
        self.device = self.filesystem.provision(self.disk)
        return ProvisionState.MOUNTING

    def _mount(self) -> ProvisionState:
        mount_ram_disk(self.device, self.config, self.cmd_runner)
        return ProvisionState.INDEXING

    def _index(self) -> ProvisionState:
        self.indexed = enable_spotlight_indexing(self.config, self.cmd_runner)
        self.message = "Created RAM disk."
        return ProvisionState.DONE

    def run(self) -> ProvisionResult:
        """
        Run the workflow to a terminal state.

        Returns:
            ProvisionResult describing the terminal state
        """
        handlers = {
            ProvisionState.CHECK_EXISTING: self._check_existing,
            ProvisionState.ALLOCATING: self._allocate,
            ProvisionState.FORMATTING: self._format,
            ProvisionState.MOUNTING: self._mount,
            ProvisionState.INDEXING: self._index,
        }

        self._transition(ProvisionState.CHECK_EXISTING)
        while self.state not in TERMINAL_STATES:
            try:
                next_state = handlers[self.state]()
            except RamDiskError as e:
                logger.error(colorize(f"{self.state.value} failed: {e}",
                                      TermColors.ERROR, self.cmd_runner.colored_output))
                self.message = f"Unable to create RAM disk: {e}"
                next_state = ProvisionState.FAILED
            self._transition(next_state)

        return ProvisionResult(
            state=self.state,
            message=self.message,
            device=self.device,
            indexed=self.indexed,
            states=list(self.states)
        )


def setup_ram_disk(config: RamDiskConfig, cmd_runner: CommandRunner) -> ProvisionResult:
    """
    Create and mount the Derived Data RAM disk unless it is already mounted.

    Args:
        config: RAM disk configuration
        cmd_runner: CommandRunner instance for executing commands

    Returns:
        ProvisionResult for the run
    """
    logger.info("Setting up RAM disk for Xcode.")
    result = RamDiskProvisioner(config, cmd_runner).run()

    if result.success:
        logger.info(colorize(result.message, TermColors.SUCCESS, cmd_runner.colored_output))
    else:
        logger.error(colorize(result.message, TermColors.ERROR, cmd_runner.colored_output))
    return result
