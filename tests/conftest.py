import os
import subprocess
from pathlib import Path

import pytest

from ramdisk.config import RamDiskConfig
from ramdisk.utils.command import CommandRunner, SimulationMode


FIXTURES = Path(__file__).parent / "fixtures"
HOME = Path("/Users/dev")
MOUNT_PATH = "/Users/dev/Library/Developer/Xcode/DerivedData"


def fixture_text(name):
    return (FIXTURES / name).read_text()


class FakeRunner(CommandRunner):
    """
    CommandRunner that answers from canned outputs instead of launching tools.

    responses maps leading command tokens, starting with the tool's base name,
    to an output. An output is text, bytes, a (returncode, text) tuple, an
    exception to raise, or a list of those consumed one per call (the last one
    repeats). The longest matching key wins; unknown commands print nothing.
    """

    def __init__(self, responses=None, check_exit_status=True, encoding="utf-8"):
        super().__init__(SimulationMode.DISABLED, colored_output=False,
                         encoding=encoding, check_exit_status=check_exit_status)
        self.responses = dict(responses or {})

    def _lookup(self, cmd):
        tokens = (os.path.basename(cmd[0]),) + tuple(cmd[1:])
        best = None
        for key in self.responses:
            if tokens[:len(key)] == key and (best is None or len(key) > len(best)):
                best = key
        if best is None:
            return ""
        response = self.responses[best]
        if isinstance(response, list):
            return response.pop(0) if len(response) > 1 else response[0]
        return response

    def _execute(self, cmd, **kwargs):
        response = self._lookup(cmd)
        if isinstance(response, Exception):
            raise response
        returncode = 0
        if isinstance(response, tuple):
            returncode, response = response
        if isinstance(response, str):
            response = response.encode("utf-8")
        return subprocess.CompletedProcess(list(cmd), returncode, stdout=response, stderr=b"")

    @property
    def commands(self):
        return [record["command"] for record in self.commands_run]

    def tool_names(self):
        return [os.path.basename(cmd[0]) for cmd in self.commands]

    def calls(self, *prefix):
        """Commands whose leading tokens (tool base name first) equal prefix."""
        return [
            cmd for cmd in self.commands
            if ((os.path.basename(cmd[0]),) + tuple(cmd[1:]))[:len(prefix)] == prefix
        ]


@pytest.fixture
def config() -> RamDiskConfig:
    return RamDiskConfig.default(home=HOME)


@pytest.fixture
def mount_table_config() -> RamDiskConfig:
    """Configuration relying on the mount table only."""
    return RamDiskConfig.default(home=HOME, prefer_structured_queries=False)


@pytest.fixture
def make_runner():
    def _make(responses=None, **kwargs):
        return FakeRunner(responses, **kwargs)
    return _make
