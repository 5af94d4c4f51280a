"""
Pytest configuration and shared fixtures for doctor tests.

FakeHost stands in for HostEnvironment. It answers from dictionaries and
records every call, so tests can assert that a probe never touched the host.
"""

from typing import Dict, List, Optional, Sequence, Tuple

import pytest

from toolchain_doctor.errors import (
    CommandFailedError,
    CommandNotFoundError,
    CommandTimeoutError,
)
from toolchain_doctor.host import CommandResult

# Executables a fully ready machine has on PATH
READY_TOOLS = ["node", "git", "yo", "grunt", "bower", "ruby", "compass", "gulp", "javac", "mvn"]


class FakeHost:
    """Recording host. Commands answer from `outputs`, keyed by executable."""

    def __init__(
        self,
        tools: Sequence[str] = (),
        outputs: Optional[Dict[str, str]] = None,
        failing: Optional[Dict[str, int]] = None,
        timing_out: Sequence[str] = (),
        environ: Optional[Dict[str, str]] = None,
    ):
        self.tools = set(tools)
        self.outputs = dict(outputs or {})
        self.failing = dict(failing or {})
        self.timing_out = set(timing_out)
        self.environ = dict(environ or {})
        self.commands: List[Tuple[str, ...]] = []
        self.lookups: List[str] = []
        self.env_reads: List[str] = []

    def run(self, command, timeout):
        command = tuple(command)
        self.commands.append(command)
        executable = command[0]
        if executable not in self.tools:
            raise CommandNotFoundError(command)
        if executable in self.timing_out:
            raise CommandTimeoutError(command, timeout)
        if executable in self.failing:
            raise CommandFailedError(command, self.failing[executable], "fatal: error")
        return CommandResult(
            command=command,
            returncode=0,
            stdout=self.outputs.get(executable, ""),
            stderr="",
        )

    def which(self, name):
        self.lookups.append(name)
        return f"/usr/bin/{name}" if name in self.tools else None

    def getenv(self, name):
        self.env_reads.append(name)
        return self.environ.get(name)

    def touched(self, executable: str) -> bool:
        """True when executable was looked up or run."""
        return executable in self.lookups or any(c[0] == executable for c in self.commands)


def ready_host(**overrides) -> FakeHost:
    """A host on which every probe passes."""
    params = dict(
        tools=READY_TOOLS,
        outputs={"node": "v18.17.0\n", "grunt": "grunt-cli v1.4.3\ngrunt v1.6.1\n"},
        environ={"M2_HOME": "/opt/maven"},
    )
    params.update(overrides)
    return FakeHost(**params)


@pytest.fixture
def host():
    return ready_host()


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "network: marks tests that would need a real network (none run by default)"
    )
