"""
Host collaborators used by probes.

HostEnvironment bundles the three things a probe may ask of the machine:
- run an external command and capture its output
- look an executable up on PATH
- read an environment variable

Probes only ever talk to the host through this object, so tests can swap in
a recording fake and assert that a skipped probe never touched the machine.
"""

import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from .errors import (
    CommandFailedError,
    CommandNotFoundError,
    CommandNotRunnableError,
    CommandTimeoutError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status and captured output of a finished command."""
    command: tuple
    returncode: int
    stdout: str
    stderr: str


class HostEnvironment:
    """
    Real host: subprocess, shutil.which and os.environ.

    An injected environ replaces os.environ for all three operations,
    including the environment handed to commands.
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    def run(self, command: Sequence[str], timeout: float) -> CommandResult:
        """
        Run a command and wait for it to finish.

        Args:
            command: Executable followed by its arguments
            timeout: Seconds to wait before giving up

        Returns:
            CommandResult for a zero exit status

        Raises:
            CommandNotFoundError: Executable does not exist
            CommandNotRunnableError: Executable exists but could not be started
            CommandTimeoutError: Command did not finish in time
            CommandFailedError: Command exited non-zero
        """
        logger.debug(f"[HOST] run: {' '.join(command)} (timeout={timeout:g}s)")
        try:
            completed = subprocess.run(
                list(command),
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
                env=dict(self._environ) if self._environ is not None else None,
            )
        except FileNotFoundError as e:
            raise CommandNotFoundError(command) from e
        except subprocess.TimeoutExpired as e:
            raise CommandTimeoutError(command, timeout) from e
        except OSError as e:
            raise CommandNotRunnableError(command, e) from e

        if completed.returncode != 0:
            logger.debug(f"[HOST] exit={completed.returncode}: {' '.join(command)}")
            raise CommandFailedError(
                command,
                completed.returncode,
                completed.stderr or completed.stdout or "",
            )

        return CommandResult(
            command=tuple(command),
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    def which(self, name: str) -> Optional[str]:
        """Resolve an executable on PATH. None when not found."""
        # An injected environment without PATH searches the default path, like exec does
        search_path = self._environ.get("PATH", os.defpath) if self._environ is not None else None
        path = shutil.which(name, path=search_path)
        logger.debug(f"[HOST] which {name}: {path or 'not found'}")
        return path

    def getenv(self, name: str) -> Optional[str]:
        environ = self._environ if self._environ is not None else os.environ
        return environ.get(name)
