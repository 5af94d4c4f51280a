"""
Doctor error types.

All errors inherit from DoctorError for easy catching.

Two tiers:
- CommandError and subclasses are diagnostic failures. Probes recover them
  into a Failed verdict and the pipeline keeps going.
- PipelineAbortedError is an orchestration fault. The run stops and the
  exit path reports non-zero with the triggering error attached.
"""

from typing import List, Optional, Sequence


class DoctorError(Exception):
    """Base exception for all doctor failures."""
    pass


# =============================================================================
# Host command errors (diagnostic tier)
# =============================================================================

class CommandError(DoctorError):
    """Raised when an external command cannot produce a usable result."""

    def __init__(self, command: Sequence[str], message: str):
        self.command = list(command)
        super().__init__(message)


class CommandNotFoundError(CommandError):
    """Raised when the executable of a command cannot be resolved."""

    def __init__(self, command: Sequence[str]):
        super().__init__(command, f"Command not found: {command[0]}")


class CommandNotRunnableError(CommandError):
    """Raised when an executable exists but the OS refuses to start it."""

    def __init__(self, command: Sequence[str], error: OSError):
        self.error = error
        reason = error.strerror or str(error)
        super().__init__(command, f"Cannot run {command[0]}: {reason}")


class CommandFailedError(CommandError):
    """Raised when a command exits with a non-zero status."""

    def __init__(self, command: Sequence[str], returncode: int, output: str = ""):
        self.returncode = returncode
        self.output = output
        message = f"Command failed: {' '.join(command)} (exit {returncode})"
        if output.strip():
            message = f"{message}\n{output.strip()}"
        super().__init__(command, message)


class CommandTimeoutError(CommandError):
    """Raised when a command does not complete within its timeout."""

    def __init__(self, command: Sequence[str], timeout: float):
        self.timeout = timeout
        super().__init__(
            command,
            f"Command timed out after {timeout:g}s: {' '.join(command)}",
        )


# =============================================================================
# Orchestration errors
# =============================================================================

class GateStateError(DoctorError):
    """Raised when a gate key is written more than once in a run."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Gate '{key}' has already been written in this run")


class PipelineDefinitionError(DoctorError):
    """Raised when a pipeline definition breaks its ordering rules."""
    pass


class PipelineAbortedError(DoctorError):
    """
    Raised when a probe faults instead of returning a verdict.

    Carries the partial result sequence, already completed with a skipped
    verdict for every probe that never reported.
    """

    def __init__(self, probe_name: str, cause: BaseException, verdicts: Optional[List] = None):
        self.probe_name = probe_name
        self.cause = cause
        self.verdicts = list(verdicts or [])
        super().__init__(f"Pipeline aborted in probe '{probe_name}': {cause!r}")


class SettingsError(DoctorError):
    """Raised when doctor settings cannot be loaded."""
    pass
