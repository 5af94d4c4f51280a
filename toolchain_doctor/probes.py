"""
Doctor probes - individual diagnostic implementations.

Each probe follows the same pattern:
1. Inspect the host through HostEnvironment (PATH lookup, command, env var)
2. Classify the result into a Verdict:
   - name: stable identifier
   - outcome: ok | failed
   - description: factual explanation
   - hint: remediation text (not an action)
   - cause: underlying error, failed verdicts only
3. Publish its gate fact, when it owns one

Host failures (missing tool, non-zero exit, timeout) are diagnostic failures
and become Failed verdicts. Anything else raised inside a probe is a bug and
is left to the pipeline runner, which aborts the run.
"""

import logging
from typing import Optional, Sequence

from .errors import CommandError
from .gates import GateKey, GateState
from .host import HostEnvironment
from .models import Verdict
from .versions import VersionParseError, format_version, parse_version

logger = logging.getLogger(__name__)


class Probe:
    """
    Base class for all probes.

    Subclasses implement inspect(). execute() wraps it and writes the gate
    fact this probe owns as soon as the outcome is known.
    """

    def __init__(self, name: str, provides: Optional[GateKey] = None):
        self.name = name
        self.provides = GateKey(provides) if provides is not None else None

    def execute(self, gates: GateState, host: HostEnvironment) -> Verdict:
        verdict = self.inspect(host)
        if self.provides is not None and isinstance(verdict, Verdict):
            gates.set(self.provides, verdict.ok)
            logger.debug(f"[PROBE] {self.name} set {self.provides.value}={verdict.ok}")
        return verdict

    def inspect(self, host: HostEnvironment) -> Verdict:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


# =============================================================================
# Tool Presence
# =============================================================================

class ToolPresenceProbe(Probe):
    """Ok when an executable resolves on PATH."""

    def __init__(
        self,
        name: str,
        executable: str,
        found: str,
        missing: str,
        hint: str,
        provides: Optional[GateKey] = None,
    ):
        super().__init__(name, provides)
        self.executable = executable
        self.found = found
        self.missing = missing
        self.hint = hint

    def inspect(self, host: HostEnvironment) -> Verdict:
        path = host.which(self.executable)
        if not path:
            return Verdict.failure(
                self.name,
                self.missing,
                self.hint,
                cause=f"not found: {self.executable}",
            )
        return Verdict.passed(self.name, self.found)


# =============================================================================
# Version Floor
# =============================================================================

class VersionProbe(Probe):
    """
    Ok when the version printed by a command is at least a floor version.

    Output that holds no version number is a failure with the parse error as
    cause, never a crash.
    """

    def __init__(
        self,
        name: str,
        command: Sequence[str],
        floor: str,
        tool: str,
        install_hint: str,
        timeout: float,
        provides: Optional[GateKey] = None,
    ):
        super().__init__(name, provides)
        self.command = list(command)
        self.floor = floor
        self.tool = tool
        self.install_hint = install_hint
        self.timeout = timeout
        # Reject a bad floor when the pipeline is built, not mid-run.
        self.floor_version = parse_version(floor)

    def inspect(self, host: HostEnvironment) -> Verdict:
        try:
            result = host.run(self.command, timeout=self.timeout)
        except CommandError as e:
            return Verdict.failure(
                self.name,
                f"{self.tool} is not installed correctly.",
                self.install_hint,
                cause=str(e),
            )
        return self.classify(result.stdout)

    def classify(self, output: str) -> Verdict:
        """Compare version output against the floor."""
        floor_str = format_version(self.floor_version)
        try:
            installed = parse_version(output.strip())
        except VersionParseError as e:
            return Verdict.failure(
                self.name,
                f"Cannot determine your {self.tool} version.",
                f"Reinstall {self.tool} v{floor_str} or higher.\n{self.install_hint}",
                cause=str(e),
            )

        installed_str = format_version(installed)
        if installed < self.floor_version:
            return Verdict.failure(
                self.name,
                f"Your {self.tool} is outdated.",
                f"You have installed {self.tool} v{installed_str}.\n"
                f"Upgrade it to v{floor_str} or higher.\n"
                f"{self.install_hint}",
            )
        return Verdict.passed(self.name, f"You have installed supported version of {self.tool}.")


# =============================================================================
# Network Reachability
# =============================================================================

class ReachabilityProbe(Probe):
    """Ok when a network command (e.g. git ls-remote) completes in time."""

    def __init__(
        self,
        name: str,
        command: Sequence[str],
        target: str,
        hint: str,
        timeout: float,
    ):
        super().__init__(name)
        self.command = list(command)
        self.target = target
        self.hint = hint
        self.timeout = timeout

    def inspect(self, host: HostEnvironment) -> Verdict:
        try:
            host.run(self.command, timeout=self.timeout)
        except CommandError as e:
            logger.info(f"[PROBE] {self.name}: {self.target} unreachable")
            return Verdict.failure(
                self.name,
                f'Failed to connect to "{self.target}".',
                self.hint,
                cause=str(e),
            )
        return Verdict.passed(self.name, f'Successfully connected to "{self.target}".')


# =============================================================================
# Environment Variable
# =============================================================================

class EnvironmentVariableProbe(Probe):
    """Ok when an environment variable is set to a non-empty value."""

    def __init__(self, name: str, variable: str, hint: str, provides: Optional[GateKey] = None):
        super().__init__(name, provides)
        self.variable = variable
        self.hint = hint

    def inspect(self, host: HostEnvironment) -> Verdict:
        if not host.getenv(self.variable):
            return Verdict.failure(
                self.name,
                f"{self.variable} environment variable is not defined on your computer.",
                self.hint,
                cause=f"{self.variable} is not set",
            )
        return Verdict.passed(self.name, f"{self.variable} is defined.")


# =============================================================================
# Companion CLI
# =============================================================================

class CompanionCliProbe(Probe):
    """
    Ok when a command runs and its output mentions a companion package.

    When tolerant, a missing companion keeps the verdict Ok and only swaps in
    the degraded hint. This matches what users of older releases saw: the
    warning text printed, but the check still counted as passing.
    """

    def __init__(
        self,
        name: str,
        command: Sequence[str],
        expected: str,
        found: str,
        broken: str,
        broken_hint: str,
        missing: str,
        missing_hint: str,
        timeout: float,
        tolerant: bool = True,
    ):
        super().__init__(name)
        self.command = list(command)
        self.expected = expected
        self.found = found
        self.broken = broken
        self.broken_hint = broken_hint
        self.missing = missing
        self.missing_hint = missing_hint
        self.timeout = timeout
        self.tolerant = tolerant

    def inspect(self, host: HostEnvironment) -> Verdict:
        try:
            result = host.run(self.command, timeout=self.timeout)
        except CommandError as e:
            return Verdict.failure(self.name, self.broken, self.broken_hint, cause=str(e))

        if self.expected in result.stdout:
            return Verdict.passed(self.name, self.found)

        if self.tolerant:
            logger.warning(f"[PROBE] {self.name}: '{self.expected}' missing from version output")
            return Verdict.passed(self.name, self.found, hint=self.missing_hint)
        return Verdict.failure(
            self.name,
            self.missing,
            self.missing_hint,
            cause=f"'{self.expected}' not found in output of {' '.join(self.command)}",
        )


# =============================================================================
# Tool + Home Variable
# =============================================================================

class ToolHomeProbe(Probe):
    """
    Compound check: executable on PATH and its home variable defined.

    Used for tools like Maven that need both mvn on PATH and M2_HOME set.
    """

    def __init__(
        self,
        name: str,
        executable: str,
        variable: str,
        tool: str,
        install_hint: str,
        variable_hint: str,
        provides: Optional[GateKey] = None,
    ):
        super().__init__(name, provides)
        self.presence = ToolPresenceProbe(
            name,
            executable,
            found=f"{tool} is installed.",
            missing=f"{tool} is not found on your computer.",
            hint=install_hint,
        )
        self.home = EnvironmentVariableProbe(name, variable, variable_hint)

    def inspect(self, host: HostEnvironment) -> Verdict:
        verdict = self.presence.inspect(host)
        if not verdict.ok:
            return verdict
        home = self.home.inspect(host)
        if not home.ok:
            return home
        return verdict
