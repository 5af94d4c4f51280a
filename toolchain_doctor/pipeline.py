"""
Doctor pipeline - the fixed, ordered list of probes and the runner.

The runner walks the definition once, in order. An entry gated on a fact
that an earlier probe did not establish is skipped without touching the
host. Every entry yields exactly one verdict.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional
from urllib.parse import urlsplit

from .errors import PipelineAbortedError, PipelineDefinitionError
from .gates import GateKey, GateState
from .host import HostEnvironment
from .models import Verdict
from .probes import (
    CompanionCliProbe,
    Probe,
    ReachabilityProbe,
    ToolHomeProbe,
    ToolPresenceProbe,
    VersionProbe,
)
from .settings import DoctorSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineEntry:
    """A probe plus the gate it waits on, if any."""
    probe: Probe
    requires: Optional[GateKey] = None
    skip_description: str = ""

    def __post_init__(self):
        if self.requires is not None:
            object.__setattr__(self, "requires", GateKey(self.requires))

    @property
    def name(self) -> str:
        return self.probe.name

    def skipped_verdict(self, reason: str = "") -> Verdict:
        description = self.skip_description or f"Skip {self.name} test."
        return Verdict.skip(self.name, description, reason)


class PipelineDefinition:
    """
    Ordered probe list.

    Construction enforces:
    - probe names are unique
    - each gate key is provided by at most one probe
    - a required gate is provided by a strictly earlier probe
    """

    def __init__(self, entries: Iterable[PipelineEntry]):
        self.entries = tuple(entries)
        self._owners = {}
        self._validate()

    def _validate(self) -> None:
        names = set()
        for index, entry in enumerate(self.entries):
            if entry.name in names:
                raise PipelineDefinitionError(f"Duplicate probe name: {entry.name}")
            names.add(entry.name)

            if entry.requires is not None:
                key = GateKey(entry.requires)
                if key not in self._owners:
                    raise PipelineDefinitionError(
                        f"Probe '{entry.name}' (position {index}) requires gate "
                        f"'{key.value}', which no earlier probe provides"
                    )
                if not entry.skip_description:
                    raise PipelineDefinitionError(
                        f"Gated probe '{entry.name}' has no skip description"
                    )

            provides = entry.probe.provides
            if provides is not None:
                if provides in self._owners:
                    raise PipelineDefinitionError(
                        f"Gate '{provides.value}' is provided by both "
                        f"'{self._owners[provides]}' and '{entry.name}'"
                    )
                self._owners[provides] = entry.name

    def owner_of(self, key: GateKey) -> Optional[str]:
        """Name of the probe that writes a gate key."""
        return self._owners.get(GateKey(key))

    @property
    def names(self) -> List[str]:
        return [entry.name for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)


# =============================================================================
# Default Pipeline
# =============================================================================

def _path_hint(step: str) -> str:
    return f"{step}\n2. Set the installation directory to PATH if you haven't."


def _npm_hint(tool: str, package: str) -> str:
    return f"Install {tool} using npm command:\n  $ npm install -g {package}"


def default_pipeline(settings: Optional[DoctorSettings] = None) -> PipelineDefinition:
    """Build the standard 12-probe front-end toolchain pipeline."""
    settings = settings or DoctorSettings()
    git_host = _url_host(settings.git_probe_url)
    grunt_cli_hint = _npm_hint("Grunt CLI", "grunt-cli")

    return PipelineDefinition([
        PipelineEntry(VersionProbe(
            "node_version",
            ["node", "--version"],
            floor=settings.min_node_version,
            tool="Node.js",
            install_hint="You can install Node.js from here.\nhttp://nodejs.org/",
            timeout=settings.command_timeout_seconds,
        )),
        PipelineEntry(ToolPresenceProbe(
            "git",
            "git",
            found="Git is installed.",
            missing="Git is not found on your computer.",
            hint=_path_hint("1. Install Git.\n   http://git-scm.com/"),
            provides=GateKey.GIT_AVAILABLE,
        )),
        PipelineEntry(
            ReachabilityProbe(
                "git_connection",
                ["git", "ls-remote", settings.git_probe_url, "HEAD"],
                target=git_host,
                hint=(
                    "1. Check the Internet connection.\n"
                    "2. If you are using HTTP proxy, try this command:\n"
                    '     $ git config --global url."https://".insteadOf git://'
                ),
                timeout=settings.network_timeout_seconds,
            ),
            requires=GateKey.GIT_AVAILABLE,
            skip_description="Skip Git connection test.",
        ),
        PipelineEntry(ToolPresenceProbe(
            "yeoman",
            "yo",
            found="Yeoman is installed.",
            missing="Yeoman is not found on your computer.",
            hint=_npm_hint("Yeoman", "yo"),
        )),
        PipelineEntry(ToolPresenceProbe(
            "grunt",
            "grunt",
            found="Grunt is installed.",
            missing="Grunt is not found on your computer.",
            hint=grunt_cli_hint,
            provides=GateKey.BUILD_TOOL_AVAILABLE,
        )),
        PipelineEntry(
            CompanionCliProbe(
                "grunt_cli",
                ["grunt", "--version"],
                expected="grunt-cli",
                found="You can use Grunt CLI.",
                broken="Your Grunt is not installed correctly.",
                broken_hint=grunt_cli_hint,
                missing="grunt-cli is not found.",
                missing_hint=(
                    "Your Grunt might be old version.\n"
                    "If you have installed Grunt ver. -0.3, run:\n"
                    "  $ npm uninstall -g grunt\n\n"
                    "And then, install Grunt CLI:\n"
                    "  $ npm install -g grunt-cli"
                ),
                timeout=settings.command_timeout_seconds,
                tolerant=not settings.strict_companion_cli,
            ),
            requires=GateKey.BUILD_TOOL_AVAILABLE,
            skip_description="Skip Grunt CLI test.",
        ),
        PipelineEntry(ToolPresenceProbe(
            "bower",
            "bower",
            found="Bower is installed.",
            missing="Bower is not found on your computer.",
            hint=_npm_hint("Bower", "bower"),
        )),
        PipelineEntry(ToolPresenceProbe(
            "ruby",
            "ruby",
            found="Ruby is installed.",
            missing="Ruby is not found on your computer.",
            hint=_path_hint("1. Install Ruby.\n   https://www.ruby-lang.org/"),
            provides=GateKey.SCRIPTING_RUNTIME_AVAILABLE,
        )),
        PipelineEntry(
            ToolPresenceProbe(
                "compass",
                "compass",
                found="Compass is installed.",
                missing="Compass is not found on your computer.",
                hint=(
                    "1. Install Compass using gem:\n"
                    "     $ gem install compass\n"
                    "2. Set the installation directory to PATH if you haven't."
                ),
            ),
            requires=GateKey.SCRIPTING_RUNTIME_AVAILABLE,
            skip_description="Skip Compass installation test.",
        ),
        PipelineEntry(ToolPresenceProbe(
            "gulp",
            "gulp",
            found="Gulp is installed.",
            missing="Gulp is not found on your computer.",
            hint=_npm_hint("gulp", "gulp"),
        )),
        PipelineEntry(ToolPresenceProbe(
            "java",
            "javac",
            found="JDK is installed.",
            missing="JDK is not found on your computer.",
            hint=_path_hint(
                "1. Install JDK.\n"
                "   http://www.oracle.com/technetwork/java/javase/downloads/index.html"
            ),
            provides=GateKey.JDK_AVAILABLE,
        )),
        PipelineEntry(
            ToolHomeProbe(
                "maven",
                "mvn",
                settings.maven_home_variable,
                tool="Maven",
                install_hint=_path_hint("1. Install Maven.\n   http://maven.apache.org/"),
                variable_hint=(
                    f"Set {settings.maven_home_variable} to the installation "
                    "directory where you have installed Maven."
                ),
            ),
            requires=GateKey.JDK_AVAILABLE,
            skip_description="Skip Maven installation test.",
        ),
    ])


def _url_host(url: str) -> str:
    """
    Scheme and host of a remote URL, without path or credentials.

    'git://github.com/a/b.git' -> 'git://github.com'. Remotes that are not URLs
    (scp-style 'git@github.com:a/b.git') are shown as given.
    """
    try:
        parts = urlsplit(url)
        host = parts.hostname
        port = parts.port
    except ValueError:
        return url
    if not parts.scheme or not host:
        return url
    return f"{parts.scheme}://{host}:{port}" if port else f"{parts.scheme}://{host}"


# =============================================================================
# Runner
# =============================================================================

class PipelineRunner:
    """Runs a PipelineDefinition against a host, one probe at a time."""

    def __init__(self, host: Optional[HostEnvironment] = None):
        self.host = host or HostEnvironment()

    def run(self, definition: PipelineDefinition, gates: Optional[GateState] = None) -> List[Verdict]:
        """
        Run every entry once, in order.

        Args:
            definition: Probes to run
            gates: Gate state to use (fresh all-false state by default)

        Returns:
            One verdict per entry, in definition order

        Raises:
            PipelineAbortedError: A probe raised or returned a non-verdict.
                The error carries the verdicts collected so far followed by
                a skipped verdict for each entry that never reported.
        """
        gates = gates if gates is not None else GateState()
        verdicts: List[Verdict] = []
        entries = list(definition)

        logger.info(f"[PIPELINE] Starting {len(entries)} probes")
        for index, entry in enumerate(entries):
            if entry.requires is not None and not gates.get(entry.requires):
                owner = definition.owner_of(entry.requires)
                logger.info(f"[PIPELINE] {entry.name}: skipped ({entry.requires.value} not set)")
                verdicts.append(entry.skipped_verdict(
                    f"Requires a passing '{owner}' check."
                ))
                continue

            try:
                verdict = entry.probe.execute(gates, self.host)
                if not isinstance(verdict, Verdict):
                    raise TypeError(
                        f"probe returned {type(verdict).__name__}, expected Verdict"
                    )
            except Exception as e:
                logger.error(f"[PIPELINE] {entry.name}: aborted with {e!r}")
                for remaining in entries[index:]:
                    verdicts.append(remaining.skipped_verdict("Pipeline aborted."))
                raise PipelineAbortedError(entry.name, e, verdicts) from e

            logger.info(f"[PIPELINE] {entry.name}: {verdict.outcome.value}")
            verdicts.append(verdict)

        logger.debug(f"[PIPELINE] Gates: {gates.snapshot()}")
        return verdicts
