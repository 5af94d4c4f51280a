"""
Gate state shared between probes of a single run.

A gate is a boolean fact (e.g. "git is available") written by the probe that
owns it and read by later probes to decide whether they run or are skipped.
Every gate starts False, is written at most once, and lives for one run.
"""

from enum import Enum
from typing import Dict, Set

from .errors import GateStateError


class GateKey(str, Enum):
    """Facts published by upstream probes."""
    GIT_AVAILABLE = "git-available"
    BUILD_TOOL_AVAILABLE = "build-tool-available"
    SCRIPTING_RUNTIME_AVAILABLE = "scripting-runtime-available"
    JDK_AVAILABLE = "jdk-available"


class GateState:
    """Per-run gate facts. Not thread-safe; probes run one at a time."""

    def __init__(self):
        self._facts: Dict[GateKey, bool] = {key: False for key in GateKey}
        self._written: Set[GateKey] = set()

    def set(self, key: GateKey, value: bool) -> None:
        key = GateKey(key)
        if key in self._written:
            raise GateStateError(key.value)
        self._facts[key] = bool(value)
        self._written.add(key)

    def get(self, key: GateKey) -> bool:
        return self._facts.get(GateKey(key), False)

    def written(self, key: GateKey) -> bool:
        return GateKey(key) in self._written

    def snapshot(self) -> Dict[str, bool]:
        """Current facts keyed by gate name, for logging and reports."""
        return {key.value: value for key, value in self._facts.items()}
