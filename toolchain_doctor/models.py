"""
Immutable result models.

A Verdict is produced by exactly one probe execution (or by the runner when
a gated probe is skipped). Summaries and reports are read-only views derived
from the verdict sequence.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Outcome(str, Enum):
    """Verdict outcome."""
    OK = "ok"
    FAILED = "failed"
    SKIPPED = "skipped"


class Verdict(BaseModel):
    """
    Result of a single probe.

    Attributes:
        name: Stable identifier of the probe (e.g., "git_connection")
        outcome: ok | failed | skipped
        description: What was checked and what came out of it
        hint: Remediation text, may span several lines
        cause: Underlying error detail, only on failed verdicts
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    outcome: Outcome
    description: str
    hint: str = ""
    cause: Optional[str] = None

    @model_validator(mode="after")
    def validate_cause_only_on_failure(self) -> "Verdict":
        if self.cause is not None and self.outcome != Outcome.FAILED:
            raise ValueError(f"cause is only allowed on failed verdicts (got {self.outcome.value})")
        return self

    @classmethod
    def passed(cls, name: str, description: str, hint: str = "") -> "Verdict":
        return cls(name=name, outcome=Outcome.OK, description=description, hint=hint)

    @classmethod
    def failure(
        cls,
        name: str,
        description: str,
        hint: str = "",
        cause: Optional[str] = None,
    ) -> "Verdict":
        return cls(
            name=name,
            outcome=Outcome.FAILED,
            description=description,
            hint=hint,
            cause=cause,
        )

    @classmethod
    def skip(cls, name: str, description: str, hint: str = "") -> "Verdict":
        return cls(name=name, outcome=Outcome.SKIPPED, description=description, hint=hint)

    @property
    def ok(self) -> bool:
        return self.outcome == Outcome.OK

    @property
    def failed(self) -> bool:
        return self.outcome == Outcome.FAILED

    @property
    def skipped(self) -> bool:
        return self.outcome == Outcome.SKIPPED

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        result = {
            "name": self.name,
            "outcome": self.outcome.value,
            "description": self.description,
        }
        if self.hint:
            result["hint"] = self.hint
        if self.cause is not None:
            result["cause"] = self.cause
        return result


class Summary(BaseModel):
    """Outcome counts over a verdict sequence. Ok is implicit."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total: int = Field(ge=0)
    failed: int = Field(ge=0)
    skipped: int = Field(ge=0)

    @property
    def ok(self) -> int:
        return self.total - self.failed - self.skipped

    @property
    def ready(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "ok": self.ok,
            "failed": self.failed,
            "skipped": self.skipped,
        }


class DoctorReport(BaseModel):
    """
    Structured report of a complete (or aborted) run.

    Attributes:
        version: toolchain-doctor version string
        ready: True when no probe failed and the run was not aborted
        timestamp: Report generation time (ISO format)
        summary: Outcome counts
        verdicts: One verdict per pipeline entry, in pipeline order
        error: Abort message when the pipeline faulted
    """

    model_config = ConfigDict(extra="forbid")

    version: str
    ready: bool
    summary: Summary
    verdicts: List[Verdict]
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    error: Optional[str] = None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON output."""
        result = {
            "version": self.version,
            "ready": self.ready,
            "timestamp": self.timestamp,
            "summary": self.summary.to_dict(),
            "verdicts": [v.to_dict() for v in self.verdicts],
        }
        if self.error is not None:
            result["error"] = self.error
        return result

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
