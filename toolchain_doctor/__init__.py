"""
toolchain-doctor - readiness checks for a front-end toolchain.

Runs a fixed, ordered pipeline of probes against the host (Node.js, Git,
Yeoman, Grunt, Bower, Ruby/Compass, gulp, JDK/Maven) and reports a verdict
per probe with remediation hints.

Principles:
- Explicit: Every probe yields exactly one ok / failed / skipped verdict
- Honest: Nothing is skipped silently, nothing is auto-fixed
- Actionable: Every failure carries a hint
"""

__version__ = "0.2.0"

from .errors import (
    CommandError,
    DoctorError,
    PipelineAbortedError,
    PipelineDefinitionError,
)
from .gates import GateKey, GateState
from .host import CommandResult, HostEnvironment
from .models import DoctorReport, Outcome, Summary, Verdict
from .pipeline import PipelineDefinition, PipelineEntry, PipelineRunner, default_pipeline
from .report import exit_code_for, format_report_terminal, render, summarize
from .settings import DoctorSettings
from .doctor import run

__all__ = [
    "__version__",
    # Errors
    "CommandError",
    "DoctorError",
    "PipelineAbortedError",
    "PipelineDefinitionError",
    # State and host
    "GateKey",
    "GateState",
    "CommandResult",
    "HostEnvironment",
    # Results
    "DoctorReport",
    "Outcome",
    "Summary",
    "Verdict",
    # Pipeline
    "PipelineDefinition",
    "PipelineEntry",
    "PipelineRunner",
    "default_pipeline",
    # Report
    "exit_code_for",
    "format_report_terminal",
    "render",
    "summarize",
    # Entry point
    "DoctorSettings",
    "run",
]
