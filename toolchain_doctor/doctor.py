"""
Doctor entry point for host programs.

run() builds the default pipeline, runs it, prints the report and returns
the process exit code. A fatal abort is reported, never raised.
"""

import logging
import sys
from typing import Callable, List, Optional, TextIO

from .errors import PipelineAbortedError
from .host import HostEnvironment
from .models import Verdict
from .pipeline import PipelineDefinition, PipelineRunner, default_pipeline
from .report import exit_code_for, render, render_abort, summarize
from .settings import DoctorSettings

logger = logging.getLogger(__name__)

# callback(error, verdicts); error is None unless the pipeline aborted
DoctorCallback = Callable[[Optional[PipelineAbortedError], List[Verdict]], None]


def collect(
    settings: Optional[DoctorSettings] = None,
    host: Optional[HostEnvironment] = None,
    definition: Optional[PipelineDefinition] = None,
) -> tuple:
    """
    Run the pipeline without printing anything.

    Returns:
        Tuple of (verdicts, error). error is the PipelineAbortedError of an
        aborted run, else None.
    """
    definition = definition or default_pipeline(settings or DoctorSettings())
    runner = PipelineRunner(host)
    try:
        return runner.run(definition), None
    except PipelineAbortedError as e:
        logger.error(f"[DOCTOR] {e}")
        return e.verdicts, e


def run(
    callback: Optional[DoctorCallback] = None,
    *,
    settings: Optional[DoctorSettings] = None,
    host: Optional[HostEnvironment] = None,
    definition: Optional[PipelineDefinition] = None,
    stream: Optional[TextIO] = None,
    err_stream: Optional[TextIO] = None,
    color: Optional[bool] = None,
) -> int:
    """
    Run the doctor and print its report.

    Args:
        callback: Called as callback(error, verdicts) once the run ends
        settings: Pipeline settings (defaults, or DOCTOR_* overrides via
            DoctorSettings.from_env())
        host: Host collaborators (the real machine by default)
        definition: Pipeline to run instead of the default one
        stream: Output for verdict lines and the success message
        err_stream: Output for the warning line and abort message
        color: Force ANSI colors on or off (default: when stream is a tty)

    Returns:
        0 when no probe failed, 1 on any failure or abort
    """
    stream = stream or sys.stdout
    err_stream = err_stream or sys.stderr
    if color is None:
        color = hasattr(stream, "isatty") and stream.isatty()

    verdicts, error = collect(settings, host, definition)
    summary = summarize(verdicts)

    if error is None:
        render(verdicts, summary, stream=stream, err_stream=err_stream, color=color)
    else:
        render_abort(err_stream, color=color)

    if callback is not None:
        callback(error, verdicts)

    return exit_code_for(summary, aborted=error is not None)
