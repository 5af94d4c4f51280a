"""
Doctor report - summary, terminal rendering and exit code.

Everything here is derived from the verdict sequence alone: the summary is
a count of outcomes, the terminal text is a view of the verdicts, and the
exit code follows from the failure count.
"""

import sys
from typing import List, Optional, Sequence, TextIO

from . import __version__
from .models import DoctorReport, Outcome, Summary, Verdict

SUCCESS_MESSAGE = "Your system is ready!"
ABORT_MESSAGE = "Error: toolchain-doctor was aborted unexpectedly!"

EXIT_OK = 0
EXIT_FAILED = 1

_MARKS = {
    Outcome.OK: ("✔", "\033[92m"),  # green
    Outcome.FAILED: ("✘", "\033[91m"),  # red
    Outcome.SKIPPED: ("─", "\033[91m"),  # red
}
_GRAY = "\033[90m"
_GREEN = "\033[92m"
_RED = "\033[91m"
_RESET = "\033[0m"


def summarize(verdicts: Sequence[Verdict]) -> Summary:
    """Count failed and skipped verdicts."""
    return Summary(
        total=len(verdicts),
        failed=sum(1 for v in verdicts if v.outcome == Outcome.FAILED),
        skipped=sum(1 for v in verdicts if v.outcome == Outcome.SKIPPED),
    )


def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def summary_line(summary: Summary) -> str:
    """
    Final line of the report.

    "Your system is ready!" when nothing failed, whatever was skipped.
    Otherwise "Detected N warning(s)." followed by "Skipped M test(s)."
    when anything was skipped.
    """
    if summary.failed == 0:
        return SUCCESS_MESSAGE
    line = f"Detected {_plural(summary.failed, 'warning')}."
    if summary.skipped:
        line += f" Skipped {_plural(summary.skipped, 'test')}."
    return line


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{_RESET}" if color else text


def _indent(text: str, prefix: str) -> str:
    return prefix + text.replace("\n", "\n" + prefix)


def format_verdict(verdict: Verdict, color: bool = False) -> str:
    """One verdict as a mark line plus indented cause and hint."""
    symbol, code = _MARKS[verdict.outcome]
    lines = [_indent(f"{_paint(symbol, code, color)} {verdict.description}", " ")]
    if verdict.cause:
        lines.append(_indent(_paint(verdict.cause.strip(), _RED, color), "     "))
    if verdict.hint:
        lines.append(_indent(_paint(verdict.hint, _GRAY, color), "     "))
    return "\n".join(lines)


def format_report_terminal(
    verdicts: Sequence[Verdict],
    summary: Optional[Summary] = None,
    color: bool = False,
) -> str:
    """
    Format the full report for terminal output.

    Args:
        verdicts: Verdicts in pipeline order
        summary: Precomputed summary (computed from verdicts when omitted)
        color: Wrap marks and messages in ANSI colors

    Returns:
        Verdict lines, a blank line, then the summary line
    """
    summary = summary or summarize(verdicts)
    lines = [format_verdict(v, color) for v in verdicts]
    lines.append("")
    code = _GREEN if summary.ready else _RED
    lines.append(_paint(summary_line(summary), code, color))
    return "\n".join(lines)


def render(
    verdicts: Sequence[Verdict],
    summary: Optional[Summary] = None,
    stream: Optional[TextIO] = None,
    err_stream: Optional[TextIO] = None,
    color: bool = False,
) -> None:
    """
    Print the report.

    Verdict lines and the success message go to stream; the warning line
    goes to err_stream.
    """
    stream = stream or sys.stdout
    err_stream = err_stream or sys.stderr
    summary = summary or summarize(verdicts)

    for verdict in verdicts:
        print(format_verdict(verdict, color), file=stream)

    code = _GREEN if summary.ready else _RED
    target = stream if summary.ready else err_stream
    print("\n" + _paint(summary_line(summary), code, color), file=target)


def render_abort(err_stream: Optional[TextIO] = None, color: bool = False) -> None:
    print(_paint(ABORT_MESSAGE, _RED, color), file=err_stream or sys.stderr)


def exit_code_for(summary: Summary, aborted: bool = False) -> int:
    """0 when nothing failed and the run completed, 1 otherwise."""
    if aborted or summary.failed:
        return EXIT_FAILED
    return EXIT_OK


def build_report(verdicts: List[Verdict], error: Optional[BaseException] = None) -> DoctorReport:
    """Structured report for JSON output."""
    summary = summarize(verdicts)
    return DoctorReport(
        version=__version__,
        ready=error is None and summary.ready,
        summary=summary,
        verdicts=list(verdicts),
        error=str(error) if error is not None else None,
    )
