"""
Tests for summary counting, terminal rendering and exit codes.
"""

import io
import json

import pytest

from toolchain_doctor.models import Outcome, Summary, Verdict
from toolchain_doctor.report import (
    ABORT_MESSAGE,
    SUCCESS_MESSAGE,
    build_report,
    exit_code_for,
    format_report_terminal,
    format_verdict,
    render,
    render_abort,
    summarize,
    summary_line,
)


def _verdicts(ok=0, failed=0, skipped=0):
    verdicts = []
    verdicts += [Verdict.passed(f"ok{i}", "Fine.") for i in range(ok)]
    verdicts += [Verdict.failure(f"ng{i}", "Broken.", "Fix it.", cause="boom") for i in range(failed)]
    verdicts += [Verdict.skip(f"sk{i}", "Skip test.") for i in range(skipped)]
    return verdicts


class TestSummarize:

    @pytest.mark.parametrize("ok, failed, skipped", [
        (12, 0, 0),
        (0, 8, 4),
        (10, 1, 1),
        (0, 0, 0),
    ])
    def test_counts_add_up(self, ok, failed, skipped):
        summary = summarize(_verdicts(ok, failed, skipped))
        assert summary.failed == failed
        assert summary.skipped == skipped
        assert summary.ok == ok
        assert summary.ok + summary.failed + summary.skipped == summary.total


class TestSummaryLine:

    @pytest.mark.parametrize("failed, skipped, expected", [
        (0, 0, "Your system is ready!"),
        (0, 3, "Your system is ready!"),
        (1, 0, "Detected 1 warning."),
        (2, 0, "Detected 2 warnings."),
        (1, 1, "Detected 1 warning. Skipped 1 test."),
        (8, 4, "Detected 8 warnings. Skipped 4 tests."),
    ])
    def test_messages(self, failed, skipped, expected):
        summary = Summary(total=12, failed=failed, skipped=skipped)
        assert summary_line(summary) == expected


class TestFormatting:

    def test_failed_verdict_shows_cause_and_indented_hint(self):
        verdict = Verdict.failure("git", "Git is not found.", "1. Install Git.\n2. Set PATH.", cause="not found: git")
        text = format_verdict(verdict)
        assert text.splitlines() == [
            " ✘ Git is not found.",
            "     not found: git",
            "     1. Install Git.",
            "     2. Set PATH.",
        ]

    def test_marks(self):
        assert format_verdict(Verdict.passed("a", "A.")) == " ✔ A."
        assert format_verdict(Verdict.skip("b", "Skip B.")) == " ─ Skip B."

    def test_color_adds_ansi_codes(self):
        assert "\033[" in format_verdict(Verdict.passed("a", "A."), color=True)
        assert "\033[" not in format_verdict(Verdict.passed("a", "A."), color=False)

    def test_report_ends_with_summary_line(self):
        text = format_report_terminal(_verdicts(ok=1, failed=1, skipped=1))
        assert text.splitlines()[-1] == "Detected 1 warning. Skipped 1 test."


class TestRender:

    def test_success_goes_to_stdout(self):
        out, err = io.StringIO(), io.StringIO()
        render(_verdicts(ok=2, skipped=1), stream=out, err_stream=err)
        assert SUCCESS_MESSAGE in out.getvalue()
        assert err.getvalue() == ""

    def test_warning_goes_to_stderr(self):
        out, err = io.StringIO(), io.StringIO()
        render(_verdicts(ok=1, failed=2), stream=out, err_stream=err)
        assert "Broken." in out.getvalue()
        assert err.getvalue().strip() == "Detected 2 warnings."

    def test_abort_message(self):
        err = io.StringIO()
        render_abort(err)
        assert err.getvalue().strip() == ABORT_MESSAGE


class TestExitCode:

    def test_zero_failures(self):
        assert exit_code_for(Summary(total=3, failed=0, skipped=2)) == 0

    def test_any_failure(self):
        assert exit_code_for(Summary(total=3, failed=1, skipped=0)) == 1

    def test_abort_is_non_zero(self):
        assert exit_code_for(Summary(total=3, failed=0, skipped=3), aborted=True) == 1


class TestBuildReport:

    def test_json_shape(self):
        report = build_report(_verdicts(ok=1, failed=1))
        data = json.loads(report.to_json())
        assert data["ready"] is False
        assert data["summary"] == {"total": 2, "ok": 1, "failed": 1, "skipped": 0}
        assert data["verdicts"][1]["cause"] == "boom"
        assert "hint" not in data["verdicts"][0]
        assert "error" not in data

    def test_aborted_run_not_ready(self):
        report = build_report(_verdicts(skipped=2), error=RuntimeError("bug"))
        assert report.ready is False
        assert report.error == "bug"
        assert report.verdicts[0].outcome == Outcome.SKIPPED
