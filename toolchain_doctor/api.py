"""
Readiness API endpoint.

Exposes the doctor report as JSON so a dashboard or another service can ask
whether the machine it runs on is ready.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .doctor import collect
from .errors import SettingsError
from .report import build_report
from .settings import DoctorSettings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/readiness")
def get_readiness():
    """
    Run the doctor and return its report.

    Example Response:
        {
            "version": "0.2.0",
            "ready": false,
            "timestamp": "2026-10-17T10:00:00+00:00",
            "summary": {"total": 12, "ok": 10, "failed": 1, "skipped": 1},
            "verdicts": [
                {"name": "git", "outcome": "failed", "description": "...", ...},
                ...
            ]
        }

    Returns 500 with an "error" field when settings are invalid or the
    pipeline aborted.
    """
    try:
        settings = DoctorSettings.from_env()
    except SettingsError as e:
        return JSONResponse(
            status_code=500,
            content={"version": "unknown", "ready": False, "error": str(e), "verdicts": []},
        )

    verdicts, error = collect(settings)
    report = build_report(verdicts, error)
    if error is not None:
        logger.error(f"[DOCTOR] readiness endpoint: {error}")
        return JSONResponse(status_code=500, content=report.to_dict())
    return JSONResponse(content=report.to_dict())
