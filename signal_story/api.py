"""HTTP trigger surface for the scheduled jobs.

A scheduler calls ``GET /api/cron/{job_name}`` with a shared secret; the
response body is the run summary.
"""

from __future__ import annotations

import hmac
import logging
import os
from typing import Optional

from fastapi import APIRouter, FastAPI, Header, HTTPException, Query
from fastapi.responses import JSONResponse

from .logging_config import logging as _  # noqa: F401  # ensure config applied early
from .config import CRON_SECRET, DEVELOPMENT_MODE, TRUST_SCHEDULER_HEADER
from .models import RunOptions
from .services.calendar import parse_state
from .workflows.jobs import JOB_NAMES, build_job

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/cron", tags=["Cron"])


def is_authorized(
    authorization: Optional[str],
    scheduler_header: Optional[str],
    secret: Optional[str],
    development: bool = False,
    trust_scheduler_header: bool = False,
) -> bool:
    """Shared-secret check.

    The scheduler header only counts when *trust_scheduler_header* is on,
    i.e. when a platform in front of the app strips it from outside calls.
    """
    if development:
        return True
    if trust_scheduler_header and scheduler_header == "1":
        return True
    if not secret or not authorization:
        return False
    return hmac.compare_digest(authorization.encode(), f"Bearer {secret}".encode())


@router.get("")
def list_jobs() -> dict:
    return {"jobs": list(JOB_NAMES)}


@router.get("/{job_name}")
def run_cron_job(
    job_name: str,
    days: Optional[int] = Query(default=None, ge=1, le=365, description="Ingestion window override"),
    target: Optional[str] = Query(default=None, description="Restrict the run to one target"),
    sample: bool = Query(default=False, description="Use synthetic records instead of live data"),
    state: Optional[str] = Query(default=None, description="Event state for calendar sample runs"),
    authorization: Optional[str] = Header(default=None),
    x_vercel_cron: Optional[str] = Header(default=None),
):
    if not is_authorized(authorization, x_vercel_cron, CRON_SECRET, DEVELOPMENT_MODE, TRUST_SCHEDULER_HEADER):
        logger.warning("Rejected unauthorized trigger for %s", job_name)
        return JSONResponse({"error": "Unauthorized"}, status_code=401)

    if job_name not in JOB_NAMES:
        raise HTTPException(status_code=404, detail=f"Unknown job '{job_name}'")

    try:
        sample_state = parse_state(state)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    options = RunOptions(days=days, target=target, sample=sample, sample_state=sample_state)
    try:
        pipeline = build_job(job_name)
    except Exception as exc:  # noqa: BLE001
        logger.exception("Could not build job %s", job_name)
        return JSONResponse({"job_name": job_name, "success": False, "errors": [str(exc)]}, status_code=500)

    summary = pipeline.run(options)
    return JSONResponse(summary.to_response(), status_code=200 if summary.success else 500)


app = FastAPI(title="signal_story", description="Signal-to-story batch jobs")
app.include_router(router)


def main() -> None:
    import uvicorn

    uvicorn.run(app, host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "8000")))


if __name__ == "__main__":
    main()


__all__ = ["app", "router", "is_authorized", "run_cron_job", "main"]
