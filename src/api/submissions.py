"""Submissions API — read side for the monitoring dashboard."""

import structlog
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database import get_db
from src.models.submission import Submission
from src.repositories.submission import SubmissionRepository
from src.schemas.submission import SubmissionOut
from src.submissions.errors import StorageError

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["submissions"])


def _serialize(submissions: list[Submission]) -> list[dict]:
    return [
        SubmissionOut.model_validate(s).model_dump(mode="json", by_alias=True)
        for s in submissions
    ]


def _fetch_error(event: str, error: Exception) -> JSONResponse:
    logger.error(event, error=str(error))
    return JSONResponse(status_code=500, content={"error": "Error fetching data"})


@router.get("/submissions")
async def list_submissions(db: AsyncSession = Depends(get_db)):
    """Latest submissions, newest first."""
    try:
        submissions = await SubmissionRepository(db).list_recent(
            limit=settings.submissions_list_limit
        )
    except StorageError as e:
        return _fetch_error("submissions_fetch_failed", e)
    return _serialize(submissions)


@router.get("/submissions/status/{status}")
async def list_submissions_by_status(
    status: str,
    db: AsyncSession = Depends(get_db),
):
    """Submissions with an exact status match (new, completed)."""
    try:
        submissions = await SubmissionRepository(db).list_by_status(status)
    except StorageError as e:
        return _fetch_error("submissions_by_status_fetch_failed", e)
    return _serialize(submissions)


@router.get("/stats")
async def submission_stats(db: AsyncSession = Depends(get_db)):
    """Dashboard counters.

    Returns:
        {"total": int, "completed": int, "today": int, "completion_rate": int}
    """
    try:
        stats = await SubmissionRepository(db).stats()
    except StorageError as e:
        return _fetch_error("stats_fetch_failed", e)
    return stats.model_dump()
