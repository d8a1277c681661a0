"""Form step endpoints — the quote form posts each page here."""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from src.config import settings
from src.database import get_db
from src.repositories.submission import SubmissionRepository
from src.schemas.submission import SubmissionCreate
from src.submissions.errors import NotFoundError, StorageError, ValidationError
from src.submissions.steps import (
    CORRELATION_KEY,
    DYNAMIC_STEP_NUMBERS,
    FIXED_STEPS,
    StepDefinition,
)

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["steps"])


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/step1")
async def submit_step1(
    data: SubmissionCreate,
    db: AsyncSession = Depends(get_db),
):
    """Start a new submission.

    Returns:
        {"success": True, "id": str}
    """
    try:
        submission_id = await SubmissionRepository(db).create(data)
        await db.commit()
    except StorageError as e:
        await db.rollback()
        logger.error("step_save_failed", step="step1", error=str(e))
        return error_response(500, "Error saving data")
    except Exception as e:
        await db.rollback()
        logger.exception("step_processing_failed", step="step1", error=str(e))
        return error_response(500, "Server error")

    return {"success": True, "id": submission_id}


async def _run_step(
    step_label: str,
    db: AsyncSession,
    payload: dict[str, Any],
    definition: Optional[StepDefinition] = None,
    step_number: Optional[int] = None,
):
    """Apply a fixed or dynamic step and map the outcome to a response."""
    repo = SubmissionRepository(db)
    id_number = payload.get(CORRELATION_KEY)

    try:
        if definition is not None:
            updated = await repo.apply_step(definition, id_number, payload)
        else:
            updated = await repo.apply_dynamic_step(step_number, id_number, payload)
        await db.commit()
    except NotFoundError as e:
        await db.rollback()
        if settings.strict_step_outcomes:
            return error_response(404, str(e))
        return {"success": True, "updated": 0}
    except ValidationError as e:
        await db.rollback()
        logger.warning("step_rejected", step=step_label, error=str(e))
        return error_response(400, f"Invalid data: {e}")
    except StorageError as e:
        await db.rollback()
        logger.error("step_save_failed", step=step_label, error=str(e))
        return error_response(500, "Error saving data")
    except Exception as e:
        await db.rollback()
        logger.exception("step_processing_failed", step=step_label, error=str(e))
        return error_response(500, "Server error")

    return {"success": True, "updated": updated}


def _fixed_step_endpoint(definition: StepDefinition):
    async def endpoint(
        payload: dict[str, Any] = Body(...),
        db: AsyncSession = Depends(get_db),
    ):
        return await _run_step(definition.name, db, payload, definition=definition)

    endpoint.__name__ = f"submit_{definition.name}"
    endpoint.__doc__ = (
        f"Apply {definition.name} to a submission currently at "
        f"step {definition.expected_prior_step}."
    )
    return endpoint


def _dynamic_step_endpoint(step_number: int):
    async def endpoint(
        payload: dict[str, Any] = Body(...),
        db: AsyncSession = Depends(get_db),
    ):
        return await _run_step(f"step{step_number}", db, payload, step_number=step_number)

    endpoint.__name__ = f"submit_step{step_number}"
    endpoint.__doc__ = f"Apply optional step {step_number}; earlier steps may be skipped."
    return endpoint


for _definition in FIXED_STEPS.values():
    router.add_api_route(
        f"/{_definition.name}",
        _fixed_step_endpoint(_definition),
        methods=["POST"],
    )

for _step_number in DYNAMIC_STEP_NUMBERS:
    router.add_api_route(
        f"/step{_step_number}",
        _dynamic_step_endpoint(_step_number),
        methods=["POST"],
    )
