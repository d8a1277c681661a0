"""Submission repository — creates and advances quote form submissions."""

from __future__ import annotations

import json
import math
from datetime import datetime, timezone
from typing import Any, Optional

import structlog
from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.submission import Submission, SubmissionStatus
from src.schemas.submission import SubmissionCreate, SubmissionStats
from src.submissions.errors import NotFoundError, StorageError, ValidationError
from src.submissions.steps import (
    CORRELATION_KEY,
    DYNAMIC_STEP_NUMBERS,
    FIELD_COLUMNS,
    StepDefinition,
    to_column_value,
    unknown_fields,
)

logger = structlog.get_logger()


def completion_rate(completed: int, total: int) -> int:
    """Percentage of completed submissions, rounded half up; 0 for an empty table."""
    if total <= 0:
        return 0
    return math.floor(completed / total * 100 + 0.5)


class SubmissionRepository:
    """Reads and writes the submissions table.

    The repository never commits; the caller owns the transaction.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Write side ──────────────────────────────────────────────────

    async def create(self, data: SubmissionCreate) -> str:
        """Insert a new submission at step 1.

        Args:
            data: Step 1 fields (all optional)

        Returns:
            The generated submission id

        Raises:
            StorageError: the insert failed
        """
        submission = Submission(
            step=1,
            status=SubmissionStatus.NEW.value,
            **data.model_dump(),
        )

        try:
            self.db.add(submission)
            await self.db.flush()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not create submission: {e}") from e

        logger.info(
            "submission_created",
            submission_id=submission.id,
            id_number=submission.id_number,
        )
        return submission.id

    async def apply_step(
        self,
        definition: StepDefinition,
        id_number: Optional[str],
        payload: dict[str, Any],
    ) -> int:
        """Apply a fixed step to the record waiting at the step before it.

        Every field of the step is written; keys missing from the payload
        clear the column. The terminal step also completes the submission
        and keeps the whole payload as JSON.

        Returns:
            Number of rows updated

        Raises:
            NotFoundError: no record with this idNumber at the expected step
            StorageError: the update failed
        """
        values: dict[str, Any] = {
            attr: to_column_value(payload.get(key))
            for key, attr in definition.columns().items()
        }
        values["step"] = definition.step_number

        if definition.is_terminal:
            values["status"] = SubmissionStatus.COMPLETED.value
            values["final_data"] = json.dumps(payload, ensure_ascii=False)

        return await self._update(
            step_label=definition.name,
            id_number=id_number,
            guard=Submission.step == definition.expected_prior_step,
            values=values,
        )

    async def apply_dynamic_step(
        self,
        step_number: int,
        id_number: Optional[str],
        fields: dict[str, Any],
    ) -> int:
        """Apply one of the optional steps 5–10.

        Only allow-listed form fields are accepted. The record may be at any
        earlier step, so pages can be skipped.

        Raises:
            ValidationError: step out of range or unknown field names
            NotFoundError: no record with this idNumber below step_number
            StorageError: the update failed
        """
        if step_number not in DYNAMIC_STEP_NUMBERS:
            raise ValidationError(f"Unsupported step: {step_number}")

        unknown = unknown_fields(fields)
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

        values: dict[str, Any] = {
            FIELD_COLUMNS[key]: to_column_value(value)
            for key, value in fields.items()
            if key != CORRELATION_KEY
        }
        values["step"] = step_number

        return await self._update(
            step_label=f"step{step_number}",
            id_number=id_number,
            guard=Submission.step < step_number,
            values=values,
        )

    async def _update(
        self,
        step_label: str,
        id_number: Optional[str],
        guard: Any,
        values: dict[str, Any],
    ) -> int:
        # A NULL idNumber never matches anything.
        if id_number is None:
            logger.warning("step_without_id_number", step=step_label)
            raise NotFoundError("idNumber is required")

        stmt = (
            update(Submission)
            .where(Submission.id_number == str(id_number), guard)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not apply {step_label}: {e}") from e

        updated = result.rowcount or 0
        if updated == 0:
            logger.info("step_not_applied", step=step_label, id_number=id_number)
            raise NotFoundError(
                f"No submission for idNumber {id_number} at the expected step"
            )

        logger.info(
            "step_applied",
            step=step_label,
            id_number=id_number,
            rows=updated,
        )
        return updated

    # ─── Read side ───────────────────────────────────────────────────

    async def list_recent(self, limit: int = 100) -> list[Submission]:
        """Most recent submissions, newest first."""
        stmt = select(Submission).order_by(Submission.timestamp.desc()).limit(limit)
        return await self._fetch_all(stmt)

    async def list_by_status(self, status: str) -> list[Submission]:
        """All submissions with the given status, newest first."""
        stmt = (
            select(Submission)
            .where(Submission.status == status)
            .order_by(Submission.timestamp.desc())
        )
        return await self._fetch_all(stmt)

    async def stats(self) -> SubmissionStats:
        """Totals for the dashboard header."""
        now = datetime.now(timezone.utc)
        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

        try:
            total = (await self.db.execute(
                select(func.count()).select_from(Submission)
            )).scalar_one()

            completed = (await self.db.execute(
                select(func.count()).select_from(Submission).where(
                    Submission.status == SubmissionStatus.COMPLETED.value,
                )
            )).scalar_one()

            today = (await self.db.execute(
                select(func.count()).select_from(Submission).where(
                    Submission.timestamp >= today_start,
                )
            )).scalar_one()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not compute stats: {e}") from e

        return SubmissionStats(
            total=total,
            completed=completed,
            today=today,
            completion_rate=completion_rate(completed, total),
        )

    async def _fetch_all(self, stmt: Any) -> list[Submission]:
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not fetch submissions: {e}") from e
        return list(result.scalars().all())
