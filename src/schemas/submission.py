"""Submission schemas for the form API and dashboard."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from src.submissions.steps import to_column_value


class SubmissionCreate(BaseModel):
    """Step 1 payload. Every field may be missing."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    user_name: Optional[str] = None
    phone_number: Optional[str] = None
    id_number: Optional[str] = None
    offer_type: Optional[str] = None
    reg_type: Optional[str] = None
    birth_date: Optional[str] = None
    serial_number: Optional[str] = None
    car_year: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def store_as_text(cls, value: Any) -> Optional[str]:
        """Form columns are text; booleans, lists and objects are stored like later steps."""
        return to_column_value(value)


class SubmissionOut(BaseModel):
    """A stored record, keyed by column name."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: str
    timestamp: Optional[datetime] = None
    step: Optional[int] = None
    user_name: Optional[str] = None
    phone_number: Optional[str] = None
    id_number: Optional[str] = None
    offer_type: Optional[str] = None
    reg_type: Optional[str] = None
    birth_date: Optional[str] = None
    serial_number: Optional[str] = None
    car_year: Optional[str] = None
    car_make: Optional[str] = None
    usage_type: Optional[str] = None
    city: Optional[str] = None
    start_date: Optional[str] = None
    insurance_type: Optional[str] = None
    insurance_class: Optional[str] = None
    additional_coverage: Optional[str] = None
    coverage_amount: Optional[str] = None
    final_data: Optional[str] = None
    status: str = "new"

    @field_validator("timestamp")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite drops the offset; stored values are always UTC.
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class SubmissionStats(BaseModel):
    total: int = 0
    completed: int = 0
    today: int = 0
    completion_rate: int = 0
