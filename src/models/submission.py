"""Submission model — one row per quote form being filled in."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, UUIDMixin


class SubmissionStatus(str, Enum):
    NEW = "new"
    COMPLETED = "completed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Submission(Base, UUIDMixin):
    __tablename__ = "submissions"

    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )
    step: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    # Step 1: applicant and vehicle identity
    user_name: Mapped[Optional[str]] = mapped_column("userName", Text, nullable=True)
    phone_number: Mapped[Optional[str]] = mapped_column("phoneNumber", Text, nullable=True)
    id_number: Mapped[Optional[str]] = mapped_column("idNumber", Text, nullable=True, index=True)
    offer_type: Mapped[Optional[str]] = mapped_column("offerType", Text, nullable=True)
    reg_type: Mapped[Optional[str]] = mapped_column("regType", Text, nullable=True)
    birth_date: Mapped[Optional[str]] = mapped_column("birthDate", Text, nullable=True)
    serial_number: Mapped[Optional[str]] = mapped_column("serialNumber", Text, nullable=True)
    car_year: Mapped[Optional[str]] = mapped_column("carYear", Text, nullable=True)

    # Step 2: vehicle usage
    car_make: Mapped[Optional[str]] = mapped_column("carMake", Text, nullable=True)
    usage_type: Mapped[Optional[str]] = mapped_column("usageType", Text, nullable=True)
    city: Mapped[Optional[str]] = mapped_column("city", Text, nullable=True)
    start_date: Mapped[Optional[str]] = mapped_column("startDate", Text, nullable=True)

    # Steps 3 and 4: cover
    insurance_type: Mapped[Optional[str]] = mapped_column("insuranceType", Text, nullable=True)
    insurance_class: Mapped[Optional[str]] = mapped_column("insuranceClass", Text, nullable=True)
    additional_coverage: Mapped[Optional[str]] = mapped_column(
        "additionalCoverage", Text, nullable=True
    )

    # Final
    coverage_amount: Mapped[Optional[str]] = mapped_column("coverageAmount", Text, nullable=True)
    final_data: Mapped[Optional[str]] = mapped_column("finalData", Text, nullable=True)

    status: Mapped[str] = mapped_column(
        String(20), default=SubmissionStatus.NEW.value, server_default=SubmissionStatus.NEW.value
    )  # new | completed
