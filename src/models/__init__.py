"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.submission import Submission, SubmissionStatus

__all__ = [
    "Base",
    "Submission",
    "SubmissionStatus",
]
