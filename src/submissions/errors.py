"""Submission store errors."""


class SubmissionError(Exception):
    """Base class for submission store failures."""


class ValidationError(SubmissionError):
    """Payload rejected before touching the database."""


class StorageError(SubmissionError):
    """The database could not execute the statement."""


class NotFoundError(SubmissionError):
    """No record matched the idNumber and step guard."""
