# src/pomotrack/errors.py

"""
Domain errors shared by stores, engines and connectors.

The HTTP layer maps them to status codes:
- ValidationError    -> 400
- NotFoundError      -> 404
- TransactionFailure -> 500
"""

from __future__ import annotations


class PomotrackError(Exception):
    """Base class for all domain errors."""

    code = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(PomotrackError, ValueError):
    """Malformed input. Always raised before anything is written."""

    code = "validation_error"


class NotFoundError(PomotrackError, LookupError):
    """A referenced task or note does not exist."""

    code = "not_found"


class TransactionFailure(PomotrackError, RuntimeError):
    """A write transaction could not commit and was rolled back."""

    code = "transaction_failure"
