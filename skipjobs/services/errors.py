"""Error taxonomy for skip job operations.

Validation, not-found and conflict errors are raised before any write.
DependencyFailure is raised only when the authoritative write fails;
secondary effects (SMS, email, PDF, history) report through result flags.
"""

from __future__ import annotations


class SkipJobError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_response(self) -> dict:
        return {"error": self.message}


class ValidationError(SkipJobError):
    status_code = 400

    def __init__(self, details: list[str], message: str = "Validation failed"):
        super().__init__(message)
        self.details = list(details)

    def to_response(self) -> dict:
        return {"error": self.message, "details": self.details}


class NotFoundError(SkipJobError):
    status_code = 404


class ConflictError(SkipJobError):
    # Illegal transitions are reported as 400 on the HTTP interface.
    status_code = 400


class DependencyFailure(SkipJobError):
    status_code = 500
