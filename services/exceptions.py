"""
Error taxonomy for the thesis workflow.

Services raise these; routes translate them into JSON error responses
using the attached status code. None of them are retried automatically.

Usage:
    from services.exceptions import NotFoundError

    if not thesis:
        raise NotFoundError("Thesis not found")
"""
from typing import Any, Dict, Optional


class ThesisWorkflowError(Exception):
    """Base exception for all workflow errors surfaced to the caller."""

    status_code = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        payload = {
            'success': False,
            'error': self.message,
            'code': self.code
        }
        if self.details:
            payload['details'] = self.details
        return payload


class InvalidInputError(ThesisWorkflowError):
    """Missing or malformed request fields."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="INVALID_INPUT", details=details)


class InvalidReferenceError(ThesisWorkflowError):
    """A referenced user exists but cannot play the requested part."""

    status_code = 400

    def __init__(self, message: str = "Invalid supervisor selected"):
        super().__init__(message, code="INVALID_REFERENCE")


class InvalidStateError(ThesisWorkflowError):
    """The record is not in a state that allows the transition."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message, code="INVALID_STATE")


class ForbiddenError(ThesisWorkflowError):
    """Actor not authorized for the requested transition."""

    status_code = 403

    def __init__(self, message: str = "Not authorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="FORBIDDEN", details=details)


class NotFoundError(ThesisWorkflowError):
    """Referenced record is absent."""

    status_code = 404

    def __init__(self, message: str = "Not found"):
        super().__init__(message, code="NOT_FOUND")


class ConflictError(ThesisWorkflowError):
    """Duplicate creation of a record that must be unique."""

    status_code = 409

    def __init__(self, message: str):
        super().__init__(message, code="CONFLICT")
