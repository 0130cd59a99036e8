from typing import Optional


class FormsError(Exception):
    """Base class for failures surfaced to API clients."""

    status_code = 500
    error_kind = "server_error"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {"success": False, "message": self.message, "errorKind": self.error_kind}


class FormValidationError(FormsError):
    status_code = 400
    error_kind = "validation"


class FormNotFoundError(FormsError):
    status_code = 404
    error_kind = "not_found"


class FormConflictError(FormsError):
    status_code = 409
    error_kind = "conflict"


class InvalidTransitionError(FormConflictError):
    error_kind = "invalid_transition"


class PersistenceError(FormsError):
    """Database write failed; the cause stays in the server log."""
