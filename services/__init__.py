from .errors import (
    FormsError, FormValidationError, FormNotFoundError, FormConflictError,
    InvalidTransitionError, PersistenceError
)
from .form_registry import FORMS, FormDescriptor, Transition, get_form
from .code_sequencer import CodeSequencer
from .request_store import RequestStore
from .status_machine import StatusMachine
from .dashboard import DashboardAggregator

__all__ = [
    "FormsError", "FormValidationError", "FormNotFoundError", "FormConflictError",
    "InvalidTransitionError", "PersistenceError", "FORMS", "FormDescriptor",
    "Transition", "get_form", "CodeSequencer", "RequestStore", "StatusMachine",
    "DashboardAggregator"
]
