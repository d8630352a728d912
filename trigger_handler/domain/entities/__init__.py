from .change_record import ChangeRecord
from .invocation import InvocationOutcome, InvocationStatus, OutcomeStatus

__all__ = [
    "ChangeRecord",
    "InvocationOutcome",
    "InvocationStatus",
    "OutcomeStatus",
]
