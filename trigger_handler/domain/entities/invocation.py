"""Per-invocation counters and the terminal outcome reported to Lambda."""

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any


class OutcomeStatus(str, Enum):
    """Terminal status of one handler invocation."""

    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class InvocationStatus:
    """
    Dispatch tally for one invocation.

    Only mutated from the event loop thread, one increment per settled
    dispatch.
    """

    successes: int = 0
    failures: int = 0

    def record(self, success: bool) -> None:
        if success:
            self.successes += 1
        else:
            self.failures += 1


@dataclass(frozen=True)
class InvocationOutcome:
    """Result returned from the Lambda handler."""

    status: OutcomeStatus
    message: str
    records: int = 0
    successes: int = 0
    failures: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCEEDED

    @classmethod
    def failed(cls, message: str) -> "InvocationOutcome":
        return cls(status=OutcomeStatus.FAILED, message=message)

    @classmethod
    def nothing_to_do(cls, message: str) -> "InvocationOutcome":
        return cls(status=OutcomeStatus.SUCCEEDED, message=message)

    @classmethod
    def completed(cls, records: int, status: InvocationStatus) -> "InvocationOutcome":
        return cls(
            status=OutcomeStatus.SUCCEEDED,
            message=(
                f"Tried to send {records}. Successes: {status.successes}. "
                f"Failures: {status.failures}."
            ),
            records=records,
            successes=status.successes,
            failures=status.failures,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["status"] = self.status.value
        return data
