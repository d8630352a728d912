"""
Outbound port for queue publication.

This is the interface the fan-out service uses to hand a message to a
destination queue. Infrastructure adapters implement this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class MessageAttribute:
    """Typed metadata attached to an outbound message."""

    value: str
    data_type: str = "String"


@dataclass(frozen=True)
class OutboundMessage:
    """One message bound for one destination queue."""

    destination: str
    body: bytes
    attributes: dict[str, MessageAttribute] = field(default_factory=dict)
    delay_seconds: int = 0


@dataclass
class DispatchResult:
    """Result of one send attempt."""

    success: bool
    destination: str | None = None
    external_id: str | None = None
    error: str | None = None


class QueuePublisher(ABC):
    """
    Outbound port for sending messages to queues.

    Implementations are async context managers so that a transport client
    can be shared across every send of one invocation.
    """

    async def __aenter__(self) -> "QueuePublisher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        return None

    @abstractmethod
    async def send(self, message: OutboundMessage) -> DispatchResult:
        """
        Send a message to its destination queue.

        Args:
            message: The message to deliver

        Returns:
            DispatchResult with success status and the queue's message ID
        """
        ...
