from .queue_publisher import DispatchResult, MessageAttribute, OutboundMessage, QueuePublisher

__all__ = [
    "DispatchResult",
    "MessageAttribute",
    "OutboundMessage",
    "QueuePublisher",
]
