"""
Input gates for one invocation.

Each gate returns None when processing should go on, or the terminal
outcome when it should stop. Queues are checked before the event batch.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import structlog

from ..domain.entities import InvocationOutcome

logger = structlog.get_logger()


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def verify_queues(queues: Any) -> InvocationOutcome | None:
    """Check the destination queue list."""
    if queues is None:
        logger.error("Destination queues missing")
        return InvocationOutcome.failed("`queues` is None")
    if not _is_list(queues):
        logger.error("Destination queues malformed", queues_type=type(queues).__name__)
        return InvocationOutcome.failed(f"`queues` is not a list: {queues!r}")
    if len(queues) == 0:
        logger.info("No destination queues")
        return InvocationOutcome.nothing_to_do("`queues` is empty -- nothing to do.")
    return None


def extract_records(event: Any) -> Any:
    """Return the record batch of a stream event, or None."""
    if not isinstance(event, Mapping):
        return None
    if "Records" in event:
        return event["Records"]
    return event.get("records")


def verify_event(event: Any) -> InvocationOutcome | None:
    """Check the stream event and its record batch."""
    if event is None:
        logger.error("Stream event missing")
        return InvocationOutcome.failed("`event` is None")

    records = extract_records(event)
    if not _is_list(records):
        logger.error("Stream event has no record list", records_type=type(records).__name__)
        return InvocationOutcome.failed(f"`event.Records` is not a list: {records!r}")
    if len(records) == 0:
        logger.info("No records in event")
        return InvocationOutcome.nothing_to_do("No records in event -- nothing to do.")
    return None
