"""
Application service for one handler invocation.

Runs the input gates, then the fan-out, then builds the terminal outcome.
"""

from collections.abc import Mapping
from typing import Any

import structlog

from ...domain.entities import InvocationOutcome
from ...domain.exceptions import PublisherUnavailableError
from ...domain.ports import QueuePublisher
from ...infrastructure.logging import Timer
from ..validation import extract_records, verify_event, verify_queues
from .fan_out_service import FanOutService

logger = structlog.get_logger()


class InvocationService:
    """Validates invocation arguments and drives the fan-out."""

    def __init__(self, publisher: QueuePublisher, expected_event_source: str) -> None:
        self._fan_out = FanOutService(publisher, expected_event_source)

    async def run(self, arg: Any) -> InvocationOutcome:
        """
        Process one ``{"queues": [...], "event": {"Records": [...]}}`` argument.

        Never raises for bad input; the outcome says which gate failed.
        """
        if not isinstance(arg, Mapping):
            arg = {}

        queues = arg.get("queues")
        outcome = verify_queues(queues)
        if outcome is not None:
            return outcome

        event = arg.get("event")
        outcome = verify_event(event)
        if outcome is not None:
            return outcome

        records = extract_records(event)
        try:
            with Timer() as t:
                status = await self._fan_out.process(queues, records)
        except PublisherUnavailableError as e:
            logger.error("Publisher unavailable", error=str(e))
            return InvocationOutcome.failed(f"Cannot open publisher: {e}")

        outcome = InvocationOutcome.completed(len(records), status)
        logger.info(
            "Invocation completed",
            records=len(records),
            successes=status.successes,
            failures=status.failures,
            duration_ms=t.duration_ms,
        )
        return outcome
