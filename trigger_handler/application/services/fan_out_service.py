"""
Application service that fans accepted change records out to queues.

All sends for a batch are scheduled before any is awaited, so the number
of in-flight sends equals accepted records times destination queues.
The summary is taken once every send has settled.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import structlog

from ...domain.entities import ChangeRecord, InvocationStatus
from ...domain.ports import OutboundMessage, QueuePublisher
from .record_filter import build_messages, evaluate_record

logger = structlog.get_logger()


class FanOutService:
    """
    Filters a stream batch and publishes changed records.

    Following hexagonal architecture, this service depends on the
    QueuePublisher port, not on SQS.
    """

    def __init__(self, publisher: QueuePublisher, expected_event_source: str) -> None:
        """
        Initialize with a publisher implementation.

        Args:
            publisher: Implementation of the QueuePublisher port
            expected_event_source: Origin tag a record must carry
        """
        self._publisher = publisher
        self._expected_event_source = expected_event_source

    async def process(self, queues: Sequence[str], records: Sequence[Any]) -> InvocationStatus:
        """
        Offer every record to the filter and dispatch the accepted ones.

        Args:
            queues: Destination queue URLs, non-empty
            records: Raw stream records, non-empty

        Returns:
            InvocationStatus with settled success and failure counts
        """
        status = InvocationStatus()
        tasks: list[asyncio.Task] = []

        async with self._publisher:
            for raw in records:
                record = ChangeRecord.from_raw(raw)
                with structlog.contextvars.bound_contextvars(
                    event_id=record.event_id,
                    event_name=record.event_name,
                ):
                    logger.debug("Checking record")
                    decision = evaluate_record(record, self._expected_event_source)
                    if not decision.accepted:
                        continue

                    logger.info("Sending record", queues=len(queues))
                    for message in build_messages(list(queues), decision.new_image):
                        # Tasks copy the bound context, so send logs keep the event ID
                        tasks.append(asyncio.create_task(self._dispatch(message, status)))

            if tasks:
                await asyncio.gather(*tasks)

        return status

    async def _dispatch(self, message: OutboundMessage, status: InvocationStatus) -> None:
        """Send one message and count its outcome exactly once."""
        try:
            result = await self._publisher.send(message)
        except Exception as e:
            logger.warning("Dispatch raised", queue=message.destination, error=str(e))
            status.record(False)
            return

        if result.success:
            logger.info("Message sent", queue=message.destination, message_id=result.external_id)
        else:
            logger.warning("Message send failed", queue=message.destination, error=result.error)
        status.record(result.success)
