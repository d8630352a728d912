"""AWS Lambda entry point for the DynamoDB trigger handler."""

import asyncio

import structlog

from .application.services import InvocationService
from .config import settings
from .infrastructure.adapters import SqsQueuePublisher
from .infrastructure.logging import configure_logging

configure_logging(settings.service_name, settings.log_level)

logger = structlog.get_logger()


def create_publisher() -> SqsQueuePublisher:
    """Create the SQS publisher from settings."""
    return SqsQueuePublisher(
        region=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
    )


def handler(arg: dict, context) -> dict:
    """
    AWS Lambda handler.

    Expects ``{"queues": [queue_url, ...], "event": <DynamoDB stream event>}``
    and returns the invocation outcome as a dict.
    """
    request_id = getattr(context, "aws_request_id", "") or ""

    # Warm containers reuse the thread, so the binding is scoped to this call
    with structlog.contextvars.bound_contextvars(correlation_id=request_id):
        service = InvocationService(
            publisher=create_publisher(),
            expected_event_source=settings.expected_event_source,
        )
        outcome = asyncio.run(service.run(arg))

        if outcome.succeeded:
            logger.info("Invocation succeeded", message=outcome.message)
        else:
            logger.error("Invocation failed", message=outcome.message)
    return outcome.to_dict()
