"""
SQS implementation of the QueuePublisher port.

One aiobotocore client is opened when the publisher is entered and shared
by every send of the invocation. Message bodies carry the XML payload as
base64 text, the same form the stream record delivers it in, so any byte
sequence survives the trip.
"""

import base64
from contextlib import AsyncExitStack
from typing import Any

import structlog
from aiobotocore.session import get_session
from botocore.exceptions import BotoCoreError, ClientError

from ...domain.exceptions import PublisherUnavailableError
from ...domain.ports import DispatchResult, OutboundMessage, QueuePublisher

logger = structlog.get_logger()


class SqsQueuePublisher(QueuePublisher):
    """AWS SQS queue publisher."""

    def __init__(self, region: str = "us-east-1", endpoint_url: str | None = None) -> None:
        self._region = region
        self._endpoint_url = endpoint_url
        self._session = get_session()
        self._stack: AsyncExitStack | None = None
        self._client: Any = None

    def _client_kwargs(self) -> dict[str, Any]:
        client_kwargs = {"region_name": self._region}
        if self._endpoint_url:
            client_kwargs["endpoint_url"] = self._endpoint_url
        return client_kwargs

    async def __aenter__(self) -> "SqsQueuePublisher":
        stack = AsyncExitStack()
        try:
            self._client = await stack.enter_async_context(
                self._session.create_client("sqs", **self._client_kwargs())
            )
        except (BotoCoreError, ValueError) as e:
            logger.error(
                "Cannot open SQS client",
                region=self._region,
                endpoint_url=self._endpoint_url,
                error=str(e),
            )
            raise PublisherUnavailableError(str(e)) from e
        self._stack = stack
        return self

    async def __aexit__(self, *exc_info) -> None:
        stack, self._stack, self._client = self._stack, None, None
        if stack is not None:
            await stack.__aexit__(*exc_info)

    @staticmethod
    def to_request(message: OutboundMessage) -> dict[str, Any]:
        """Translate a message into ``send_message`` keyword arguments."""
        return {
            "QueueUrl": message.destination,
            "MessageBody": base64.b64encode(message.body).decode("ascii"),
            "DelaySeconds": message.delay_seconds,
            "MessageAttributes": {
                name: {
                    "DataType": attribute.data_type,
                    "StringValue": attribute.value,
                }
                for name, attribute in message.attributes.items()
            },
        }

    async def send(self, message: OutboundMessage) -> DispatchResult:
        """Send one message; transport errors become a failed result."""
        if self._client is None:
            async with self:
                return await self.send(message)

        try:
            response = await self._client.send_message(**self.to_request(message))
        except (ClientError, BotoCoreError) as e:
            logger.error("SQS send failed", queue=message.destination, error=str(e))
            return DispatchResult(success=False, destination=message.destination, error=str(e))

        message_id = response.get("MessageId")
        logger.debug("SQS message sent", queue=message.destination, message_id=message_id)
        return DispatchResult(success=True, destination=message.destination, external_id=message_id)
