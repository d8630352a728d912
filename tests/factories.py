"""Builders for DynamoDB stream records and an in-memory publisher."""

import base64

from trigger_handler.domain.ports import DispatchResult, OutboundMessage, QueuePublisher

SOURCE = "aws:dynamodb"
QUEUE_1 = "https://sqs.us-east-1.amazonaws.com/123456789012/nuxeo-import"
QUEUE_2 = "https://sqs.us-east-1.amazonaws.com/123456789012/search-index"


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def make_image(
    xml: bytes | None = b"<record><header/></record>",
    checksum: bytes | None = b"\x01\x02\x03",
    identifier: str | None = "oai:repo:1",
    base_url: str | None = "https://repo.example.edu/oai",
) -> dict:
    image = {}
    if xml is not None:
        image["XML"] = {"B": b64(xml)}
    if checksum is not None:
        image["XMLChecksum"] = {"B": b64(checksum)}
    if identifier is not None:
        image["Identifier"] = {"S": identifier}
    if base_url is not None:
        image["BaseUrl"] = {"S": base_url}
    return image


def make_record(
    new_image: dict | None = None,
    old_image: dict | None = None,
    event_source: str = SOURCE,
    event_name: str = "MODIFY",
    event_id: str = "evt-1",
) -> dict:
    section = {}
    if new_image is not None:
        section["NewImage"] = new_image
    if old_image is not None:
        section["OldImage"] = old_image
    return {
        "eventID": event_id,
        "eventName": event_name,
        "eventSource": event_source,
        "dynamodb": section,
    }


class RecordingPublisher(QueuePublisher):
    """In-memory publisher that records sends and fails selected queues."""

    def __init__(
        self,
        failing_queues: set[str] | None = None,
        raising_queues: set[str] | None = None,
    ) -> None:
        self.sent: list[OutboundMessage] = []
        self.entered = 0
        self.exited = 0
        self._failing = failing_queues or set()
        self._raising = raising_queues or set()

    async def __aenter__(self) -> "RecordingPublisher":
        self.entered += 1
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.exited += 1

    async def send(self, message: OutboundMessage) -> DispatchResult:
        self.sent.append(message)
        if message.destination in self._raising:
            raise ConnectionError("connection reset")
        if message.destination in self._failing:
            return DispatchResult(success=False, destination=message.destination, error="AccessDenied")
        return DispatchResult(
            success=True,
            destination=message.destination,
            external_id=f"msg-{len(self.sent)}",
        )
