import asyncio

import pytest
import structlog

from trigger_handler.application.services import FanOutService
from trigger_handler.domain.ports import DispatchResult, OutboundMessage

from tests.factories import (
    QUEUE_1,
    QUEUE_2,
    SOURCE,
    RecordingPublisher,
    make_image,
    make_record,
)


class GatedPublisher(RecordingPublisher):
    """Holds every send until the expected number of sends are in flight."""

    def __init__(self, expected: int) -> None:
        super().__init__()
        self._expected = expected
        self._all_started = asyncio.Event()

    async def send(self, message: OutboundMessage) -> DispatchResult:
        self.sent.append(message)
        if len(self.sent) == self._expected:
            self._all_started.set()
        await asyncio.wait_for(self._all_started.wait(), timeout=1)
        return DispatchResult(success=True, destination=message.destination)


class TestFanOutService:
    @pytest.mark.asyncio
    async def test_changed_record_sent_to_every_queue(self, publisher, valid_record):
        service = FanOutService(publisher, SOURCE)

        status = await service.process([QUEUE_1, QUEUE_2], [valid_record])

        assert [m.destination for m in publisher.sent] == [QUEUE_1, QUEUE_2]
        assert publisher.sent[0].body == publisher.sent[1].body
        assert publisher.sent[0].attributes == publisher.sent[1].attributes
        assert status.successes == 2
        assert status.failures == 0

    @pytest.mark.asyncio
    async def test_only_changed_valid_records_are_sent(self, publisher):
        changed = make_record(
            new_image=make_image(identifier="oai:repo:A", checksum=b"a2"),
            old_image=make_image(identifier="oai:repo:A", checksum=b"a1"),
            event_id="A",
        )
        invalid = make_record(new_image=make_image(identifier=None), event_id="B")
        unchanged = make_record(
            new_image=make_image(identifier="oai:repo:C", checksum=b"c"),
            old_image=make_image(identifier="oai:repo:C", checksum=b"c"),
            event_id="C",
        )
        service = FanOutService(publisher, SOURCE)

        status = await service.process([QUEUE_1], [changed, invalid, unchanged])

        assert len(publisher.sent) == 1
        assert publisher.sent[0].attributes["Identifier"].value == "oai:repo:A"
        assert status.successes == 1

    @pytest.mark.asyncio
    async def test_skipped_records_make_no_calls(self, publisher):
        foreign = make_record(new_image=make_image(), event_source="aws:kinesis")
        service = FanOutService(publisher, SOURCE)

        status = await service.process([QUEUE_1, QUEUE_2], [foreign])

        assert publisher.sent == []
        assert status.successes == 0
        assert status.failures == 0

    @pytest.mark.asyncio
    async def test_failure_on_one_queue_does_not_block_others(self, valid_record):
        publisher = RecordingPublisher(failing_queues={QUEUE_1})
        service = FanOutService(publisher, SOURCE)

        status = await service.process([QUEUE_1, QUEUE_2], [valid_record])

        assert {m.destination for m in publisher.sent} == {QUEUE_1, QUEUE_2}
        assert status.successes == 1
        assert status.failures == 1

    @pytest.mark.asyncio
    async def test_raising_publisher_counts_as_failure(self, valid_record):
        publisher = RecordingPublisher(raising_queues={QUEUE_2})
        service = FanOutService(publisher, SOURCE)

        status = await service.process([QUEUE_1, QUEUE_2], [valid_record, valid_record])

        assert len(publisher.sent) == 4
        assert status.successes == 2
        assert status.failures == 2

    @pytest.mark.asyncio
    async def test_sends_are_in_flight_together(self, valid_record):
        publisher = GatedPublisher(expected=4)
        service = FanOutService(publisher, SOURCE)

        status = await service.process([QUEUE_1, QUEUE_2], [valid_record, valid_record])

        assert status.successes == 4

    @pytest.mark.asyncio
    async def test_publisher_opened_once_per_batch(self, publisher, valid_record):
        service = FanOutService(publisher, SOURCE)

        await service.process([QUEUE_1], [valid_record, valid_record, valid_record])

        assert publisher.entered == 1
        assert publisher.exited == 1

    @pytest.mark.asyncio
    async def test_expected_source_is_configurable(self, publisher):
        record = make_record(new_image=make_image(), event_source="custom:stream")
        service = FanOutService(publisher, "custom:stream")

        status = await service.process([QUEUE_1], [record])

        assert status.successes == 1

    @pytest.mark.asyncio
    async def test_record_context_on_record_and_send_logs(self, publisher, log_output):
        records = [
            make_record(new_image=make_image(), event_id="evt-A", event_name="INSERT"),
            make_record(new_image=make_image(xml=None), event_id="evt-B", event_name="MODIFY"),
        ]
        service = FanOutService(publisher, SOURCE)

        await service.process([QUEUE_1, QUEUE_2], records)

        sending = [e for e in log_output.entries if e["event"] == "Sending record"]
        assert [(e["event_id"], e["event_name"]) for e in sending] == [("evt-A", "INSERT")]

        sent = [e for e in log_output.entries if e["event"] == "Message sent"]
        assert len(sent) == 2
        assert all(e["event_id"] == "evt-A" and e["event_name"] == "INSERT" for e in sent)

        skipped = [e for e in log_output.entries if e["event"] == "New item is invalid -- skipping record"]
        assert [(e["event_id"], e["event_name"]) for e in skipped] == [("evt-B", "MODIFY")]
        assert skipped[0]["missing"] == ["XML"]

        # Nothing leaks past the batch
        assert "event_id" not in structlog.contextvars.get_contextvars()
