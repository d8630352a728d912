import pytest
import structlog
from structlog.testing import LogCapture

from tests.factories import RecordingPublisher, make_image, make_record


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()


@pytest.fixture
def valid_record() -> dict:
    return make_record(
        new_image=make_image(checksum=b"new"),
        old_image=make_image(checksum=b"old"),
    )


@pytest.fixture
def log_output():
    """Capture log entries with context-bound keys merged in."""
    capture = LogCapture()
    previous = structlog.get_config()
    structlog.configure(processors=[structlog.contextvars.merge_contextvars, capture])
    try:
        yield capture
    finally:
        structlog.configure(**previous)
