class TriggerHandlerError(Exception):
    """Base error for the trigger handler domain."""


class ImageDecodeError(TriggerHandlerError, ValueError):
    """A binary attribute in an item image could not be decoded."""

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Cannot decode binary attribute {name!r}: {reason}")


class PublisherUnavailableError(TriggerHandlerError):
    """The outbound transport could not be opened for this invocation."""
