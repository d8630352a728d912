from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ..value_objects import ItemImage


def _image(section: Mapping[str, Any], key: str) -> ItemImage | None:
    raw = section.get(key)
    if not isinstance(raw, Mapping):
        return None
    return ItemImage(attributes=raw)


@dataclass(frozen=True)
class ChangeRecord:
    """One entry of a DynamoDB stream batch."""

    event_source: str | None
    old_image: ItemImage | None = None
    new_image: ItemImage | None = None
    event_name: str | None = None  # INSERT, MODIFY, REMOVE
    event_id: str | None = None

    @classmethod
    def from_raw(cls, raw: Any) -> "ChangeRecord":
        """Build a record from the Lambda event's JSON shape."""
        if not isinstance(raw, Mapping):
            return cls(event_source=None)

        section = raw.get("dynamodb")
        if not isinstance(section, Mapping):
            section = {}

        return cls(
            event_source=raw.get("eventSource"),
            old_image=_image(section, "OldImage"),
            new_image=_image(section, "NewImage"),
            event_name=raw.get("eventName"),
            event_id=raw.get("eventID"),
        )
