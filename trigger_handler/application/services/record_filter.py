"""
Decides whether a change record carries new content worth propagating.

Every check is an independent predicate, so the order below only affects
which reason gets logged first, never the final accept/reject decision.
"""

from dataclasses import dataclass
from enum import Enum

import structlog

from ...domain.entities import ChangeRecord
from ...domain.ports import MessageAttribute, OutboundMessage
from ...domain.value_objects import AttributeType, ItemImage, get_value

logger = structlog.get_logger()

XML_ATTRIB = "XML"
CHECKSUM_ATTRIB = "XMLChecksum"
IDENTIFIER_ATTRIB = "Identifier"
BASE_URL_ATTRIB = "BaseUrl"

REQUIRED_FIELDS: tuple[tuple[str, AttributeType], ...] = (
    (XML_ATTRIB, AttributeType.BINARY),
    (IDENTIFIER_ATTRIB, AttributeType.STRING),
    (BASE_URL_ATTRIB, AttributeType.STRING),
)


class SkipReason(str, Enum):
    """Why a record was not propagated."""

    WRONG_SOURCE = "wrong_source"
    NO_NEW_IMAGE = "no_new_image"
    INVALID_NEW_IMAGE = "invalid_new_image"
    NO_CHECKSUM = "no_checksum"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class FilterDecision:
    new_image: ItemImage | None = None
    skip_reason: SkipReason | None = None

    @property
    def accepted(self) -> bool:
        return self.skip_reason is None


def get_xml(image: ItemImage | None) -> bytes | None:
    return get_value(image, XML_ATTRIB, AttributeType.BINARY)


def get_checksum(image: ItemImage | None) -> bytes | None:
    return get_value(image, CHECKSUM_ATTRIB, AttributeType.BINARY)


def missing_fields(image: ItemImage) -> list[str]:
    """Names of required fields absent from ``image``, each logged."""
    missing = []
    for name, attribute_type in REQUIRED_FIELDS:
        if image.get_value(name, attribute_type) is None:
            logger.info("New item missing field", field=name)
            missing.append(name)
    return missing


def _skip(reason: SkipReason) -> FilterDecision:
    return FilterDecision(skip_reason=reason)


def evaluate_record(record: ChangeRecord, expected_source: str) -> FilterDecision:
    """Run the propagation checks for one record."""
    if record.event_source != expected_source:
        logger.warning(
            "Not a stream event from the expected source -- skipping record",
            event_source=record.event_source,
            expected_source=expected_source,
        )
        return _skip(SkipReason.WRONG_SOURCE)

    new_image = record.new_image
    if new_image is None:
        logger.warning("No new item -- skipping record")
        return _skip(SkipReason.NO_NEW_IMAGE)

    missing = missing_fields(new_image)
    if missing:
        logger.warning("New item is invalid -- skipping record", missing=missing)
        return _skip(SkipReason.INVALID_NEW_IMAGE)

    new_checksum = get_checksum(new_image)
    if new_checksum is None:
        logger.warning("New item has no checksum -- skipping record")
        return _skip(SkipReason.NO_CHECKSUM)

    if get_checksum(record.old_image) == new_checksum:
        logger.info("Old and new checksums match -- skipping record")
        return _skip(SkipReason.UNCHANGED)

    return FilterDecision(new_image=new_image)


def build_messages(queues: list[str], image: ItemImage) -> list[OutboundMessage]:
    """One message per destination queue, all carrying the same content."""
    body = get_xml(image)
    attributes = {
        IDENTIFIER_ATTRIB: MessageAttribute(
            value=image.get_value(IDENTIFIER_ATTRIB, AttributeType.STRING)
        ),
        BASE_URL_ATTRIB: MessageAttribute(
            value=image.get_value(BASE_URL_ATTRIB, AttributeType.STRING)
        ),
    }
    return [
        OutboundMessage(destination=queue, body=body, attributes=dict(attributes))
        for queue in queues
    ]
