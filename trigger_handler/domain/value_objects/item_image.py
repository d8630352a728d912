"""
Typed view over one DynamoDB stream image.

A stream image maps attribute names to single-key wrappers such as
``{"XML": {"B": "PHJlY29yZC8+"}}``. Lookups always name the type tag they
expect; a value stored under a different tag reads as absent.
"""

import base64
import binascii
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from ..exceptions import ImageDecodeError
from .attribute_type import AttributeType

logger = structlog.get_logger()


def decode_binary(name: str, raw: Any) -> bytes:
    """Decode a ``B`` value: base64 text from the wire, or bytes as-is."""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw)
    if not isinstance(raw, str):
        raise ImageDecodeError(name, f"unexpected {type(raw).__name__} value")
    try:
        return base64.b64decode(raw, validate=True)
    except binascii.Error as e:
        raise ImageDecodeError(name, str(e)) from e


@dataclass(frozen=True)
class ItemImage:
    """Immutable snapshot of one version of an item's attributes."""
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def __contains__(self, name: str) -> bool:
        return name in self.attributes

    def get_value(self, name: str, attribute_type: AttributeType) -> Any:
        """
        Return the raw value of ``name`` stored under ``attribute_type``.

        Binary values are returned as bytes. Missing attributes, wrappers
        without the requested tag, and undecodable binaries return None.
        """
        wrapper = self.attributes.get(name)
        if not isinstance(wrapper, Mapping):
            return None

        raw = wrapper.get(attribute_type.value)
        if raw is None:
            return None

        if attribute_type is AttributeType.BINARY:
            try:
                return decode_binary(name, raw)
            except ImageDecodeError as e:
                logger.warning("Unreadable binary attribute", attribute=name, error=e.reason)
                return None
        return raw


def get_value(image: ItemImage | None, name: str, attribute_type: AttributeType) -> Any:
    """Look up ``name`` in an image that may itself be absent."""
    if image is None:
        return None
    return image.get_value(name, attribute_type)
