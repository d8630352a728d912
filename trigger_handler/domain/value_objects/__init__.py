from .attribute_type import AttributeType
from .item_image import ItemImage, get_value

__all__ = ["AttributeType", "ItemImage", "get_value"]
