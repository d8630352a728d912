from enum import Enum


class AttributeType(str, Enum):
    """DynamoDB type tags used when reading a stream image."""
    STRING = "S"
    NUMBER = "N"
    BINARY = "B"
