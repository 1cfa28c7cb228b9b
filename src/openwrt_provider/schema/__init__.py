"""Entity schemas and config decoding."""
from .attributes import (
    AttributeKind,
    AttributeType,
    Attribute,
    EntitySchema,
    BOOL,
    STRING,
    INT64,
    list_of,
    map_of,
)
from .decoder import ConfigDecoder

__all__ = [
    "AttributeKind",
    "AttributeType",
    "Attribute",
    "EntitySchema",
    "BOOL",
    "STRING",
    "INT64",
    "list_of",
    "map_of",
    "ConfigDecoder",
]
