"""Reference serialized table: objects stored as JSON field trees."""

from .constants import (
    MANIFEST_PATH_ID,
    MANIFEST_CONTAINER_PATH,
    MANIFEST_ASSET_PATH,
    ROOT_FIELD,
)
from .fields import DecodedObject, FieldNode
from .reader import ObjectInfo, SerializedTable, parse_table
from .writer import build_table, manifest_fields

__all__ = [
    "MANIFEST_PATH_ID",
    "MANIFEST_CONTAINER_PATH",
    "MANIFEST_ASSET_PATH",
    "ROOT_FIELD",
    "DecodedObject",
    "FieldNode",
    "ObjectInfo",
    "SerializedTable",
    "parse_table",
    "build_table",
    "manifest_fields",
]
