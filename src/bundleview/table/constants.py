"""Binary layout constants for serialized tables."""

from __future__ import annotations

import struct

MAGIC = b"BVTABLE\x00"
FORMAT_VERSION = 1

# magic, version, reserved, external_count, object_count
HEADER_STRUCT = struct.Struct("<8sHHII")
HEADER_SIZE = HEADER_STRUCT.size

STRING_LEN_STRUCT = struct.Struct("<H")
# path_id, class_id, data offset (relative to data region), size
OBJECT_ENTRY_STRUCT = struct.Struct("<qiQI")

# Every decoded object is a field tree rooted at this name.
ROOT_FIELD = "Base"

MANIFEST_PATH_ID = 1
MANIFEST_CONTAINER_PATH = "/Base/m_Container/Array"
MANIFEST_ASSET_PATH = "/Base/asset"

__all__ = [
    "MAGIC",
    "FORMAT_VERSION",
    "HEADER_STRUCT",
    "HEADER_SIZE",
    "STRING_LEN_STRUCT",
    "OBJECT_ENTRY_STRUCT",
    "ROOT_FIELD",
    "MANIFEST_PATH_ID",
    "MANIFEST_CONTAINER_PATH",
    "MANIFEST_ASSET_PATH",
]
