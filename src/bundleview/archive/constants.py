"""Binary layout constants for the archive container."""

from __future__ import annotations

import struct

MAGIC = b"BVARCHV\x00"
FORMAT_VERSION = 1

# magic, version, reserved, entry_count
HEADER_STRUCT = struct.Struct("<8sHHI")
HEADER_SIZE = HEADER_STRUCT.size

NAME_LEN_STRUCT = struct.Struct("<H")
# data offset (relative to data region), size, flags
ENTRY_STRUCT = struct.Struct("<QQI")

# Any non-zero flag denotes a compressed entry; compression is unsupported.
FLAG_NONE = 0

MAX_NAME_LENGTH = 0xFFFF

__all__ = [
    "MAGIC",
    "FORMAT_VERSION",
    "HEADER_STRUCT",
    "HEADER_SIZE",
    "NAME_LEN_STRUCT",
    "ENTRY_STRUCT",
    "FLAG_NONE",
    "MAX_NAME_LENGTH",
]
