"""Serialized table writer.

Builds table bytes from field trees. Used to produce fixtures and sample
data; there is no path from a decoded object back to bytes.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple

from ..pointer import pointer_field
from .constants import (
    MAGIC,
    FORMAT_VERSION,
    HEADER_STRUCT,
    STRING_LEN_STRUCT,
    OBJECT_ENTRY_STRUCT,
)

__all__ = ["build_table", "manifest_fields"]

# path_id -> (class_id, field tree)
ObjectSource = Mapping[int, Tuple[int, Mapping[str, Any]]]


def _pack_string(text: str) -> bytes:
    raw = text.encode("utf-8")
    if len(raw) > 0xFFFF:
        raise ValueError(f"String too long: {text[:32]}...")
    return STRING_LEN_STRUCT.pack(len(raw)) + raw


def build_table(objects: ObjectSource, externals: Sequence[str] = ()) -> bytes:
    directory = b""
    data_region = b""
    for path_id, (class_id, fields) in objects.items():
        payload = json.dumps(fields, separators=(",", ":")).encode("utf-8")
        directory += OBJECT_ENTRY_STRUCT.pack(
            path_id, class_id, len(data_region), len(payload)
        )
        data_region += payload
    header = HEADER_STRUCT.pack(
        MAGIC, FORMAT_VERSION, 0, len(externals), len(objects)
    )
    strings = b"".join(_pack_string(p) for p in externals)
    return header + strings + directory + data_region


def manifest_fields(
    containers: Iterable[Tuple[str, int] | Tuple[str, int, int]],
    name: str = "",
) -> Dict[str, Any]:
    """Field tree of a manifest object.

    ``containers`` yields ``(container_path, path_id)`` or
    ``(container_path, path_id, file_index)``.
    """
    array: List[list] = []
    for index, entry in enumerate(containers):
        container_path, path_id, *rest = entry
        file_index = rest[0] if rest else 0
        array.append(
            [
                container_path,
                {
                    "preloadIndex": index,
                    "preloadSize": 0,
                    "asset": pointer_field(path_id, file_index),
                },
            ]
        )
    return {"m_Name": name, "m_Container": {"Array": array}}
