"""Serialized table reader.

Structure (header, externals, object directory, payload spans) is validated
when the table is parsed. Object payloads are decoded lazily by
``get_object``; a payload that fails to decode raises
:class:`~bundleview.errors.StructuralDecodeError` at that point.
"""

from __future__ import annotations

from dataclasses import dataclass
import json
from typing import Dict, Iterator, List, Optional

from ..errors import (
    table_error,
    decode_error,
    E_TABLE_MAGIC,
    E_TABLE_VERSION,
    E_TABLE_TRUNCATED,
    E_TABLE_SPAN,
    E_TABLE_DUP_OBJECT,
    E_OBJECT_DECODE,
)
from .constants import (
    MAGIC,
    FORMAT_VERSION,
    HEADER_STRUCT,
    HEADER_SIZE,
    STRING_LEN_STRUCT,
    OBJECT_ENTRY_STRUCT,
)
from .fields import DecodedObject

__all__ = ["ObjectInfo", "SerializedTable", "parse_table"]


@dataclass(frozen=True, slots=True)
class ObjectInfo:
    path_id: int
    class_id: int
    offset: int
    size: int


class SerializedTable:
    def __init__(
        self,
        table_id: int,
        data: bytes,
        externals: List[str],
        objects: Dict[int, ObjectInfo],
    ):
        self.table_id = table_id
        self.externals = externals
        self._data = data
        self._objects = objects

    def __repr__(self) -> str:
        return (
            f"SerializedTable(table_id={self.table_id}, "
            f"objects={len(self._objects)}, externals={len(self.externals)})"
        )

    def __len__(self) -> int:
        return len(self._objects)

    def object_ids(self) -> List[int]:
        return list(self._objects)

    def object_info(self, path_id: int) -> Optional[ObjectInfo]:
        return self._objects.get(path_id)

    def get_object(self, path_id: int) -> Optional[DecodedObject]:
        info = self._objects.get(path_id)
        if info is None:
            return None
        raw = self._data[info.offset : info.offset + info.size]
        try:
            value = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise decode_error(
                E_OBJECT_DECODE,
                f"Object {path_id} payload does not decode: {e}",
                {"table_id": self.table_id, "path_id": path_id},
            ) from e
        if not isinstance(value, dict):
            raise decode_error(
                E_OBJECT_DECODE,
                f"Object {path_id} root is {type(value).__name__}, not a mapping",
                {"table_id": self.table_id, "path_id": path_id},
            )
        return DecodedObject(self.table_id, path_id, info.class_id, value)

    def objects_of_class(self, class_id: int) -> Iterator[DecodedObject]:
        for path_id, info in self._objects.items():
            if info.class_id == class_id:
                obj = self.get_object(path_id)
                if obj is not None:
                    yield obj


def _read_exact(data: bytes, offset: int, size: int, label: str) -> bytes:
    end = offset + size
    if end > len(data):
        raise table_error(
            E_TABLE_TRUNCATED,
            f"Out of range read for {label}: {offset}+{size}>{len(data)}",
        )
    return data[offset:end]


def parse_table(data: bytes, table_id: int) -> SerializedTable:
    raw = _read_exact(data, 0, HEADER_SIZE, "header")
    magic, version, _reserved, external_count, object_count = (
        HEADER_STRUCT.unpack(raw)
    )
    if magic != MAGIC:
        raise table_error(
            E_TABLE_MAGIC,
            "Table header magic mismatch",
            {"table_id": table_id, "magic": magic.hex()},
        )
    if version != FORMAT_VERSION:
        raise table_error(
            E_TABLE_VERSION,
            f"Unsupported table version {version}",
            {"table_id": table_id},
        )

    off = HEADER_SIZE
    externals: List[str] = []
    for i in range(external_count):
        (length,) = STRING_LEN_STRUCT.unpack(
            _read_exact(data, off, STRING_LEN_STRUCT.size, f"external[{i}].len")
        )
        off += STRING_LEN_STRUCT.size
        path_bytes = _read_exact(data, off, length, f"external[{i}]")
        off += length
        try:
            externals.append(path_bytes.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise table_error(
                E_TABLE_TRUNCATED, f"External {i} path is not valid UTF-8"
            ) from e

    entries = []
    for i in range(object_count):
        entries.append(
            OBJECT_ENTRY_STRUCT.unpack(
                _read_exact(data, off, OBJECT_ENTRY_STRUCT.size, f"object[{i}]")
            )
        )
        off += OBJECT_ENTRY_STRUCT.size

    data_start = off
    objects: Dict[int, ObjectInfo] = {}
    for path_id, class_id, rel_offset, size in entries:
        if path_id in objects:
            raise table_error(
                E_TABLE_DUP_OBJECT,
                f"Duplicate object path id {path_id}",
                {"table_id": table_id},
            )
        start = data_start + rel_offset
        if start + size > len(data):
            raise table_error(
                E_TABLE_SPAN,
                f"Object {path_id} exceeds table size",
                {"table_id": table_id, "offset": start, "size": size},
            )
        objects[path_id] = ObjectInfo(path_id, class_id, start, size)
    return SerializedTable(table_id, data, externals, objects)
