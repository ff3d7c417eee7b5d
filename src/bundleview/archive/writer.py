"""Archive container writer (uncompressed entries only)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Mapping, Tuple, Union

from .constants import (
    MAGIC,
    FORMAT_VERSION,
    HEADER_STRUCT,
    NAME_LEN_STRUCT,
    ENTRY_STRUCT,
    FLAG_NONE,
    MAX_NAME_LENGTH,
)

__all__ = ["pack_archive", "write_archive"]

FileSource = Union[Mapping[str, bytes], Iterable[Tuple[str, bytes]]]


def pack_archive(files: FileSource) -> bytes:
    """Pack ``(name, payload)`` pairs into archive bytes, preserving order."""
    items = list(files.items()) if isinstance(files, Mapping) else list(files)
    seen: set[str] = set()
    entry_table = b""
    data_region = b""
    for name, payload in items:
        if not name:
            raise ValueError("Virtual file name must not be empty")
        if name in seen:
            raise ValueError(f"Duplicate virtual file name: {name}")
        seen.add(name)
        name_bytes = name.encode("utf-8")
        if len(name_bytes) > MAX_NAME_LENGTH:
            raise ValueError(f"Name too long: {name}")
        entry_table += NAME_LEN_STRUCT.pack(len(name_bytes)) + name_bytes
        entry_table += ENTRY_STRUCT.pack(len(data_region), len(payload), FLAG_NONE)
        data_region += bytes(payload)
    header = HEADER_STRUCT.pack(MAGIC, FORMAT_VERSION, 0, len(items))
    return header + entry_table + data_region


def write_archive(path: str | Path, files: FileSource) -> int:
    payload = pack_archive(files)
    Path(path).write_bytes(payload)
    return len(payload)
