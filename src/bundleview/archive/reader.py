"""Archive container reader.

Public functions:
- open_archive(path) -> Archive
- parse_archive(data, path=None) -> Archive

The header and entry table are validated eagerly so a malformed archive fails
at open time; entry payloads are sliced out on demand by ``extract``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import (
    archive_error,
    E_ARCHIVE_MAGIC,
    E_ARCHIVE_VERSION,
    E_ARCHIVE_TRUNCATED,
    E_ARCHIVE_SPAN,
    E_ARCHIVE_COMPRESSED,
    E_ARCHIVE_DUP_ENTRY,
    E_ARCHIVE_NAME,
    E_UNKNOWN_VIRTUAL_FILE,
)
from .constants import (
    MAGIC,
    FORMAT_VERSION,
    HEADER_STRUCT,
    HEADER_SIZE,
    NAME_LEN_STRUCT,
    ENTRY_STRUCT,
    FLAG_NONE,
)

__all__ = ["ArchiveEntry", "Archive", "open_archive", "parse_archive"]


@dataclass(frozen=True, slots=True)
class ArchiveEntry:
    name: str
    offset: int
    size: int


class Archive:
    """One opened archive: a set of named virtual files over a byte buffer."""

    def __init__(
        self,
        data: bytes,
        entries: List[ArchiveEntry],
        path: Optional[Path] = None,
    ):
        self.path = path
        self._data = data
        self._entries: Dict[str, ArchiveEntry] = {e.name: e for e in entries}

    def __repr__(self) -> str:
        return f"Archive(path={self.path!r}, entries={len(self._entries)})"

    def virtual_files(self) -> List[str]:
        return list(self._entries)

    def entry(self, name: str) -> Optional[ArchiveEntry]:
        return self._entries.get(name)

    def extract(self, name: str) -> bytes:
        entry = self._entries.get(name)
        if entry is None:
            raise archive_error(
                E_UNKNOWN_VIRTUAL_FILE,
                f"No virtual file named {name!r}",
                {"path": str(self.path) if self.path else None},
            )
        return self._data[entry.offset : entry.offset + entry.size]


def _read_exact(data: bytes, offset: int, size: int, label: str) -> bytes:
    end = offset + size
    if end > len(data):
        raise archive_error(
            E_ARCHIVE_TRUNCATED,
            f"Out of range read for {label}: {offset}+{size}>{len(data)}",
        )
    return data[offset:end]


def parse_archive(data: bytes, path: Optional[Path] = None) -> Archive:
    raw = _read_exact(data, 0, HEADER_SIZE, "header")
    magic, version, _reserved, count = HEADER_STRUCT.unpack(raw)
    if magic != MAGIC:
        raise archive_error(
            E_ARCHIVE_MAGIC,
            "Archive header magic mismatch",
            {"path": str(path) if path else None, "magic": magic.hex()},
        )
    if version != FORMAT_VERSION:
        raise archive_error(
            E_ARCHIVE_VERSION,
            f"Unsupported archive version {version}",
            {"path": str(path) if path else None},
        )

    off = HEADER_SIZE
    # (name, relative offset, size) until the data region start is known
    pending: List[tuple[str, int, int]] = []
    seen: set[str] = set()
    for i in range(count):
        (name_len,) = NAME_LEN_STRUCT.unpack(
            _read_exact(data, off, NAME_LEN_STRUCT.size, f"entry[{i}].name_len")
        )
        off += NAME_LEN_STRUCT.size
        name_bytes = _read_exact(data, off, name_len, f"entry[{i}].name")
        off += name_len
        try:
            name = name_bytes.decode("utf-8")
        except UnicodeDecodeError as e:
            raise archive_error(
                E_ARCHIVE_NAME, f"Entry {i} name is not valid UTF-8"
            ) from e
        if not name:
            raise archive_error(E_ARCHIVE_NAME, f"Entry {i} has an empty name")
        rel_offset, size, flags = ENTRY_STRUCT.unpack(
            _read_exact(data, off, ENTRY_STRUCT.size, f"entry[{i}]")
        )
        off += ENTRY_STRUCT.size
        if flags != FLAG_NONE:
            raise archive_error(
                E_ARCHIVE_COMPRESSED,
                f"Entry {name!r} is compressed (flags={flags:#x})",
            )
        if name in seen:
            raise archive_error(
                E_ARCHIVE_DUP_ENTRY, f"Duplicate entry name {name!r}"
            )
        seen.add(name)
        pending.append((name, rel_offset, size))

    data_start = off
    entries: List[ArchiveEntry] = []
    for name, rel_offset, size in pending:
        start = data_start + rel_offset
        if start + size > len(data):
            raise archive_error(
                E_ARCHIVE_SPAN,
                f"Entry {name!r} exceeds archive size",
                {"offset": start, "size": size, "file_size": len(data)},
            )
        entries.append(ArchiveEntry(name, start, size))
    return Archive(data, entries, path)


def open_archive(path: str | Path) -> Archive:
    p = Path(path)
    return parse_archive(p.read_bytes(), p)
