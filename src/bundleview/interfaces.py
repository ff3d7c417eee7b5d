"""Capability interfaces the index depends on.

The reference formats in :mod:`bundleview.archive` and :mod:`bundleview.table`
implement these; any substitute opener/parser handed to
:class:`~bundleview.index.AssetIndex` only needs to honour them.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence

__all__ = [
    "ArchiveHandle",
    "FieldTree",
    "ParsedTable",
    "ResolutionContext",
    "ArchiveOpener",
    "TableParser",
]


class ArchiveHandle(Protocol):
    def virtual_files(self) -> List[str]: ...

    def extract(self, name: str) -> bytes: ...


class FieldTree(Protocol):
    table_id: Optional[int]

    def get_field_by_path(self, path: str) -> Optional[Any]: ...

    def get_string_key_map_by_path(
        self, path: str
    ) -> Optional[Dict[str, "FieldTree"]]: ...

    def get_pointer_by_path(self, path: str) -> Optional[Any]: ...


class ParsedTable(Protocol):
    table_id: int
    externals: Sequence[str]

    def get_object(self, path_id: int) -> Optional[Any]: ...


class ResolutionContext(Protocol):
    def table_by_external_path(self, path: str) -> Optional[ParsedTable]: ...


ArchiveOpener = Callable[[Path], ArchiveHandle]
TableParser = Callable[[bytes, int], ParsedTable]
