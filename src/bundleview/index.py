"""Multi-archive index and cross-reference resolution.

:class:`AssetIndex` ingests directories of archives and reconciles three
addressing schemes into one queryable structure:

* virtual-file names inside archives (``CAB-...``) -> table id,
* per-table numeric object ids (path ids),
* human-readable container paths registered by each table's manifest.

Archive ids and table ids come from two independent counters owned by the
instance. They keep increasing across ``ingest`` calls, so pointers created
earlier stay valid. Ingestion is file by file and not transactional: a failure
propagates to the caller and leaves everything registered before it in place.

Lookups never raise for unknown keys; they return ``None``. Only decoding a
known object can raise (:class:`~bundleview.errors.StructuralDecodeError`).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
import threading
from typing import Dict, List, Optional

from .archive import open_archive
from .classes import AssetBundleManifest
from .errors import StructuralDecodeError
from .interfaces import ArchiveHandle, ArchiveOpener, ParsedTable, TableParser
from .logging import get_logger
from .pointer import TypedPointer
from .reporting import get_reporter, task
from .table import MANIFEST_PATH_ID, parse_table

__all__ = ["IndexedArchive", "ContainerEntry", "IngestResult", "AssetIndex"]


@dataclass(frozen=True, slots=True)
class IndexedArchive:
    archive_id: int
    path: Path
    handle: ArchiveHandle

    def virtual_files(self) -> List[str]:
        return self.handle.virtual_files()

    def extract(self, name: str) -> bytes:
        return self.handle.extract(name)


@dataclass(frozen=True, slots=True)
class ContainerEntry:
    table_id: int
    pointer: TypedPointer


@dataclass(slots=True)
class IngestResult:
    archives: int = 0
    tables: int = 0
    containers: int = 0

    def merge(self, other: "IngestResult") -> None:
        self.archives += other.archives
        self.tables += other.tables
        self.containers += other.containers


class AssetIndex:
    def __init__(
        self,
        archive_opener: ArchiveOpener = open_archive,
        table_parser: TableParser = parse_table,
    ):
        self._open_archive = archive_opener
        self._parse_table = table_parser
        self._lock = threading.Lock()
        self._next_archive_id = 0
        self._next_table_id = 0
        self._archives: Dict[int, IndexedArchive] = {}
        self._tables: Dict[int, ParsedTable] = {}
        self._table_archive: Dict[int, int] = {}
        self._virtual_paths: Dict[str, int] = {}
        self._containers: Dict[str, List[ContainerEntry]] = {}
        self._container_names: Dict[int, Dict[int, str]] = {}

    def __repr__(self) -> str:
        return (
            f"AssetIndex(archives={len(self._archives)}, "
            f"tables={len(self._tables)}, containers={len(self._containers)})"
        )

    # Ingestion ----------------------------------------------------------------
    def ingest(self, directory: str | Path) -> IngestResult:
        """Ingest every regular file of ``directory`` (sorted by name)."""
        root = Path(directory)
        files = sorted(p for p in root.iterdir() if p.is_file())
        rep = get_reporter()
        result = IngestResult()
        task_id = f"ingest.{root.name or root}"
        with task(task_id, f"Ingest {root}", total=len(files)) as stats:
            stats.update(asdict(result))
            for path in files:
                result.merge(self.ingest_archive(path))
                rep.advance(task_id, current_item=path.name)
                stats.update(asdict(result))
        rep.status(
            f"Ingest summary: directory={root} archives={result.archives} "
            f"tables={result.tables} containers={result.containers}"
        )
        return result

    def ingest_archive(self, path: str | Path) -> IngestResult:
        """Open one archive file and register all of its virtual files."""
        with self._lock:
            return self._ingest_archive_locked(Path(path))

    def _ingest_archive_locked(self, path: Path) -> IngestResult:
        logger = get_logger()
        handle = self._open_archive(path)
        archive_id = self._next_archive_id
        self._next_archive_id += 1
        self._archives[archive_id] = IndexedArchive(archive_id, path, handle)
        result = IngestResult(archives=1)
        logger.debug("archive %d: %s", archive_id, path.name)

        for name in handle.virtual_files():
            data = handle.extract(name)
            table = self._parse_table(data, self._next_table_id)
            table_id = self._next_table_id
            self._next_table_id += 1
            self._tables[table_id] = table
            self._table_archive[table_id] = archive_id
            previous = self._virtual_paths.get(name)
            if previous is not None:
                logger.warning(
                    "Virtual file %s now maps to table %d (was %d)",
                    name,
                    table_id,
                    previous,
                )
            self._virtual_paths[name] = table_id
            result.tables += 1
            result.containers += self._register_manifest(table)
            logger.debug("table %d: %s (archive %d)", table_id, name, archive_id)
        return result

    def _register_manifest(self, table: ParsedTable) -> int:
        logger = get_logger()
        try:
            manifest_obj = table.get_object(MANIFEST_PATH_ID)
        except StructuralDecodeError as e:
            logger.debug("Table %d manifest skipped: %s", table.table_id, e)
            return 0
        manifest = AssetBundleManifest.of(manifest_obj)
        if manifest is None:
            return 0
        names = self._container_names.setdefault(table.table_id, {})
        count = 0
        for name, pointer in manifest.entries():
            target = pointer.target_identifier()
            if target is None:
                continue
            candidates = self._containers.setdefault(name, [])
            if candidates:
                logger.debug(
                    "Container %s has %d earlier candidate(s); first one wins",
                    name,
                    len(candidates),
                )
            candidates.append(ContainerEntry(table.table_id, pointer))
            names.setdefault(target, name)
            count += 1
        return count

    # Tables and archives ------------------------------------------------------
    @property
    def archives(self) -> Dict[int, IndexedArchive]:
        return dict(self._archives)

    @property
    def tables(self) -> Dict[int, ParsedTable]:
        return dict(self._tables)

    def archive(self, archive_id: int) -> Optional[IndexedArchive]:
        return self._archives.get(archive_id)

    def table(self, table_id: int) -> Optional[ParsedTable]:
        return self._tables.get(table_id)

    def virtual_paths(self) -> Dict[str, int]:
        return dict(self._virtual_paths)

    def archive_of_table(self, table_id: int) -> Optional[IndexedArchive]:
        archive_id = self._table_archive.get(table_id)
        if archive_id is None:
            return None
        return self._archives.get(archive_id)

    def table_by_virtual_path(self, name: str) -> Optional[ParsedTable]:
        table_id = self._virtual_paths.get(name)
        if table_id is None:
            return None
        return self._tables.get(table_id)

    def table_by_external_path(self, path: str) -> Optional[ParsedTable]:
        """Map an external reference (``archive:/CAB-x/CAB-x`` or ``CAB-x``)."""
        table = self.table_by_virtual_path(path)
        if table is not None:
            return table
        return self.table_by_virtual_path(path.rsplit("/", 1)[-1])

    def archive_by_virtual_path(self, name: str) -> Optional[IndexedArchive]:
        table_id = self._virtual_paths.get(name)
        if table_id is None:
            return None
        return self.archive_of_table(table_id)

    def archive_by_pointer(self, pointer: TypedPointer) -> Optional[IndexedArchive]:
        return self.archive_of_table(pointer.table_id)

    def archive_by_object(self, obj) -> Optional[IndexedArchive]:
        table_id = getattr(obj, "table_id", None)
        if table_id is None:
            return None
        return self.archive_of_table(table_id)

    # Container names ----------------------------------------------------------
    def container_names(self) -> List[str]:
        return list(self._containers)

    def container_candidates(self, name: str) -> List[ContainerEntry]:
        return list(self._containers.get(name, ()))

    def _first_candidate(self, name: str) -> Optional[ContainerEntry]:
        candidates = self._containers.get(name)
        if not candidates:
            return None
        return candidates[0]

    def container_name(self, table_id: int, path_id: int) -> Optional[str]:
        names = self._container_names.get(table_id)
        if names is None:
            return None
        return names.get(path_id)

    def container_name_by_virtual_path(
        self, name: str, path_id: int
    ) -> Optional[str]:
        table_id = self._virtual_paths.get(name)
        if table_id is None:
            return None
        return self.container_name(table_id, path_id)

    def container_name_by_pointer(self, pointer: TypedPointer) -> Optional[str]:
        target = pointer.target_identifier()
        if target is None:
            return None
        return self.container_name(pointer.table_id, target)

    def table_by_container_name(self, name: str) -> Optional[ParsedTable]:
        entry = self._first_candidate(name)
        if entry is None:
            return None
        return self._tables.get(entry.table_id)

    def object_by_container_name(self, name: str):
        entry = self._first_candidate(name)
        if entry is None:
            return None
        table = self._tables.get(entry.table_id)
        if table is None:
            return None
        return entry.pointer.resolve(table, self)

    def resolve(self, pointer: TypedPointer):
        """Resolve a pointer read from any ingested table."""
        table = self._tables.get(pointer.table_id)
        if table is None:
            return None
        return pointer.resolve(table, self)

