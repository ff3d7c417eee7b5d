"""High-level API for BundleView."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .config import load_config
from .index import AssetIndex
from .logging import get_logger, section
from .reporting import get_reporter

__all__ = [
    "open_index",
    "open_index_from_config",
    "summarize_index",
    "describe_container",
    "list_containers",
]


def open_index(
    directories: Iterable[str | Path], index: Optional[AssetIndex] = None
) -> AssetIndex:
    """Ingest ``directories`` in order into ``index`` (or a new one)."""
    index = index if index is not None else AssetIndex()
    with section("Ingest archives"):
        for directory in directories:
            index.ingest(directory)
    return index


def open_index_from_config(path: str | Path) -> AssetIndex:
    cfg = load_config(path)
    get_logger().debug(
        "Loaded config %s (%d directories)", Path(path).name, len(cfg.directories)
    )
    return open_index(cfg.directories)


def summarize_index(index: AssetIndex) -> Dict[str, Any]:
    archives = index.archives
    tables = index.tables
    vpaths = index.virtual_paths()
    table_names = {table_id: name for name, table_id in vpaths.items()}
    names = index.container_names()
    duplicates = sorted(n for n in names if len(index.container_candidates(n)) > 1)
    summary = {
        "archives": [
            {
                "id": a.archive_id,
                "path": a.path.name,
                "virtual_files": a.virtual_files(),
            }
            for a in archives.values()
        ],
        "tables": [
            {
                "id": table_id,
                # None when a later archive took over the virtual path
                "virtual_path": table_names.get(table_id),
                "archive": index.archive_of_table(table_id).archive_id,
            }
            for table_id in tables
        ],
        "containers": len(names),
        "duplicate_containers": duplicates,
    }
    get_reporter().status(
        "Index summary: "
        + f"archives={len(archives)} tables={len(tables)} containers={len(names)} "
        + f"duplicates={len(duplicates)}"
    )
    return summary


def describe_container(index: AssetIndex, name: str) -> Optional[Dict[str, Any]]:
    obj = index.object_by_container_name(name)
    if obj is None:
        return None
    archive = index.archive_by_object(obj)
    return {
        "container": name,
        "archive": archive.path.name if archive else None,
        **obj.to_dict(),
    }


def list_containers(index: AssetIndex) -> List[str]:
    return sorted(index.container_names())
