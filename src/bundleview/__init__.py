"""BundleView package

Indexes directories of asset archives and resolves cross references between
the serialized tables they contain: container path -> object, pointer ->
object (across tables and archives) and object -> container path.

The entry point for programmatic use is :class:`bundleview.index.AssetIndex`;
:mod:`bundleview.api` wraps it for the CLI.
"""

from .errors import (
    BundleError,
    ArchiveFormatError,
    TableFormatError,
    StructuralDecodeError,
)
from .index import AssetIndex, ContainerEntry, IndexedArchive, IngestResult
from .pointer import TypedPointer

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "AssetIndex",
    "ContainerEntry",
    "IndexedArchive",
    "IngestResult",
    "TypedPointer",
    "BundleError",
    "ArchiveFormatError",
    "TableFormatError",
    "StructuralDecodeError",
]
