"""Reference archive container: a flat set of named virtual files."""

from .reader import Archive, ArchiveEntry, open_archive, parse_archive
from .writer import pack_archive, write_archive

__all__ = [
    "Archive",
    "ArchiveEntry",
    "open_archive",
    "parse_archive",
    "pack_archive",
    "write_archive",
]
