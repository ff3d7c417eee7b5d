from pathlib import Path

import pytest

from bundleview.archive import open_archive, pack_archive, parse_archive, write_archive
from bundleview.archive.constants import (
    HEADER_STRUCT,
    MAGIC,
    NAME_LEN_STRUCT,
    ENTRY_STRUCT,
)
from bundleview.errors import (
    ArchiveFormatError,
    E_ARCHIVE_MAGIC,
    E_ARCHIVE_VERSION,
    E_ARCHIVE_TRUNCATED,
    E_ARCHIVE_SPAN,
    E_ARCHIVE_COMPRESSED,
    E_UNKNOWN_VIRTUAL_FILE,
)


def _one_entry(name: bytes, offset: int, size: int, flags: int, payload: bytes) -> bytes:
    return (
        HEADER_STRUCT.pack(MAGIC, 1, 0, 1)
        + NAME_LEN_STRUCT.pack(len(name))
        + name
        + ENTRY_STRUCT.pack(offset, size, flags)
        + payload
    )


def test_write_and_open(tmp_path: Path):
    path = tmp_path / "a.bundle"
    written = write_archive(path, {"CAB-1": b"one", "CAB-2": b"", "CAB-3": b"three"})
    assert written == path.stat().st_size
    archive = open_archive(path)
    assert archive.path == path
    assert archive.virtual_files() == ["CAB-1", "CAB-2", "CAB-3"]
    assert archive.extract("CAB-1") == b"one"
    assert archive.extract("CAB-2") == b""
    assert archive.extract("CAB-3") == b"three"


def test_unknown_virtual_file():
    archive = parse_archive(pack_archive([("CAB-1", b"x")]))
    with pytest.raises(ArchiveFormatError) as exc:
        archive.extract("CAB-404")
    assert exc.value.code == E_UNKNOWN_VIRTUAL_FILE
    assert archive.entry("CAB-404") is None


@pytest.mark.parametrize(
    "data, code",
    [
        (b"", E_ARCHIVE_TRUNCATED),
        (b"ZZZZZZZZ" + b"\x00" * 8, E_ARCHIVE_MAGIC),
        (HEADER_STRUCT.pack(MAGIC, 9, 0, 0), E_ARCHIVE_VERSION),
        (HEADER_STRUCT.pack(MAGIC, 1, 0, 3), E_ARCHIVE_TRUNCATED),
        (_one_entry(b"CAB-1", 0, 100, 0, b"short"), E_ARCHIVE_SPAN),
        (_one_entry(b"CAB-1", 0, 5, 1, b"zzzzz"), E_ARCHIVE_COMPRESSED),
    ],
)
def test_malformed_archives(data: bytes, code: str):
    with pytest.raises(ArchiveFormatError) as exc:
        parse_archive(data)
    assert exc.value.code == code


def test_writer_rejects_duplicate_names():
    with pytest.raises(ValueError):
        pack_archive([("CAB-1", b"a"), ("CAB-1", b"b")])


def test_open_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        open_archive(tmp_path / "missing.bundle")
