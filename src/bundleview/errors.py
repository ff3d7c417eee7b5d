"""Error definitions for BundleView.

Every failure carries a stable code so callers (and the JSON reporter) can
branch on it without parsing messages. "Not found" is never an error: lookups
return ``None`` for unknown keys.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

E_ARCHIVE_MAGIC = "E_ARCHIVE_MAGIC"
E_ARCHIVE_VERSION = "E_ARCHIVE_VERSION"
E_ARCHIVE_TRUNCATED = "E_ARCHIVE_TRUNCATED"
E_ARCHIVE_SPAN = "E_ARCHIVE_SPAN"
E_ARCHIVE_COMPRESSED = "E_ARCHIVE_COMPRESSED"
E_ARCHIVE_DUP_ENTRY = "E_ARCHIVE_DUP_ENTRY"
E_ARCHIVE_NAME = "E_ARCHIVE_NAME"
E_UNKNOWN_VIRTUAL_FILE = "E_UNKNOWN_VIRTUAL_FILE"
E_TABLE_MAGIC = "E_TABLE_MAGIC"
E_TABLE_VERSION = "E_TABLE_VERSION"
E_TABLE_TRUNCATED = "E_TABLE_TRUNCATED"
E_TABLE_SPAN = "E_TABLE_SPAN"
E_TABLE_DUP_OBJECT = "E_TABLE_DUP_OBJECT"
E_OBJECT_DECODE = "E_OBJECT_DECODE"
E_FIELD_SHAPE = "E_FIELD_SHAPE"
E_POINTER_EXTERNAL = "E_POINTER_EXTERNAL"
E_CONFIG = "E_CONFIG"


@dataclass
class BundleError(Exception):
    code: str
    message: str
    context: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.code}: {self.message}" + (
            f" | ctx={self.context}" if self.context else ""
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context or {},
        }


class ArchiveFormatError(BundleError):
    """Archive container bytes do not match the expected structure."""


class TableFormatError(BundleError):
    """Serialized table bytes do not match the expected structure."""


class StructuralDecodeError(BundleError):
    """A field exists but decodes to an unexpected shape when dereferenced."""


def archive_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> ArchiveFormatError:
    return ArchiveFormatError(code=code, message=message, context=context)


def table_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> TableFormatError:
    return TableFormatError(code=code, message=message, context=context)


def decode_error(
    code: str, message: str, context: Optional[Dict[str, Any]] = None
) -> StructuralDecodeError:
    return StructuralDecodeError(code=code, message=message, context=context)


def config_error(
    message: str, context: Optional[Dict[str, Any]] = None
) -> BundleError:
    return BundleError(code=E_CONFIG, message=message, context=context)


__all__ = [
    "BundleError",
    "ArchiveFormatError",
    "TableFormatError",
    "StructuralDecodeError",
    "archive_error",
    "table_error",
    "decode_error",
    "config_error",
    "E_ARCHIVE_MAGIC",
    "E_ARCHIVE_VERSION",
    "E_ARCHIVE_TRUNCATED",
    "E_ARCHIVE_SPAN",
    "E_ARCHIVE_COMPRESSED",
    "E_ARCHIVE_DUP_ENTRY",
    "E_ARCHIVE_NAME",
    "E_UNKNOWN_VIRTUAL_FILE",
    "E_TABLE_MAGIC",
    "E_TABLE_VERSION",
    "E_TABLE_TRUNCATED",
    "E_TABLE_SPAN",
    "E_TABLE_DUP_OBJECT",
    "E_OBJECT_DECODE",
    "E_FIELD_SHAPE",
    "E_POINTER_EXTERNAL",
    "E_CONFIG",
]
