"""Typed pointers and their resolution.

A pointer field inside a decoded object has the shape
``{"m_FileID": int, "m_PathID": int}``. ``m_FileID`` is 0 for an object in
the same table and ``n > 0`` for the n-th entry of the owning table's
external references; ``m_PathID`` 0 is the null reference.

Once read, a pointer is bound to the absolute id of the table it was read
from, so it can be carried around and resolved later. Cross-table pointers
need a resolution context (normally the :class:`~bundleview.index.AssetIndex`)
to map the external reference to a loaded table.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

from .errors import decode_error, E_FIELD_SHAPE, E_POINTER_EXTERNAL
from .logging import get_logger

if TYPE_CHECKING:  # pragma: no cover
    from .interfaces import ParsedTable, ResolutionContext

__all__ = [
    "FILE_ID_KEY",
    "PATH_ID_KEY",
    "TypedPointer",
    "is_pointer_field",
    "pointer_field",
]

FILE_ID_KEY = "m_FileID"
PATH_ID_KEY = "m_PathID"


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_pointer_field(value: Any) -> bool:
    return (
        isinstance(value, Mapping)
        and _is_int(value.get(FILE_ID_KEY))
        and _is_int(value.get(PATH_ID_KEY))
    )


def pointer_field(path_id: int, file_index: int = 0) -> Dict[str, int]:
    """Return the raw field shape for a pointer (used when building tables)."""
    return {FILE_ID_KEY: file_index, PATH_ID_KEY: path_id}


@dataclass(frozen=True, slots=True)
class TypedPointer:
    table_id: int
    file_index: int = 0
    path_id: Optional[int] = None

    @classmethod
    def from_field(cls, value: Any, table_id: int) -> "TypedPointer":
        if not is_pointer_field(value):
            raise decode_error(
                E_FIELD_SHAPE,
                "Field is not a pointer",
                {"table_id": table_id, "value": repr(value)[:80]},
            )
        file_index = value[FILE_ID_KEY]
        if file_index < 0:
            raise decode_error(
                E_POINTER_EXTERNAL,
                f"Negative external file index {file_index}",
                {"table_id": table_id},
            )
        path_id = value[PATH_ID_KEY]
        return cls(table_id, file_index, path_id if path_id != 0 else None)

    def target_identifier(self) -> Optional[int]:
        return self.path_id

    @property
    def is_null(self) -> bool:
        return self.path_id is None

    @property
    def is_local(self) -> bool:
        return self.file_index == 0

    def target_table(
        self,
        owner_table: "ParsedTable",
        context: Optional["ResolutionContext"] = None,
    ) -> Optional["ParsedTable"]:
        """Return the table holding the target, or None if it is not loaded."""
        if self.is_local:
            return owner_table
        externals = owner_table.externals
        if self.file_index > len(externals):
            raise decode_error(
                E_POINTER_EXTERNAL,
                f"External file index {self.file_index} out of range",
                {"table_id": self.table_id, "externals": len(externals)},
            )
        external_path = externals[self.file_index - 1]
        if context is None:
            get_logger().debug(
                "Cannot follow pointer to %s#%s without an index",
                external_path,
                self.path_id,
            )
            return None
        return context.table_by_external_path(external_path)

    def resolve(
        self,
        owner_table: "ParsedTable",
        context: Optional["ResolutionContext"] = None,
    ):
        """Decode the target object; None for null or unreachable targets."""
        if self.path_id is None:
            return None
        if owner_table.table_id != self.table_id:
            raise ValueError(
                f"Pointer belongs to table {self.table_id}, "
                f"got table {owner_table.table_id}"
            )
        target = self.target_table(owner_table, context)
        if target is None:
            return None
        return target.get_object(self.path_id)
