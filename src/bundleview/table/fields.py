"""Path-addressable field trees.

Paths are slash separated and start with the root field name, e.g.
``/Base/m_Container/Array``. Mapping members are addressed by key, list
elements by decimal index. Navigation never raises: a missing step yields
``None``. Only active dereferencing (``get_pointer_by_path``) treats a
present-but-wrong shape as a structural error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..errors import decode_error, E_FIELD_SHAPE
from ..pointer import TypedPointer, is_pointer_field
from .constants import ROOT_FIELD

__all__ = ["FieldNode", "DecodedObject", "split_path"]


def split_path(path: str) -> List[str]:
    return [segment for segment in path.split("/") if segment]


class FieldNode:
    __slots__ = ("name", "value", "table_id")

    def __init__(self, value: Any, *, name: str = ROOT_FIELD, table_id=None):
        self.name = name
        self.value = value
        self.table_id: Optional[int] = table_id

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, table_id={self.table_id})"

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return (self.name, self.value, self.table_id) == (
            other.name,
            other.value,
            other.table_id,
        )

    __hash__ = None  # type: ignore[assignment]

    def get_field_by_path(self, path: str) -> Optional[Any]:
        segments = split_path(path)
        if not segments or segments[0] != self.name:
            return None
        current = self.value
        for segment in segments[1:]:
            if isinstance(current, Mapping):
                if segment not in current:
                    return None
                current = current[segment]
            elif isinstance(current, list):
                if not segment.isdecimal() or int(segment) >= len(current):
                    return None
                current = current[int(segment)]
            else:
                return None
        return current

    def get_string_key_map_by_path(
        self, path: str
    ) -> Optional[Dict[str, "FieldNode"]]:
        """Return an ordered name -> node map, or None for other shapes.

        Accepts a mapping or a list of ``[key, value]`` pairs. For repeated
        keys the first entry is kept.
        """
        value = self.get_field_by_path(path)
        if isinstance(value, Mapping):
            pairs = list(value.items())
        elif isinstance(value, list):
            pairs = []
            for item in value:
                if not (
                    isinstance(item, (list, tuple))
                    and len(item) == 2
                    and isinstance(item[0], str)
                ):
                    return None
                pairs.append((item[0], item[1]))
        else:
            return None
        out: Dict[str, FieldNode] = {}
        for key, child in pairs:
            if key not in out:
                out[key] = FieldNode(child, table_id=self.table_id)
        return out

    def get_pointer_by_path(self, path: str) -> Optional[TypedPointer]:
        value = self.get_field_by_path(path)
        if value is None:
            return None
        if self.table_id is None:
            raise decode_error(
                E_FIELD_SHAPE,
                "Pointer read from a field tree with no owning table",
                {"path": path},
            )
        if not is_pointer_field(value):
            raise decode_error(
                E_FIELD_SHAPE,
                f"Field {path} is not a pointer",
                {"table_id": self.table_id},
            )
        return TypedPointer.from_field(value, self.table_id)


class DecodedObject(FieldNode):
    """One object of a serialized table."""

    __slots__ = ("path_id", "class_id")

    def __init__(self, table_id: int, path_id: int, class_id: int, value: Any):
        super().__init__(value, table_id=table_id)
        self.path_id = path_id
        self.class_id = class_id

    def __repr__(self) -> str:
        return (
            f"DecodedObject(table_id={self.table_id}, path_id={self.path_id}, "
            f"class_id={self.class_id})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DecodedObject):
            return NotImplemented
        return (self.table_id, self.path_id, self.class_id, self.value) == (
            other.table_id,
            other.path_id,
            other.class_id,
            other.value,
        )

    __hash__ = None  # type: ignore[assignment]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table_id": self.table_id,
            "path_id": self.path_id,
            "class_id": self.class_id,
            "fields": self.value,
        }
