"""Typed views over decoded objects of well-known classes.

Views read fields on demand. Accessors that dereference a field raise
:class:`~bundleview.errors.StructuralDecodeError` when it is missing or has
the wrong shape; the manifest iterator instead skips malformed entries, as a
table may carry partial manifests.
"""

from __future__ import annotations

from typing import Iterator, Optional, Tuple

from .errors import StructuralDecodeError, decode_error, E_FIELD_SHAPE
from .interfaces import FieldTree
from .logging import get_logger
from .pointer import TypedPointer, is_pointer_field
from .table.constants import MANIFEST_CONTAINER_PATH, MANIFEST_ASSET_PATH

__all__ = [
    "CLASS_GAME_OBJECT",
    "CLASS_COMPONENT",
    "CLASS_BEHAVIOUR",
    "CLASS_MONO_BEHAVIOUR",
    "CLASS_ASSET_BUNDLE",
    "Component",
    "Behaviour",
    "AssetBundleManifest",
]

CLASS_GAME_OBJECT = 1
CLASS_COMPONENT = 2
CLASS_BEHAVIOUR = 8
CLASS_MONO_BEHAVIOUR = 114
CLASS_ASSET_BUNDLE = 142


class Component:
    def __init__(self, obj: FieldTree):
        self.obj = obj

    def _required(self, path: str):
        value = self.obj.get_field_by_path(path)
        if value is None:
            raise decode_error(
                E_FIELD_SHAPE,
                f"Missing field {path}",
                {"table_id": self.obj.table_id},
            )
        return value

    @property
    def game_object(self) -> TypedPointer:
        self._required("/Base/m_GameObject")
        return self.obj.get_pointer_by_path("/Base/m_GameObject")


class Behaviour(Component):
    @property
    def enabled(self) -> bool:
        value = self._required("/Base/m_Enabled")
        if isinstance(value, bool):
            return value
        if value not in (0, 1):
            raise decode_error(
                E_FIELD_SHAPE,
                f"m_Enabled must be 0 or 1, got {value!r}",
                {"table_id": self.obj.table_id},
            )
        return value == 1


class AssetBundleManifest:
    """Container entries of a manifest object (path id 1 by convention)."""

    def __init__(self, obj: FieldTree):
        self.obj = obj

    @classmethod
    def of(cls, obj: Optional[FieldTree]) -> Optional["AssetBundleManifest"]:
        if obj is None:
            return None
        if obj.get_string_key_map_by_path(MANIFEST_CONTAINER_PATH) is None:
            return None
        return cls(obj)

    def entries(self) -> Iterator[Tuple[str, TypedPointer]]:
        """Yield ``(container_path, pointer)`` for entries with a usable pointer."""
        containers = self.obj.get_string_key_map_by_path(MANIFEST_CONTAINER_PATH)
        if not containers:
            return
        logger = get_logger()
        for name, asset_info in containers.items():
            if not is_pointer_field(asset_info.get_field_by_path(MANIFEST_ASSET_PATH)):
                logger.debug("Container %r has no asset pointer; skipped", name)
                continue
            try:
                pointer = asset_info.get_pointer_by_path(MANIFEST_ASSET_PATH)
            except StructuralDecodeError as e:
                logger.debug("Container %r skipped: %s", name, e)
                continue
            yield name, pointer
