import pytest

from bundleview.errors import (
    StructuralDecodeError,
    TableFormatError,
    E_FIELD_SHAPE,
    E_OBJECT_DECODE,
    E_TABLE_DUP_OBJECT,
    E_TABLE_MAGIC,
    E_TABLE_SPAN,
    E_TABLE_TRUNCATED,
)
from bundleview.pointer import TypedPointer
from bundleview.table import FieldNode, build_table, manifest_fields, parse_table
from bundleview.table.constants import HEADER_STRUCT, MAGIC, OBJECT_ENTRY_STRUCT


SPRITE = {
    "m_Name": "coin",
    "m_Rect": {"x": 0, "y": 0, "width": 16, "height": 16},
    "m_Atlas": {"m_FileID": 0, "m_PathID": 12},
    "m_Frames": [{"m_PathID": 3}, {"m_PathID": 4}],
}


def _table(table_id: int = 5):
    raw = build_table(
        {
            1: (142, manifest_fields([("coin.png", 2)])),
            2: (213, SPRITE),
        },
        externals=["archive:/CAB-dep/CAB-dep"],
    )
    return parse_table(raw, table_id)


def test_parse_basic_structure():
    table = _table()
    assert table.table_id == 5
    assert table.externals == ["archive:/CAB-dep/CAB-dep"]
    assert table.object_ids() == [1, 2]
    assert len(table) == 2
    assert table.object_info(2).class_id == 213
    assert table.get_object(99) is None


def test_field_navigation():
    obj = _table().get_object(2)
    assert obj.table_id == 5 and obj.path_id == 2 and obj.class_id == 213
    assert obj.get_field_by_path("/Base/m_Name") == "coin"
    assert obj.get_field_by_path("/Base/m_Rect/width") == 16
    assert obj.get_field_by_path("/Base/m_Frames/1/m_PathID") == 4
    assert obj.get_field_by_path("/Base/m_Frames/7") is None
    assert obj.get_field_by_path("/Base/m_Frames/x") is None
    assert obj.get_field_by_path("/Base/m_Frames/²") is None
    assert obj.get_field_by_path("/Base/m_Frames/-1") is None
    assert obj.get_field_by_path("/Base/m_Name/deeper") is None
    assert obj.get_field_by_path("/Other/m_Name") is None
    assert obj.get_field_by_path("") is None


def test_pointer_by_path():
    obj = _table().get_object(2)
    assert obj.get_pointer_by_path("/Base/m_Atlas") == TypedPointer(5, 0, 12)
    assert obj.get_pointer_by_path("/Base/m_Missing") is None
    with pytest.raises(StructuralDecodeError) as exc:
        obj.get_pointer_by_path("/Base/m_Rect")
    assert exc.value.code == E_FIELD_SHAPE


def test_string_key_map_from_pairs_and_mapping():
    manifest = _table().get_object(1)
    containers = manifest.get_string_key_map_by_path("/Base/m_Container/Array")
    assert list(containers) == ["coin.png"]
    entry = containers["coin.png"]
    assert entry.table_id == 5
    assert entry.get_pointer_by_path("/Base/asset") == TypedPointer(5, 0, 2)

    node = FieldNode({"by_name": {"a": 1, "b": {"c": 2}}}, table_id=1)
    mapping = node.get_string_key_map_by_path("/Base/by_name")
    assert list(mapping) == ["a", "b"]
    assert mapping["b"].get_field_by_path("/Base/c") == 2
    assert node.get_string_key_map_by_path("/Base/by_name/a") is None


def test_string_key_map_keeps_first_duplicate_key():
    node = FieldNode({"Array": [["k", 1], ["k", 2]]})
    assert node.get_string_key_map_by_path("/Base/Array")["k"].value == 1


def test_string_key_map_rejects_malformed_pairs():
    node = FieldNode({"Array": [["k", 1], ["too", "many", "items"]]})
    assert node.get_string_key_map_by_path("/Base/Array") is None


def test_undecodable_payload_raises_on_get():
    raw = bytearray(build_table({3: (1, {"m_Name": "abc"})}))
    raw[-1:] = b"?"
    table = parse_table(bytes(raw), 0)
    with pytest.raises(StructuralDecodeError) as exc:
        table.get_object(3)
    assert exc.value.code == E_OBJECT_DECODE


def test_non_mapping_payload_raises_on_get():
    table = parse_table(build_table({3: (1, [1, 2, 3])}), 0)  # type: ignore[dict-item]
    with pytest.raises(StructuralDecodeError):
        table.get_object(3)


def test_objects_of_class():
    table = _table()
    assert [o.path_id for o in table.objects_of_class(213)] == [2]


@pytest.mark.parametrize(
    "data, code",
    [
        (b"BVTAB", E_TABLE_TRUNCATED),
        (b"NOTTABLE" + b"\x00" * 12, E_TABLE_MAGIC),
        (HEADER_STRUCT.pack(MAGIC, 1, 0, 0, 2), E_TABLE_TRUNCATED),
        (
            HEADER_STRUCT.pack(MAGIC, 1, 0, 0, 1)
            + OBJECT_ENTRY_STRUCT.pack(1, 1, 0, 64)
            + b"{}",
            E_TABLE_SPAN,
        ),
        (
            HEADER_STRUCT.pack(MAGIC, 1, 0, 0, 2)
            + OBJECT_ENTRY_STRUCT.pack(1, 1, 0, 2)
            + OBJECT_ENTRY_STRUCT.pack(1, 1, 0, 2)
            + b"{}",
            E_TABLE_DUP_OBJECT,
        ),
    ],
)
def test_malformed_tables(data: bytes, code: str):
    with pytest.raises(TableFormatError) as exc:
        parse_table(data, 0)
    assert exc.value.code == code
