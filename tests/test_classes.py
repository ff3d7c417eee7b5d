import pytest

from bundleview.classes import (
    CLASS_ASSET_BUNDLE,
    CLASS_BEHAVIOUR,
    CLASS_COMPONENT,
    CLASS_GAME_OBJECT,
    CLASS_MONO_BEHAVIOUR,
    AssetBundleManifest,
    Behaviour,
    Component,
)
from bundleview.errors import StructuralDecodeError
from bundleview.pointer import TypedPointer, pointer_field
from bundleview.table import FieldNode, build_table, manifest_fields, parse_table


def _behaviour(fields):
    table = parse_table(build_table({9: (CLASS_BEHAVIOUR, fields)}), 2)
    return Behaviour(table.get_object(9))


def test_behaviour_fields():
    view = _behaviour({"m_GameObject": pointer_field(4), "m_Enabled": 1})
    assert view.enabled is True
    assert view.game_object == TypedPointer(2, 0, 4)
    assert _behaviour({"m_Enabled": 0}).enabled is False
    assert _behaviour({"m_Enabled": True}).enabled is True


@pytest.mark.parametrize(
    "fields, accessor",
    [
        ({}, "enabled"),
        ({"m_Enabled": 3}, "enabled"),
        ({}, "game_object"),
        ({"m_GameObject": "not a pointer"}, "game_object"),
    ],
)
def test_behaviour_bad_fields(fields, accessor):
    view = _behaviour(fields)
    with pytest.raises(StructuralDecodeError):
        getattr(view, accessor)


def test_component_is_behaviour_base():
    assert isinstance(_behaviour({}), Component)


def test_manifest_entries():
    fields = manifest_fields([("a.png", 2), ("b.png", 3, 1)], name="ui")
    fields["m_Container"]["Array"].append(["c.png", {"preloadIndex": 2}])
    table = parse_table(build_table({1: (CLASS_ASSET_BUNDLE, fields)}), 6)
    manifest = AssetBundleManifest.of(table.get_object(1))
    assert manifest is not None
    assert list(manifest.entries()) == [
        ("a.png", TypedPointer(6, 0, 2)),
        ("b.png", TypedPointer(6, 1, 3)),
    ]


def test_manifest_of_other_shapes():
    assert AssetBundleManifest.of(None) is None
    assert AssetBundleManifest.of(FieldNode({"m_Name": "x"}, table_id=1)) is None
    assert (
        AssetBundleManifest.of(FieldNode({"m_Container": {"Array": 5}}, table_id=1))
        is None
    )


def test_components_point_back_to_their_game_object():
    table = parse_table(
        build_table(
            {
                3: (CLASS_GAME_OBJECT, {"m_Name": "player"}),
                4: (CLASS_COMPONENT, {"m_GameObject": pointer_field(3)}),
                5: (
                    CLASS_MONO_BEHAVIOUR,
                    {"m_GameObject": pointer_field(3), "m_Enabled": 0},
                ),
            }
        ),
        7,
    )
    transform = Component(table.get_object(4))
    script = Behaviour(table.get_object(5))
    assert script.enabled is False
    for view in (transform, script):
        owner = view.game_object.resolve(table)
        assert owner.class_id == CLASS_GAME_OBJECT
        assert owner.get_field_by_path("/Base/m_Name") == "player"
