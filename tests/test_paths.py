from types import SimpleNamespace

from systemic.component_map import ComponentMap
from systemic.paths import get_path, has_path, set_path


def test_verbatim_keys_win_over_dotted_paths():
    data = {"foo.bar": 1, "foo": {"bar": 2}}
    assert get_path(data, "foo.bar") == 1


def test_reads_nested_mappings_and_attributes():
    data = {"db": SimpleNamespace(pool={"size": 5})}

    assert get_path(data, "db.pool.size") == 5
    assert has_path(data, "db.pool")
    assert not has_path(data, "db.missing")
    assert get_path(data, "db.missing", "default") == "default"


def test_missing_values_through_none():
    assert get_path({"foo": None}, "foo.bar") is None
    assert has_path({"foo": None}, "foo")


def test_set_creates_intermediate_mappings():
    data = {}
    set_path(data, "foo.bar.baz", 1)
    set_path(data, "foo.qux", 2)

    assert data == {"foo": {"bar": {"baz": 1}, "qux": 2}}


def test_set_into_objects_uses_attributes():
    holder = SimpleNamespace()
    data = {"foo": holder}
    set_path(data, "foo.bar", 1)
    set_path(data, "foo.nested.value", 2)

    assert holder.bar == 1
    assert holder.nested == {"value": 2}


def test_component_map_lookup():
    components = ComponentMap({"foo": {"bar": 1}, "baz": None})

    assert components["foo.bar"] == 1
    assert components["baz"] is None
    assert "foo.bar" in components
    assert "foo.qux" not in components
    assert 1 not in components
    assert list(components) == ["foo", "baz"]
    assert len(components) == 2
    assert dict(components) == {"foo": {"bar": 1}, "baz": None}
