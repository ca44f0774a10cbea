import pytest
from json_model_db import (
    ABSENT,
    PathConflictError,
    get_nested,
    matches,
    merge_patch,
    set_nested,
    split_path,
)

def make_doc():
    return {
        "id": "1",
        "name": "Alice",
        "active": True,
        "age": 30,
        "nickname": None,
        "address": {"city": "Wien", "geo": {"lat": 48.2, "lon": 16.37}},
        "tags": ["a", "b"],
    }

def test_split_path():
    assert split_path("a.b.c") == ["a", "b", "c"]
    assert split_path("a") == ["a"]
    assert split_path(("a", "b")) == ["a", "b"]

def test_get_nested_resolves_and_reports_absent():
    doc = make_doc()
    assert get_nested(doc, ["address", "city"]) == "Wien"
    assert get_nested(doc, "address.geo.lat") == 48.2
    assert get_nested(doc, "nickname") is None
    assert get_nested(doc, "missing") is ABSENT
    assert get_nested(doc, "name.first") is ABSENT
    assert get_nested(doc, "tags.0") is ABSENT
    assert get_nested("scalar", "a.b.c") is ABSENT
    assert not ABSENT

def test_set_nested_creates_intermediate_objects():
    doc = {"id": "1"}
    set_nested(doc, ["profile", "settings", "theme"], "dark")
    assert doc == {"id": "1", "profile": {"settings": {"theme": "dark"}}}
    set_nested(doc, "profile.settings.lang", "de")
    assert doc["profile"]["settings"] == {"theme": "dark", "lang": "de"}

@pytest.mark.parametrize("path, value", [
    ("x", 1),
    ("a.b", [1, 2]),
    ("a.b.c.d", {"k": None}),
    ("address.geo.lat", False),
])
def test_set_then_get_returns_value(path, value):
    doc = make_doc()
    set_nested(doc, path, value)
    assert get_nested(doc, path) == value

def test_set_nested_rejects_non_object_intermediate():
    doc = make_doc()
    with pytest.raises(PathConflictError):
        set_nested(doc, "name.first", "A")
    with pytest.raises(PathConflictError):
        set_nested(doc, "tags.x", 1)
    with pytest.raises(PathConflictError):
        set_nested(doc, "nickname.short", "Al")
    # Nothing was overwritten
    assert doc == make_doc()
    with pytest.raises(PathConflictError):
        set_nested(["not", "a", "dict"], "a", 1)

def test_merge_patch_sets_each_key_independently():
    doc = make_doc()
    merge_patch(doc, {"name": "Alice2", "address.city": "Graz", "extra.flag": True})
    assert doc["name"] == "Alice2"
    assert doc["address"] == {"city": "Graz", "geo": {"lat": 48.2, "lon": 16.37}}
    assert doc["extra"] == {"flag": True}
    assert doc["tags"] == ["a", "b"]

def test_merge_patch_replaces_objects_and_arrays_wholesale():
    doc = make_doc()
    merge_patch(doc, {"address": {"city": "Linz"}, "tags": ["z"]})
    assert doc["address"] == {"city": "Linz"}
    assert doc["tags"] == ["z"]

def test_merge_patch_copies_values():
    doc = {"id": "1"}
    patch = {"tags": ["a"]}
    merge_patch(doc, patch)
    patch["tags"].append("b")
    assert doc["tags"] == ["a"]
    with pytest.raises(TypeError):
        merge_patch(doc, ["not", "a", "dict"])

def test_matches_query_by_example():
    doc = make_doc()
    assert matches(doc, {})
    assert matches(doc, {"name": "Alice"})
    assert matches(doc, {"name": "Alice", "age": 30})
    assert matches(doc, {"address.city": "Wien"})
    assert matches(doc, {"address": {"city": "Wien"}})
    assert matches(doc, {"address": {"geo": {"lat": 48.2}}})
    assert matches(doc, {"tags": ["a", "b"]})
    assert matches(doc, {"nickname": None})
    assert not matches(doc, {"name": "Bob"})
    assert not matches(doc, {"missing": None})
    assert not matches(doc, {"address.zip": "1010"})
    assert not matches(doc, {"tags": ["a"]})

def test_matches_non_object_condition_is_equality():
    assert matches("x", "x")
    assert matches(3, 3)
    assert not matches({"a": 1}, "x")
    assert not matches("x", {"a": 1})
    assert matches({"a": 1}, {})
    assert not matches([], {})

def test_matches_does_not_mix_bools_and_numbers():
    assert not matches({"active": 1}, {"active": True})
    assert not matches({"n": 0}, {"n": False})
    assert matches({"n": 1}, {"n": 1.0})
    assert not matches(True, 1)
