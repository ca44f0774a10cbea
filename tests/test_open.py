import json
import os
from json_model_db import JsonDatabase, Record, StoreConfig
from rich.console import Console

_console = Console(force_terminal=True, color_system="standard")

def progress_printer(evt):
    # Per-record ".item" events are too chatty for test output
    phase = evt.get("phase", "")
    if phase.endswith(".item"):
        return
    _console.print(f"[progress] {phase} {int(evt.get('pct', 0))}% - {evt.get('msg', '')}", highlight=False)

def make_db(tmp_path, model="users"):
    cfg = StoreConfig(base_dir=str(tmp_path / "json-db"))
    return JsonDatabase(model, config=cfg, on_progress=progress_printer)

def test_alice_bob_scenario(tmp_path):
    db = make_db(tmp_path)
    db.create_model(Record(id="1", name="Alice"))
    db.create_model(Record(id="2", name="Bob"))

    assert db.find({"name": "Alice"}) == [{"id": "1", "name": "Alice"}]

    assert db.update_by_id("1", {"name": "Alice2"}) is True
    assert db.find_by_id("1") == {"id": "1", "name": "Alice2"}

    assert db.delete_by_id("2") is True
    assert len(db.find_all()) == 1

def test_on_disk_layout(tmp_path):
    db = make_db(tmp_path)
    db.create("42", Record(id="42", name="Zoë", nested={"a": [1, 2]}))

    path = tmp_path / "json-db" / "users" / "42.json"
    assert path.exists()
    text = path.read_text(encoding="utf-8")
    assert "Zoë" in text
    assert '\n  "name"' in text
    assert json.loads(text) == {"id": "42", "name": "Zoë", "nested": {"a": [1, 2]}}
    # No temp files left behind
    assert sorted(os.listdir(path.parent)) == ["42.json"]

def test_round_trip_and_types(tmp_path):
    db = make_db(tmp_path)
    doc = {"id": "r1", "s": "x", "i": 7, "f": 1.5, "b": False, "n": None,
           "o": {"k": [1, {"z": True}]}, "arr": []}
    db.create_model(Record(doc))
    got = db.find_by_id("r1")
    assert isinstance(got, Record)
    assert got == doc
    assert got.id == "r1"

def test_create_overwrites_existing(tmp_path):
    db = make_db(tmp_path)
    db.create_model(Record(id="1", name="A", age=3))
    db.create_model(Record(id="1", name="B"))
    assert db.find_by_id("1") == {"id": "1", "name": "B"}
    assert db.count({}) == 1

def test_find_all_ignores_foreign_files(tmp_path):
    db = make_db(tmp_path)
    db.create_model(Record(id="1", name="A"))
    model_dir = tmp_path / "json-db" / "users"
    (model_dir / "notes.txt").write_text("hello", encoding="utf-8")
    (model_dir / "sub.json").mkdir()
    assert db.find_all() == [{"id": "1", "name": "A"}]
    assert db.ids() == ["1"]

def test_find_all_is_sorted_by_id(tmp_path):
    db = make_db(tmp_path)
    for rid in ("c", "a", "b"):
        db.create_model(Record(id=rid))
    assert [r.id for r in db.find_all()] == ["a", "b", "c"]

def test_find_one_and_count(tmp_path):
    db = make_db(tmp_path)
    db.create_model(Record(id="1", role="admin", team={"name": "core"}))
    db.create_model(Record(id="2", role="user", team={"name": "core"}))
    db.create_model(Record(id="3", role="user", team={"name": "web"}))

    assert db.count({}) == 3
    assert db.count({"role": "user"}) == 2
    assert db.count({"team.name": "core"}) == 2
    assert db.count({"team": {"name": "web"}, "role": "user"}) == 1
    assert db.find_one({"role": "user"})["id"] == "2"
    assert db.find_one({"role": "guest"}) is None

def test_two_instances_share_state(tmp_path):
    db1 = make_db(tmp_path)
    db2 = make_db(tmp_path)
    db1.create_model(Record(id="1", name="A"))
    assert db2.find_by_id("1") == {"id": "1", "name": "A"}
    db2.update_by_id("1", {"name": "B"})
    assert db1.find_by_id("1")["name"] == "B"

def test_models_and_switching(tmp_path):
    db = make_db(tmp_path)
    db.create_model(Record(id="1", name="A"))
    assert db.model("orders") is db
    assert db.model_name == "orders"
    assert db.find_all() == []
    db.create_model(Record(id="o1", total=10))
    assert db.models() == ["orders", "users"]
    db.select_model("users")
    assert db.ids() == ["1"]

def test_drop_model(tmp_path):
    db = make_db(tmp_path)
    db.create_model(Record(id="1"))
    assert db.drop_model() is True
    assert db.find_all() == []
    assert db.drop_model() is False
    # Directory is recreated on the next write
    db.create_model(Record(id="2"))
    assert db.ids() == ["2"]
