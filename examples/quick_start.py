#!/usr/bin/env python3
# Example usage of json_model_db: the Alice/Bob walk-through.
# Records land in ./json-db/users/<id>.json unless JSON_MODEL_DB_DIR is set.

import logging
from json_model_db import JsonDatabase, Record, StoreConfig
from rich.console import Console

console = Console()

def progress_printer(evt):
    if evt.get("phase", "").endswith(".done"):
        console.print(f"[progress] {evt['phase']} - {evt.get('msg', '')}", highlight=False)

def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    db = JsonDatabase("users", config=StoreConfig.from_env(), on_progress=progress_printer)

    db.create_model(Record(id="1", name="Alice", tags=["admin"], address={"city": "Wien"}))
    db.create_model(Record(id="2", name="Bob", tags=[], address={"city": "Graz"}))

    console.print("By id:", db.find_by_id("1"))
    console.print("All:", db.find_all())
    console.print("name=Alice:", db.find({"name": "Alice"}))
    console.print("address.city=Graz:", db.find_one({"address.city": "Graz"}))

    # Partial update with a dotted path; other fields are kept
    db.update_by_id("1", {"name": "Alice Updated", "address.zip": "1010"})
    console.print("Updated:", db.find_by_id("1"))

    # Array helpers
    db.push({"name": "Bob"}, "tags", "editor")
    db.pull({"id": "1"}, "tags", "admin")
    console.print("Tags:", {r.id: r["tags"] for r in db.find_all()})

    db.delete_by_id("2")
    console.print("After delete:", db.find_all(), "count:", db.count({}))

if __name__ == "__main__":
    main()
