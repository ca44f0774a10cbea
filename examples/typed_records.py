#!/usr/bin/env python3
# Example: storing pydantic models instead of plain dicts.
# Reads come back as Task instances; a patch that breaks the model is rejected.

from typing import List

from pydantic import BaseModel
from rich.console import Console

from json_model_db import JsonDatabase, RecordTypeError, StoreConfig

console = Console()

class Task(BaseModel):
    id: str
    title: str
    done: bool = False
    steps: List[dict] = []

    def get_id(self) -> str:
        return self.id

def main() -> None:
    db = JsonDatabase("tasks", config=StoreConfig.from_env(), record_type=Task)

    db.create_model(Task(id="t1", title="Write docs", steps=[{"name": "outline", "done": False}]))
    db.create_model(Task(id="t2", title="Ship release"))

    db.update_array({"id": "t1"}, "steps", {"name": "outline"}, {"done": True})
    db.update_many({"done": False}, {"title": "Pending"})
    for task in db.find_all():
        console.print(task)

    try:
        db.update_by_id("t1", {"done": "maybe"})
    except RecordTypeError as e:
        console.print(f"[red]rejected:[/red] {e}")

if __name__ == "__main__":
    main()
