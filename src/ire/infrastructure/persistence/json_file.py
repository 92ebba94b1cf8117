"""Shared file handling for the JSON-backed repositories.

Each repository owns one file holding a JSON list of records. Reads and
writes of a file are serialized by a re-entrant lock so a read-modify-write
cycle never interleaves with another thread's, and writes go through a
temporary file so a crash never leaves half a document behind.
"""

from __future__ import annotations

import json
import os
import threading
from datetime import date, datetime
from pathlib import Path


class JsonFile:

    def __init__(self, file_path: Path) -> None:
        self.path = file_path
        self.lock = threading.RLock()
        self._ensure_file()

    def load(self) -> list[dict]:
        with self.lock:
            return json.loads(self.path.read_text(encoding="utf-8"))

    def persist(self, records: list[dict]) -> None:
        with self.lock:
            tmp = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp.write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            os.replace(tmp, self.path)

    def _ensure_file(self) -> None:
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text("[]", encoding="utf-8")


# --- Value helpers ------------------------------------------------------------


def dump_datetime(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def load_datetime(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None


def dump_date(value: date) -> str:
    return value.isoformat()


def load_date(raw: str) -> date:
    return date.fromisoformat(raw)
