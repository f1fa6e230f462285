"""Random entries from the "舔狗日记" collection."""

from __future__ import annotations

import sqlite3
from pathlib import Path

_TABLE = "tiangou"
_SCHEMA = (
    f"CREATE TABLE IF NOT EXISTS {_TABLE} ("
    "id INTEGER PRIMARY KEY NOT NULL, text TEXT NOT NULL)"
)


class TiangouDB:
    """SQLite store of diary entries."""

    def __init__(self, path: str | Path) -> None:
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            self._conn.execute(_SCHEMA)

    def __enter__(self) -> "TiangouDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def count(self) -> int:
        """Number of entries."""
        (n,) = self._conn.execute(f"SELECT COUNT(*) FROM {_TABLE}").fetchone()
        return n

    def pick(self) -> str:
        """A random entry's text; LookupError when there are none."""
        row = self._conn.execute(
            f"SELECT text FROM {_TABLE} ORDER BY RANDOM() LIMIT 1"
        ).fetchone()
        if row is None:
            raise LookupError("no tiangou entries")
        return row[0]

    def close(self) -> None:
        self._conn.close()