import sqlite3

import pytest

from floatbot.tiangou import TiangouDB

TEXTS = ["今天也在等你回消息", "你说早安，我开心了一整天"]


def _fill(path, texts):
    conn = sqlite3.connect(str(path))
    with conn:
        conn.executemany(
            "INSERT INTO tiangou (id, text) VALUES (?, ?)",
            list(enumerate(texts, start=1)),
        )
    conn.close()


def test_empty_database(tmp_path):
    with TiangouDB(tmp_path / "t.db") as db:
        assert db.count() == 0
        with pytest.raises(LookupError):
            db.pick()


def test_count_and_pick(tmp_path):
    path = tmp_path / "t.db"
    TiangouDB(path).close()
    _fill(path, TEXTS)
    with TiangouDB(path) as db:
        assert db.count() == len(TEXTS)
        for _ in range(10):
            assert db.pick() in TEXTS


def test_reopen_keeps_data(tmp_path):
    path = tmp_path / "t.db"
    TiangouDB(path).close()
    _fill(path, TEXTS[:1])
    db = TiangouDB(path)
    db.close()
    with TiangouDB(path) as again:
        assert again.pick() == TEXTS[0]