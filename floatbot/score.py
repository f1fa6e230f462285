"""Daily sign-in and the score ("小熊饼干") kept for each user."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

LEVELS: tuple[int, ...] = (0, 1, 2, 5, 10, 20, 35, 55, 75, 100, 120)
SCORE_MAX = 120
SIGN_IN_MAX = 1
SIGN_IN_REWARD = 1

ALREADY_SIGNED_TEXT = "今天你已经签到过了！"
CAPPED_TEXT = "你获得的小熊饼干已经达到上限"
SIGN_IN_FIRST_TEXT = "请先签到！"
NO_RANK_TEXT = "ERROR: 目前还没有人签到过"

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS score (uid INTEGER PRIMARY KEY, score INTEGER DEFAULT 0)",
    "CREATE TABLE IF NOT EXISTS sign_in ("
    "uid INTEGER PRIMARY KEY, count INTEGER DEFAULT 0, updated_at TEXT)",
)


@dataclass(frozen=True)
class ScoreRecord:
    """The score of one user."""

    uid: int
    score: int = 0


@dataclass(frozen=True)
class SignInRecord:
    """How often a user signed in, and when the record last changed."""

    uid: int
    count: int
    updated_at: datetime


@dataclass(frozen=True)
class SignInResult:
    """What one sign-in attempt produced."""

    already_signed: bool
    score: int
    level: int
    next_level: int
    added: int
    capped: bool
    hour_word: str
    date_word: str

    @property
    def progress_text(self) -> str:
        return f"{self.score}/{self.next_level}"


class ScoreDB:
    """SQLite store of scores and sign-in counts."""

    def __init__(self, path: str | Path) -> None:
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def __enter__(self) -> "ScoreDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def get_score(self, uid: int) -> ScoreRecord:
        """Return the user's score, creating a zero record if there is none."""
        row = self._conn.execute("SELECT score FROM score WHERE uid = ?", (uid,)).fetchone()
        if row is None:
            with self._conn:
                self._conn.execute("INSERT INTO score (uid, score) VALUES (?, 0)", (uid,))
            return ScoreRecord(uid, 0)
        return ScoreRecord(uid, row[0])

    def set_score(self, uid: int, score: int) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT INTO score (uid, score) VALUES (?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET score = excluded.score",
                (uid, score),
            )

    def _sign_in_record(self, uid: int, now: datetime) -> SignInRecord:
        row = self._conn.execute(
            "SELECT count, updated_at FROM sign_in WHERE uid = ?", (uid,)
        ).fetchone()
        if row is None:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, 0, ?)",
                    (uid, now.isoformat()),
                )
            return SignInRecord(uid, 0, now)
        return SignInRecord(uid, row[0], datetime.fromisoformat(row[1]))

    def _write_sign_in(self, uid: int, count: int, now: datetime) -> None:
        with self._conn:
            self._conn.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET count = excluded.count, "
                "updated_at = excluded.updated_at",
                (uid, count, now.isoformat()),
            )

    def get_sign_in(self, uid: int) -> SignInRecord:
        """Return the user's sign-in record, creating one if there is none."""
        return self._sign_in_record(uid, datetime.now())

    def set_sign_in_count(self, uid: int, count: int) -> None:
        self._write_sign_in(uid, count, datetime.now())

    def top_scores(self, n: int) -> list[ScoreRecord]:
        """The ``n`` highest scores, highest first."""
        rows = self._conn.execute(
            "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (n,)
        ).fetchall()
        return [ScoreRecord(uid, score) for uid, score in rows]


def get_hour_word(hour: int) -> str:
    """The greeting for an hour of the day."""
    if 6 <= hour < 12:
        return "早上好"
    if 12 <= hour < 14:
        return "中午好"
    if 14 <= hour < 19:
        return "下午好"
    if 19 <= hour < 24:
        return "晚上好"
    if 0 <= hour < 6:
        return "凌晨好"
    return ""


def get_level(count: int) -> int:
    """The level reached with ``count`` points, or -1 above the last level."""
    for level, threshold in enumerate(LEVELS):
        if count == threshold:
            return level
        if count < threshold:
            return level - 1
    return -1


def next_level_score(level: int) -> int:
    """Points needed for the level after ``level``."""
    if level < len(LEVELS) - 1:
        return LEVELS[level + 1]
    return SCORE_MAX


def sign_in(db: ScoreDB, uid: int, now: datetime) -> SignInResult:
    """Sign the user in at ``now`` and award the daily point."""
    hour_word = get_hour_word(now.hour)
    date_word = now.strftime("%m/%d")
    record = db._sign_in_record(uid, now)
    signed_today = record.updated_at.date() == now.date()
    if record.count >= SIGN_IN_MAX and signed_today:
        score = db.get_score(uid).score
        level = get_level(score)
        return SignInResult(
            already_signed=True,
            score=score,
            level=level,
            next_level=next_level_score(level),
            added=0,
            capped=False,
            hour_word=hour_word,
            date_word=date_word,
        )
    if not signed_today:
        db._write_sign_in(uid, 0, now)
    db._write_sign_in(uid, record.count + 1, now)

    score = db.get_score(uid).score + SIGN_IN_REWARD
    capped = score > SCORE_MAX
    if capped:
        score = SCORE_MAX
    db.set_score(uid, score)
    level = get_level(score)
    return SignInResult(
        already_signed=False,
        score=score,
        level=level,
        next_level=next_level_score(level),
        added=SIGN_IN_REWARD,
        capped=capped,
        hour_word=hour_word,
        date_word=date_word,
    )