"""Good-morning and good-night tracking per group."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta
from pathlib import Path

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sleep_manage (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    group_id INTEGER,
    user_id INTEGER,
    sleep_time TEXT
)
"""


def _fmt(dt: datetime) -> str:
    # Fixed width so that text comparison in SQL orders by time.
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}.{dt.microsecond:06d}"
    )


def _parse(text: str) -> datetime:
    return datetime.strptime(text, "%Y-%m-%d %H:%M:%S.%f")


class SleepDB:
    """Stores the last sleep or wake time of each member of each group.

    Times are naive datetimes in local time.
    """

    def __init__(self, path: str | Path) -> None:
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            self._conn.execute(_SCHEMA)

    def __enter__(self) -> "SleepDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _record(self, gid: int, uid: int, now: datetime) -> timedelta:
        row = self._conn.execute(
            "SELECT sleep_time FROM sleep_manage WHERE group_id = ? AND user_id = ? "
            "ORDER BY id LIMIT 1",
            (gid, uid),
        ).fetchone()
        with self._conn:
            if row is None:
                self._conn.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) VALUES (?, ?, ?)",
                    (gid, uid, _fmt(now)),
                )
                return timedelta(0)
            self._conn.execute(
                "UPDATE sleep_manage SET sleep_time = ? WHERE group_id = ? AND user_id = ?",
                (_fmt(now), gid, uid),
            )
        return now - _parse(row[0])

    def _position(self, gid: int, now: datetime, since: datetime) -> int:
        (count,) = self._conn.execute(
            "SELECT COUNT(*) FROM sleep_manage WHERE group_id = ? "
            "AND sleep_time <= ? AND sleep_time >= ?",
            (gid, _fmt(now), _fmt(since)),
        ).fetchone()
        return count

    def sleep(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good-night; return the rank tonight and the time awake."""
        if now.hour >= 21:
            since = now.replace(hour=21, minute=0, second=0)
        elif now.hour <= 3:
            since = now.replace(minute=0, second=0) - timedelta(hours=3 + now.hour)
        else:
            since = datetime.min
        awake = self._record(gid, uid, now)
        return self._position(gid, now, since), awake

    def get_up(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good-morning; return the rank today and the time asleep."""
        since = now.replace(hour=6, minute=0, second=0)
        asleep = self._record(gid, uid, now)
        return self._position(gid, now, since), asleep


def time_duration(seconds: timedelta | float) -> tuple[int, int, int]:
    """Split a duration into whole hours, minutes and seconds."""
    td = seconds if isinstance(seconds, timedelta) else timedelta(seconds=seconds)
    micros = td // timedelta(microseconds=1)
    sign = -1 if micros < 0 else 1
    hours, rest = divmod(abs(micros), 3_600_000_000)
    minutes, rest = divmod(rest, 60_000_000)
    secs = rest // 1_000_000
    return sign * hours, sign * minutes, sign * secs


def is_morning(hour: int) -> bool:
    """Good-mornings count from 6 to 12 o'clock."""
    return 6 <= hour <= 12


def is_evening(hour: int) -> bool:
    """Good-nights count from 21 to 3 o'clock."""
    return hour >= 21 or hour <= 3


def _untracked(hour: int, minute: int, second: int) -> bool:
    return (hour == 0 and minute == 0 and second == 0) or hour >= 24


def morning_reply(position: int, duration: timedelta | float) -> str:
    h, m, s = time_duration(duration)
    if _untracked(h, m, s):
        return f"早安成功！你是今天第{position}个起床的"
    return f"早安成功！你的睡眠时长为{h}时{m}分{s}秒,你是今天第{position}个起床的"


def evening_reply(position: int, duration: timedelta | float) -> str:
    h, m, s = time_duration(duration)
    if _untracked(h, m, s):
        return f"晚安成功！你是今天第{position}个睡觉的"
    return f"晚安成功！你的清醒时长为{h}时{m}分{s}秒,你是今天第{position}个睡觉的"