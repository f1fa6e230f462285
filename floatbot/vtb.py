"""VTuber voice quotations: a three-level catalogue kept in SQLite."""

from __future__ import annotations

import json
import random
import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any
from urllib.parse import quote_plus

import requests

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page?uid="

FIRST_STEP_HEADER = "请选择一个vtb并发送序号:\n"
SECOND_STEP_HEADER = "请选择一个语录类别并发送序号:\n"
THIRD_STEP_HEADER = "请选择一个语录并发送序号:\n"

_USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/96.0.4664.110 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.1 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64; rv:95.0) Gecko/20100101 Firefox/95.0",
)
_TIMEOUT = 30
_LAST_SEGMENT = re.compile(r".*/(.*)")

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS first_category ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at DATETIME, updated_at DATETIME, "
    "deleted_at DATETIME, first_category_index BIGINT, first_category_name VARCHAR(255), "
    "first_category_uid VARCHAR(255), first_category_description VARCHAR(1024), "
    "first_category_icon_path VARCHAR(255))",
    "CREATE TABLE IF NOT EXISTS second_category ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at DATETIME, updated_at DATETIME, "
    "deleted_at DATETIME, second_category_index BIGINT, first_category_uid VARCHAR(255), "
    "second_category_name VARCHAR(255), second_category_author VARCHAR(255), "
    "second_category_description VARCHAR(255))",
    "CREATE TABLE IF NOT EXISTS third_category ("
    "id INTEGER PRIMARY KEY AUTOINCREMENT, created_at DATETIME, updated_at DATETIME, "
    "deleted_at DATETIME, third_category_index BIGINT, second_category_index BIGINT, "
    "first_category_uid VARCHAR(255), third_category_name VARCHAR(255), "
    "third_category_path VARCHAR(255), third_category_author VARCHAR(255), "
    "third_category_description VARCHAR(255))",
)

_FIRST_COLUMNS = (
    "first_category_index, first_category_name, first_category_uid, "
    "first_category_description, first_category_icon_path"
)
_THIRD_COLUMNS = (
    "third_category_index, second_category_index, first_category_uid, "
    "third_category_name, third_category_path, third_category_author, "
    "third_category_description"
)


@dataclass(frozen=True)
class FirstCategory:
    """A VTuber."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""


@dataclass(frozen=True)
class SecondCategory:
    """A category of one VTuber's quotations."""

    index: int
    first_uid: str
    name: str
    author: str = ""
    description: str = ""


@dataclass(frozen=True)
class ThirdCategory:
    """One quotation: a recording within a category."""

    index: int
    second_index: int
    first_uid: str
    name: str
    path: str
    author: str = ""
    description: str = ""


def escape_record_url(url: str) -> str:
    """Percent-encode the last path segment of a recording URL."""
    m = _LAST_SEGMENT.search(url)
    if m is None:
        return url
    last = m.group(1)
    url = url.replace(last, quote_plus(last, safe=""))
    return url.replace("+", "%20")


def _ext(url: str) -> str:
    last = url.rsplit("/", 1)[-1]
    dot = last.rfind(".")
    return last[dot:] if dot >= 0 else ""


def record_filename(store: str, first: int, second: int, third: int, url: str) -> str:
    """The cache file name of a recording, keeping the URL's extension."""
    return f"{store}{first}-{second}-{third}{_ext(url)}"


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def _get(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict) or key not in obj:
            return None
        obj = obj[key]
    return obj


def _now() -> str:
    return datetime.now().isoformat(sep=" ")


class VtbDB:
    """SQLite store of VTubers, quotation categories and quotations."""

    def __init__(self, path: str | Path) -> None:
        self._conn = sqlite3.connect(str(path))
        self.rng = random.Random()
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def __enter__(self) -> "VtbDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _first_uid_by_index(self, first_index: int) -> str:
        row = self._conn.execute(
            "SELECT first_category_uid FROM first_category "
            "WHERE deleted_at IS NULL AND first_category_index = ? ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return "" if row is None or row[0] is None else row[0]

    def first_category_message(self) -> str:
        """The numbered list of all VTubers."""
        rows = self._conn.execute(
            "SELECT first_category_index, first_category_name FROM first_category "
            "WHERE deleted_at IS NULL ORDER BY id"
        ).fetchall()
        return FIRST_STEP_HEADER + "".join(f"{index}. {name}\n" for index, name in rows)

    def second_category_message(self, first_index: int) -> str:
        """The numbered categories of one VTuber, or "" when there are none."""
        uid = self._first_uid_by_index(first_index)
        rows = self._conn.execute(
            "SELECT second_category_index, second_category_name FROM second_category "
            "WHERE deleted_at IS NULL AND first_category_uid = ? ORDER BY id",
            (uid,),
        ).fetchall()
        if not rows:
            return ""
        return SECOND_STEP_HEADER + "".join(f"{index}. {name}\n" for index, name in rows)

    def third_category_message(self, first_index: int, second_index: int) -> str:
        """The numbered quotations of one category, or "" when there are none."""
        uid = self._first_uid_by_index(first_index)
        rows = self._conn.execute(
            "SELECT third_category_index, third_category_name FROM third_category "
            "WHERE deleted_at IS NULL AND first_category_uid = ? "
            "AND second_category_index = ? ORDER BY id",
            (uid, second_index),
        ).fetchall()
        if not rows:
            return ""
        return THIRD_STEP_HEADER + "".join(f"{index}. {name}\n" for index, name in rows)

    @staticmethod
    def _third(row: tuple[Any, ...] | None) -> ThirdCategory | None:
        if row is None:
            return None
        return ThirdCategory(
            index=row[0],
            second_index=row[1],
            first_uid=row[2] or "",
            name=row[3] or "",
            path=row[4] or "",
            author=row[5] or "",
            description=row[6] or "",
        )

    def third_category(
        self, first_index: int, second_index: int, third_index: int
    ) -> ThirdCategory | None:
        """The quotation chosen by its three indices, or None."""
        uid = self._first_uid_by_index(first_index)
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category WHERE deleted_at IS NULL "
            "AND first_category_uid = ? AND second_category_index = ? "
            "AND third_category_index = ? LIMIT 1",
            (uid, second_index, third_index),
        ).fetchone()
        return self._third(row)

    def random_vtb(self) -> ThirdCategory | None:
        """A random quotation, or None when there are none."""
        (count,) = self._conn.execute(
            "SELECT COUNT(*) FROM third_category WHERE deleted_at IS NULL"
        ).fetchone()
        if count == 0:
            return None
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category WHERE deleted_at IS NULL "
            "LIMIT 1 OFFSET ?",
            (self.rng.randrange(count),),
        ).fetchone()
        return self._third(row)

    def first_category_by_uid(self, uid: str) -> FirstCategory | None:
        """The VTuber with this uid, or None."""
        row = self._conn.execute(
            f"SELECT {_FIRST_COLUMNS} FROM first_category "
            "WHERE deleted_at IS NULL AND first_category_uid = ? LIMIT 1",
            (uid,),
        ).fetchone()
        if row is None:
            return None
        return FirstCategory(
            index=row[0],
            name=row[1] or "",
            uid=row[2] or "",
            description=row[3] or "",
            icon_path=row[4] or "",
        )

    def store_vtb_list(self, data: str | bytes) -> list[str]:
        """Store the VTuber list from the API's JSON; return their uids in order."""
        items = json.loads(data)
        if not isinstance(items, list):
            raise ValueError("vtb list must be a JSON array")
        uids = []
        with self._conn:
            for i, item in enumerate(items):
                name = _text(_get(item, "name"))
                description = _text(_get(item, "description"))
                icon = _text(_get(item, "icon_path"))
                uid = _text(_get(item, "uid"))
                exists = self._conn.execute(
                    "SELECT 1 FROM first_category WHERE deleted_at IS NULL "
                    "AND first_category_uid = ? LIMIT 1",
                    (uid,),
                ).fetchone()
                if exists is None:
                    self._conn.execute(
                        f"INSERT INTO first_category (created_at, updated_at, {_FIRST_COLUMNS}) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?)",
                        (_now(), _now(), i, name, uid, description, icon),
                    )
                else:
                    self._conn.execute(
                        "UPDATE first_category SET updated_at = ?, first_category_index = ?, "
                        "first_category_name = ?, first_category_description = ?, "
                        "first_category_icon_path = ? WHERE deleted_at IS NULL "
                        "AND first_category_uid = ?",
                        (_now(), i, name, description, icon, uid),
                    )
                uids.append(uid)
        return uids

    def store_vtb_page(self, uid: str, data: str | bytes) -> None:
        """Store the categories and quotations of one VTuber from the API's JSON."""
        page = json.loads(data)
        voices = _get(page, "data", "voices")
        if not isinstance(voices, list):
            voices = []
        with self._conn:
            for si, second in enumerate(voices):
                self._store_second(uid, si, second)
                voice_list = _get(second, "voiceList")
                if not isinstance(voice_list, list):
                    continue
                for ti, third in enumerate(voice_list):
                    self._store_third(uid, si, ti, third)

    def _store_second(self, uid: str, index: int, item: Any) -> None:
        name = _text(_get(item, "categoryName"))
        author = _text(_get(item, "author"))
        description = _text(_get(item, "categoryDescription", "zh-CN"))
        where = (
            "WHERE deleted_at IS NULL AND first_category_uid = ? AND second_category_index = ?"
        )
        exists = self._conn.execute(
            f"SELECT 1 FROM second_category {where} LIMIT 1", (uid, index)
        ).fetchone()
        if exists is None:
            self._conn.execute(
                "INSERT INTO second_category (created_at, updated_at, second_category_index, "
                "first_category_uid, second_category_name, second_category_author, "
                "second_category_description) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (_now(), _now(), index, uid, name, author, description),
            )
        else:
            self._conn.execute(
                "UPDATE second_category SET updated_at = ?, second_category_name = ?, "
                f"second_category_author = ?, second_category_description = ? {where}",
                (_now(), name, author, description, uid, index),
            )

    def _store_third(self, uid: str, second: int, index: int, item: Any) -> None:
        name = _text(_get(item, "name"))
        description = _text(_get(item, "description", "zh-CN"))
        path = _text(_get(item, "path"))
        author = _text(_get(item, "author"))
        where = (
            "WHERE deleted_at IS NULL AND first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ?"
        )
        exists = self._conn.execute(
            f"SELECT 1 FROM third_category {where} LIMIT 1", (uid, second, index)
        ).fetchone()
        if exists is None:
            self._conn.execute(
                f"INSERT INTO third_category (created_at, updated_at, {_THIRD_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (_now(), _now(), index, second, uid, name, path, author, description),
            )
        else:
            self._conn.execute(
                "UPDATE third_category SET updated_at = ?, third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                f"third_category_author = ? {where}",
                (_now(), name, description, path, author, uid, second, index),
            )

    @staticmethod
    def _download(url: str) -> bytes:
        response = requests.get(
            url, headers={"User-Agent": random.choice(_USER_AGENTS)}, timeout=_TIMEOUT
        )
        response.raise_for_status()
        return response.content

    def fetch_vtb_list(self) -> list[str]:
        """Download and store the VTuber list; return their uids."""
        return self.store_vtb_list(self._download(VTB_LIST_URL))

    def fetch_vtb_page(self, uid: str) -> None:
        """Download and store the quotations of one VTuber."""
        self.store_vtb_page(uid, self._download(VTB_PAGE_URL + uid))