"""Galgame CG and sticker sets from the ymgal picture site, cached in SQLite."""

from __future__ import annotations

import random
import re
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote_plus

import lxml.html
import requests

WEB_URL = "https://www.ymgal.games"
CG_TYPE = "Gal CG"
EMOTICON_TYPE = "其他"
WEB_PIC_URL = WEB_URL + "/co/picset/"
CG_URL = (
    WEB_URL + "/search?type=picset&sort=default&category=" + quote_plus(CG_TYPE) + "&page="
)
EMOTICON_URL = (
    WEB_URL + "/search?type=picset&sort=default&category=" + quote_plus(EMOTICON_TYPE) + "&page="
)

NOT_FOUND_TEXT = "暂时没有这样的图呢"

_PAGE_NUMBER_XPATH = (
    "//*[@id='pager-box']/div/a[@class='icon item pager-next']"
    "/preceding-sibling::a[1]/text()"
)
_PICSET_LINKS_XPATH = "//*[@id='picset-result-list']/ul/div/div[1]/a"
_TITLE_XPATH = "//meta[@name='name']"
_DESCRIPTION_XPATH = "//meta[@name='description']"
_PICTURE_NUMBER_XPATH = "//div[@class='meta-info']/div[@class='meta-right']/span[2]/text()"
_CG_PICTURE_XPATH = (
    "//*[@id='main-picset-warp']/div/div[2]/div/div[@class='swiper-wrapper']/div[{}]"
)
_EMOTICON_PICTURE_XPATH = (
    "//*[@id='main-picset-warp']/div/div[@class='stream-list']/div[{}]/img"
)
_NUMBER = re.compile(r"\d+")
_DELAY = 0.5
_TIMEOUT = 30

_SCHEMA = (
    "CREATE TABLE IF NOT EXISTS ymgal ("
    "id INTEGER PRIMARY KEY, title VARCHAR(255), picture_type VARCHAR(255), "
    "picture_description VARCHAR(1024), picture_list VARCHAR(20000))"
)
_COLUMNS = "id, title, picture_type, picture_description, picture_list"


@dataclass(frozen=True)
class Ymgal:
    """One picture set: its title, kind, description and comma-separated picture URLs."""

    id: int
    title: str
    picture_type: str
    picture_description: str = ""
    picture_list: str = ""

    @property
    def pictures(self) -> list[str]:
        return self.picture_list.split(",") if self.picture_list else []


def _row(row: tuple[Any, ...] | None) -> Ymgal | None:
    if row is None:
        return None
    return Ymgal(
        id=row[0],
        title=row[1] or "",
        picture_type=row[2] or "",
        picture_description=row[3] or "",
        picture_list=row[4] or "",
    )


class YmgalDB:
    """SQLite store of picture sets."""

    def __init__(self, path: str | Path) -> None:
        self._conn = sqlite3.connect(str(path))
        self.rng = random.Random()
        with self._conn:
            self._conn.execute(_SCHEMA)

    def __enter__(self) -> "YmgalDB":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def upsert(self, item: Ymgal) -> None:
        """Insert the set, or replace the stored one with the same id."""
        with self._conn:
            self._conn.execute(
                f"INSERT INTO ymgal ({_COLUMNS}) VALUES (?, ?, ?, ?, ?) "
                "ON CONFLICT(id) DO UPDATE SET title = excluded.title, "
                "picture_type = excluded.picture_type, "
                "picture_description = excluded.picture_description, "
                "picture_list = excluded.picture_list",
                (
                    item.id,
                    item.title,
                    item.picture_type,
                    item.picture_description,
                    item.picture_list,
                ),
            )

    def get_by_id(self, id: int | str) -> Ymgal | None:
        """The set with this id, or None."""
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE id = ? LIMIT 1", (int(id),)
        ).fetchone()
        return _row(row)

    def _random_where(self, where: str, params: tuple[Any, ...]) -> Ymgal | None:
        (count,) = self._conn.execute(
            f"SELECT COUNT(*) FROM ymgal WHERE {where}", params
        ).fetchone()
        if count == 0:
            return None
        row = self._conn.execute(
            f"SELECT {_COLUMNS} FROM ymgal WHERE {where} LIMIT 1 OFFSET ?",
            (*params, self.rng.randrange(count)),
        ).fetchone()
        return _row(row)

    def random(self, picture_type: str) -> Ymgal | None:
        """A random set of this kind, or None when there are none."""
        return self._random_where("picture_type = ?", (picture_type,))

    def search(self, picture_type: str, key: str) -> Ymgal | None:
        """A random set of this kind whose title or description contains ``key``."""
        pattern = f"%{key}%"
        return self._random_where(
            "picture_type = ? AND (picture_description LIKE ? OR title LIKE ?)",
            (picture_type, pattern, pattern),
        )


def _attr(element: Any, index: int) -> str:
    values = list(element.attrib.values())
    if index >= len(values):
        raise ValueError(f"element <{element.tag}> has no attribute #{index}")
    return values[index]


def _find_one(doc: Any, xpath: str) -> Any:
    found = doc.xpath(xpath)
    if not found:
        raise ValueError(f"nothing found at {xpath}")
    return found[0]


def parse_page_number(html: str | bytes) -> int:
    """The number of the last result page of a search page."""
    doc = lxml.html.fromstring(html)
    return int(str(_find_one(doc, _PAGE_NUMBER_XPATH)))


def parse_picset_ids(html: str | bytes) -> list[str]:
    """The ids of the picture sets listed on a search page, in page order."""
    doc = lxml.html.fromstring(html)
    ids = []
    for link in doc.xpath(_PICSET_LINKS_XPATH):
        m = _NUMBER.search(_attr(link, 0))
        ids.append(m.group(0) if m else "")
    return ids


def parse_picset(html: str | bytes, pid: int | str, picture_type: str) -> Ymgal:
    """Read a picture set from its page."""
    picture_id = int(pid)
    doc = lxml.html.fromstring(html)
    title = _attr(_find_one(doc, _TITLE_XPATH), 1)
    description = _attr(_find_one(doc, _DESCRIPTION_XPATH), 1)
    number_text = str(_find_one(doc, _PICTURE_NUMBER_XPATH))
    m = _NUMBER.search(number_text)
    if m is None:
        raise ValueError(f"no picture count in {number_text!r}")
    count = int(m.group(0))
    xpath = _CG_PICTURE_XPATH if picture_type == CG_TYPE else _EMOTICON_PICTURE_XPATH
    urls = [_attr(_find_one(doc, xpath.format(i)), 1) for i in range(1, count + 1)]
    return Ymgal(
        id=picture_id,
        title=title,
        picture_type=picture_type,
        picture_description=description,
        picture_list=",".join(urls),
    )


def build_messages(item: Ymgal | None) -> list[tuple[str, str]]:
    """The forwarded nodes for a set: ("text", ...) and ("image", url) pairs.

    Raises LookupError when there is no set or it has no pictures.
    """
    if item is None or not item.picture_list:
        raise LookupError(NOT_FOUND_TEXT)
    nodes = [("text", item.title)]
    if item.picture_description:
        nodes.append(("text", item.picture_description))
    nodes.extend(("image", url) for url in item.picture_list.split(","))
    return nodes


def _fetch(session: requests.Session, url: str) -> bytes:
    response = session.get(url, timeout=_TIMEOUT)
    response.raise_for_status()
    return response.content


def _collect_ids(session: requests.Session, base_url: str, pages: int) -> list[str]:
    ids: list[str] = []
    for page in range(1, pages + 1):
        ids.extend(parse_picset_ids(_fetch(session, base_url + str(page))))
        time.sleep(_DELAY)
    return ids


def _store_new(
    db: YmgalDB, session: requests.Session, ids: list[str], picture_type: str
) -> int:
    stored = 0
    for picture_id in reversed(ids):
        existing = db.get_by_id(picture_id)
        if existing is not None and existing.picture_list:
            break
        page = _fetch(session, WEB_PIC_URL + picture_id)
        db.upsert(parse_picset(page, picture_id, picture_type))
        stored += 1
        time.sleep(_DELAY)
    return stored


def update_pictures(db: YmgalDB, session: requests.Session | None = None) -> int:
    """Crawl the site for sets not yet stored; return how many were added."""
    client = session if session is not None else requests.Session()
    cg_pages = parse_page_number(_fetch(client, CG_URL + "1"))
    emoticon_pages = parse_page_number(_fetch(client, EMOTICON_URL + "1"))
    cg_ids = _collect_ids(client, CG_URL, cg_pages)
    emoticon_ids = _collect_ids(client, EMOTICON_URL, emoticon_pages)
    stored = _store_new(db, client, cg_ids, CG_TYPE)
    stored += _store_new(db, client, emoticon_ids, EMOTICON_TYPE)
    return stored