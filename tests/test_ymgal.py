import random
from unittest import mock

import pytest

from floatbot.ymgal import (
    CG_TYPE,
    CG_URL,
    EMOTICON_TYPE,
    EMOTICON_URL,
    WEB_PIC_URL,
    Ymgal,
    YmgalDB,
    build_messages,
    parse_page_number,
    parse_picset,
    parse_picset_ids,
    update_pictures,
)


@pytest.fixture
def db(tmp_path):
    with YmgalDB(tmp_path / "ymgal.db") as database:
        database.rng = random.Random(1)
        yield database


def pager(last):
    return (
        '<html><body><div id="pager-box"><div>'
        '<a class="icon item">1</a>'
        f'<a class="icon item">{last}</a>'
        '<a class="icon item pager-next">next</a>'
        "</div></div></body></html>"
    )


def listing(ids, last=1):
    links = "".join(
        f'<div><div><a href="/co/picset/{i}">set</a></div>'
        f'<div><a href="/other/999">x</a></div></div>'
        for i in ids
    )
    return (
        '<html><body><div id="picset-result-list"><ul>'
        f"{links}</ul></div>"
        + pager(last)[len("<html><body>") :]
    )


def cg_page(title, description, urls):
    slides = "".join(f'<div class="slide" data-src="{u}"></div>' for u in urls)
    return (
        "<html><head>"
        f'<meta name="name" content="{title}">'
        f'<meta name="description" content="{description}">'
        "</head><body>"
        '<div class="meta-info"><div class="meta-right">'
        f"<span>a</span><span>共{len(urls)}张</span></div></div>"
        '<div id="main-picset-warp"><div><div>x</div><div><div>'
        f'<div class="swiper-wrapper">{slides}</div>'
        "</div></div></div></div></body></html>"
    )


def emoticon_page(title, description, urls):
    items = "".join(f'<div><img alt="p" src="{u}"></div>' for u in urls)
    return (
        "<html><head>"
        f'<meta name="name" content="{title}">'
        f'<meta name="description" content="{description}">'
        "</head><body>"
        '<div class="meta-info"><div class="meta-right">'
        f"<span>a</span><span>{len(urls)} pictures</span></div></div>"
        '<div id="main-picset-warp"><div>'
        f'<div class="stream-list">{items}</div>'
        "</div></div></body></html>"
    )


def test_upsert_and_get_round_trip(db):
    item = Ymgal(7, "T", CG_TYPE, "D", "a,b")
    db.upsert(item)
    assert db.get_by_id(7) == item
    assert db.get_by_id("7") == item


def test_upsert_replaces_existing(db):
    db.upsert(Ymgal(7, "T", CG_TYPE, "D", "a"))
    db.upsert(Ymgal(7, "T2", EMOTICON_TYPE, "", "b,c"))
    got = db.get_by_id(7)
    assert got == Ymgal(7, "T2", EMOTICON_TYPE, "", "b,c")
    assert got.pictures == ["b", "c"]


def test_get_missing_is_none(db):
    assert db.get_by_id(42) is None


def test_random_respects_type(db):
    db.upsert(Ymgal(1, "a", CG_TYPE, "", "u1"))
    db.upsert(Ymgal(2, "b", CG_TYPE, "", "u2"))
    db.upsert(Ymgal(3, "c", EMOTICON_TYPE, "", "u3"))
    for _ in range(10):
        assert db.random(CG_TYPE).id in {1, 2}
    assert db.random(EMOTICON_TYPE).id == 3


def test_random_empty_is_none(db):
    assert db.random(CG_TYPE) is None


def test_search_title_and_description(db):
    db.upsert(Ymgal(1, "summer pockets", CG_TYPE, "", "u1"))
    db.upsert(Ymgal(2, "other", CG_TYPE, "has summer in it", "u2"))
    db.upsert(Ymgal(3, "summer", EMOTICON_TYPE, "", "u3"))
    for _ in range(10):
        assert db.search(CG_TYPE, "summer").id in {1, 2}
    assert db.search(CG_TYPE, "pockets").id == 1
    assert db.search(EMOTICON_TYPE, "summer").id == 3
    assert db.search(CG_TYPE, "winter") is None


def test_parse_page_number():
    assert parse_page_number(pager(37)) == 37


def test_parse_page_number_missing():
    with pytest.raises(ValueError):
        parse_page_number("<html><body><p>nothing</p></body></html>")


def test_parse_picset_ids_takes_first_column_only():
    assert parse_picset_ids(listing(["11", "22"])) == ["11", "22"]


def test_parse_picset_cg():
    item = parse_picset(cg_page("Title A", "Desc A", ["u1", "u2"]), "15", CG_TYPE)
    assert item == Ymgal(15, "Title A", CG_TYPE, "Desc A", "u1,u2")


def test_parse_picset_emoticon():
    item = parse_picset(emoticon_page("E", "", ["e1", "e2", "e3"]), 4, EMOTICON_TYPE)
    assert item.picture_list == "e1,e2,e3"
    assert item.title == "E"
    assert item.picture_type == EMOTICON_TYPE


def test_parse_picset_bad_id():
    with pytest.raises(ValueError):
        parse_picset(cg_page("T", "D", ["u"]), "abc", CG_TYPE)


def test_build_messages_with_description():
    item = Ymgal(1, "T", CG_TYPE, "D", "a,b")
    assert build_messages(item) == [
        ("text", "T"),
        ("text", "D"),
        ("image", "a"),
        ("image", "b"),
    ]


def test_build_messages_without_description():
    item = Ymgal(1, "T", CG_TYPE, "", "a")
    assert build_messages(item) == [("text", "T"), ("image", "a")]


@pytest.mark.parametrize("item", [None, Ymgal(1, "T", CG_TYPE, "D", "")])
def test_build_messages_nothing(item):
    with pytest.raises(LookupError):
        build_messages(item)


class _Response:
    def __init__(self, content):
        self.content = content.encode("utf-8")

    def raise_for_status(self):
        pass


class _Session:
    def __init__(self, pages):
        self.pages = pages
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append(url)
        return _Response(self.pages[url])


@mock.patch("time.sleep")
def test_update_pictures_stops_at_known_set(_sleep, db):
    db.upsert(Ymgal(1, "old", CG_TYPE, "", "old-url"))
    session = _Session(
        {
            CG_URL + "1": listing(["1", "2"]),
            EMOTICON_URL + "1": listing(["5"]),
            WEB_PIC_URL + "2": cg_page("New", "N", ["c1"]),
            WEB_PIC_URL + "5": emoticon_page("Emo", "", ["e1", "e2"]),
        }
    )
    assert update_pictures(db, session) == 2
    assert db.get_by_id(2) == Ymgal(2, "New", CG_TYPE, "N", "c1")
    assert db.get_by_id(5).picture_list == "e1,e2"
    assert db.get_by_id(1).picture_list == "old-url"
    assert WEB_PIC_URL + "1" not in session.requested