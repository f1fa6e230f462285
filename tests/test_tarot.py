import json
import random

import pytest

from floatbot.tarot import (
    BED,
    MINOR_LIST_TEXT,
    POSITIONS,
    REASONS,
    Card,
    DrawnCard,
    Formation,
    TarotDeck,
    image_url,
    parse_draw_command,
)


def _cards():
    return {
        str(i): Card(f"card{i}", f"desc{i}", f"rev{i}", f"{i}.png") for i in range(77)
    }


def _formations():
    return {
        "圣三角": Formation(3, False, (("过去", "现在", "未来"),)),
        "四要素": Formation(4, True, (("火", "水", "风", "土"),)),
    }


@pytest.fixture
def deck():
    return TarotDeck(_cards(), _formations(), random.Random(7))


def _index(card):
    return int(card.name[len("card"):])


def test_parse_single():
    assert parse_draw_command("抽塔罗牌") == (1, False)
    assert parse_draw_command("抽大阿尔卡纳") == (1, False)


def test_parse_count_and_minor():
    assert parse_draw_command("抽3张小阿卡纳") == (3, True)
    assert parse_draw_command("抽20张大阿卡纳") == (20, False)


def test_parse_not_a_command():
    assert parse_draw_command("抽奖") is None
    assert parse_draw_command("抽123张塔罗牌") is None


@pytest.mark.parametrize("text", ["抽0张塔罗牌", "抽21张塔罗牌"])
def test_parse_bad_count(text):
    with pytest.raises(ValueError):
        parse_draw_command(text)


def test_image_url():
    card = Card("愚者", "d", "r", "0.png")
    assert image_url(card, False) == BED + "0.png"
    assert image_url(card, True) == BED + "Reverse/0.png"


def test_drawn_card_properties():
    card = Card("愚者", "up", "down", "0.png")
    upright = DrawnCard(card, False, REASONS[0])
    reversed_ = DrawnCard(card, True, REASONS[0])
    assert upright.description == "up"
    assert reversed_.description == "down"
    assert upright.position == POSITIONS[0]
    assert reversed_.image_name == "Reverse愚者"
    assert upright.image_name == "愚者"
    assert upright.message == REASONS[0] + POSITIONS[0] + "的『愚者』\n其释义为: up"


def test_draw_major_distinct(deck):
    drawn = deck.draw(20, False)
    indices = [_index(d.card) for d in drawn]
    assert len(set(indices)) == 20
    assert all(0 <= i < 22 for i in indices)


def test_draw_minor_range(deck):
    drawn = deck.draw(10, True)
    indices = [_index(d.card) for d in drawn]
    assert len(set(indices)) == 10
    assert all(22 <= i < 77 for i in indices)


def test_draw_reasons_and_descriptions(deck):
    for d in deck.draw(15):
        assert d.reason in REASONS
        expected = d.card.reverse_description if d.reverse else d.card.description
        assert d.description == expected


def test_draw_is_reproducible():
    a = TarotDeck(_cards(), _formations(), random.Random(3)).draw(5)
    b = TarotDeck(_cards(), _formations(), random.Random(3)).draw(5)
    assert a == b


def test_draw_invalid_count(deck):
    with pytest.raises(ValueError):
        deck.draw(0)
    with pytest.raises(ValueError):
        deck.draw(23)


def test_draw_missing_card():
    cards = {str(i): Card(f"c{i}", "", "", "") for i in range(5)}
    d = TarotDeck(cards, {}, random.Random(1))
    with pytest.raises(KeyError):
        d.draw(10)


def test_lookup(deck):
    assert deck.lookup("card5") == _cards()["5"]
    assert deck.lookup("nope") is None


def test_card_list_text(deck):
    text = deck.card_list_text()
    assert text.startswith("塔罗牌列表\n大阿尔卡纳:\n")
    assert text.endswith("\n小阿尔卡纳:\n" + MINOR_LIST_TEXT)
    lines = text.split("\n")
    assert lines[2].split(" ") == [f"card{i}" for i in range(7)]
    assert lines[4].split(" ") == [f"card{i}" for i in range(14, 22)]


def test_spread_text(deck):
    drawn, text = deck.spread("塔罗", "圣三角", "alice")
    assert len(drawn) == 3
    assert text.startswith("alice---圣三角\n")
    for meaning, d in zip(("过去", "现在", "未来"), drawn):
        assert f"{meaning}:{d.position}的『{d.card.name}』\n其释义为: \n{d.description}\n" in text
    assert all(_index(d.card) < 22 for d in drawn)


def test_spread_minor_and_mixed(deck):
    drawn, _ = deck.spread("小阿尔卡纳", "四要素", "bob")
    assert all(22 <= _index(d.card) < 77 for d in drawn)
    drawn, _ = deck.spread("混合", "四要素", "bob")
    assert len({_index(d.card) for d in drawn}) == 4


def test_spread_unknown(deck):
    with pytest.raises(LookupError) as info:
        deck.spread("塔罗", "十字", "alice")
    assert "圣三角" in str(info.value)
    assert "四要素" in str(info.value)


def test_deck_from_json():
    cards = {
        "0": {
            "name": "愚者",
            "info": {"description": "up", "reverseDescription": "down", "imgUrl": "0.png"},
        }
    }
    formations = {"x": {"cards_num": 1, "is_cut": False, "represent": [["一"]]}}
    d = TarotDeck(json.dumps(cards), formations, random.Random(0))
    assert d.lookup("愚者") == Card("愚者", "up", "down", "0.png")
    assert d.formation_names == ["x"]