"""Tarot card draws, card lookup and card spreads."""

from __future__ import annotations

import json
import random
import re
from dataclasses import dataclass
from typing import Any, Mapping

BED = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
REVERSE_DIR = "Reverse/"
REASONS: tuple[str, ...] = (
    "您抽到的是~\n",
    "锵锵锵，塔罗牌的预言是~\n",
    "诶，让我看看您抽到了~\n",
)
POSITIONS: tuple[str, str] = ("『正位』", "『逆位』")
MAX_DRAW = 20
MAJOR_COUNT = 22
MINOR_COUNT = 55
TOTAL_COUNT = MAJOR_COUNT + MINOR_COUNT

MINOR_LIST_TEXT = "[圣杯|星币|宝剑|权杖] [0-10|侍从|骑士|王后|国王]"

_DRAW_COMMAND = re.compile(r"抽([0-9]{1,2}张)?((塔罗牌|大阿(尔)?卡纳)|小阿(尔)?卡纳)")


@dataclass(frozen=True)
class Card:
    """One tarot card with its upright and reversed meanings."""

    name: str
    description: str
    reverse_description: str
    img_url: str


@dataclass(frozen=True)
class Formation:
    """A card spread: how many cards and what each position stands for."""

    cards_num: int
    is_cut: bool
    represent: tuple[tuple[str, ...], ...]


def image_url(card: Card, reverse: bool) -> str:
    """Where the picture of the card, upright or reversed, is hosted."""
    return BED + (REVERSE_DIR if reverse else "") + card.img_url


@dataclass(frozen=True)
class DrawnCard:
    """A card as drawn: upright or reversed, with the phrase that announces it."""

    card: Card
    reverse: bool
    reason: str

    @property
    def position(self) -> str:
        return POSITIONS[1 if self.reverse else 0]

    @property
    def description(self) -> str:
        return self.card.reverse_description if self.reverse else self.card.description

    @property
    def image_name(self) -> str:
        """Cache name of the picture; reversed cards are prefixed with "Reverse"."""
        prefix = REVERSE_DIR[:-1] if self.reverse else ""
        return prefix + self.card.name

    @property
    def image_url(self) -> str:
        return image_url(self.card, self.reverse)

    @property
    def caption(self) -> str:
        """The heading shown above the card's picture."""
        return f"{self.reason}{self.position}的『{self.card.name}』\n"

    @property
    def message(self) -> str:
        """The full text reply for a single draw."""
        return f"{self.reason}{self.position}的『{self.card.name}』\n其释义为: {self.description}"


def parse_draw_command(text: str) -> tuple[int, bool] | None:
    """Parse "抽[n张]<塔罗牌|大阿卡纳|小阿卡纳>" into (count, minor).

    Returns None when the text is not a draw command; raises ValueError
    for a count that is not positive or is too large.
    """
    m = _DRAW_COMMAND.fullmatch(text)
    if m is None:
        return None
    n = 1
    if m.group(1):
        n = int(m.group(1)[:-1])
        if n <= 0:
            raise ValueError("张数必须为正")
        if n > MAX_DRAW:
            raise ValueError("抽取张数过多")
    return n, "小" in m.group(2)


def _card_from(value: Card | Mapping[str, Any]) -> Card:
    if isinstance(value, Card):
        return value
    info = value.get("info") or {}
    return Card(
        name=str(value.get("name", "")),
        description=str(info.get("description", "")),
        reverse_description=str(info.get("reverseDescription", "")),
        img_url=str(info.get("imgUrl", "")),
    )


def _formation_from(value: Formation | Mapping[str, Any]) -> Formation:
    if isinstance(value, Formation):
        return value
    return Formation(
        cards_num=int(value.get("cards_num", 0)),
        is_cut=bool(value.get("is_cut", False)),
        represent=tuple(tuple(str(r) for r in row) for row in value.get("represent") or ()),
    )


def _load(data: Any) -> Mapping[str, Any]:
    if isinstance(data, (str, bytes, bytearray)):
        data = json.loads(data)
    if not isinstance(data, Mapping):
        raise ValueError("tarot data must be a JSON object")
    return data


class TarotDeck:
    """The 78-card deck (indices 0..76 are used) and the known spreads.

    ``cards`` maps the index as text to a Card or to its JSON object;
    ``formations`` maps a spread name to a Formation or its JSON object.
    Either may also be given as JSON text.
    """

    def __init__(
        self,
        cards: Mapping[str, Any] | str | bytes,
        formations: Mapping[str, Any] | str | bytes,
        rng: random.Random | None = None,
    ) -> None:
        self._cards = {str(k): _card_from(v) for k, v in _load(cards).items()}
        self._formations = {str(k): _formation_from(v) for k, v in _load(formations).items()}
        self._by_name = {card.name: card for card in self._cards.values()}
        self._rng = rng if rng is not None else random.Random()

    @property
    def formation_names(self) -> list[str]:
        return list(self._formations)

    def _card_at(self, index: int) -> Card:
        try:
            return self._cards[str(index)]
        except KeyError:
            raise KeyError(f"no tarot card with index {index}") from None

    def _pick(self, start: int, length: int, n: int) -> list[DrawnCard]:
        if n <= 0:
            raise ValueError("张数必须为正")
        if n > length:
            raise ValueError("抽取张数过多")
        drawn = []
        for j in self._rng.sample(range(length), n):
            reverse = self._rng.randrange(2) == 1
            reason = self._rng.choice(REASONS)
            drawn.append(DrawnCard(self._card_at(start + j), reverse, reason))
        return drawn

    def draw(self, n: int = 1, minor: bool = False) -> list[DrawnCard]:
        """Draw ``n`` distinct cards from the major or the minor arcana."""
        if minor:
            return self._pick(MAJOR_COUNT, MINOR_COUNT, n)
        return self._pick(0, MAJOR_COUNT, n)

    def lookup(self, name: str) -> Card | None:
        """The card with this name, or None."""
        return self._by_name.get(name)

    def card_list_text(self) -> str:
        """The list of card names shown when a lookup fails."""
        major = [self._card_at(i).name for i in range(MAJOR_COUNT)]
        return (
            "塔罗牌列表\n大阿尔卡纳:\n"
            + " ".join(major[:7])
            + "\n"
            + " ".join(major[7:14])
            + "\n"
            + " ".join(major[14:22])
            + "\n小阿尔卡纳:\n"
            + MINOR_LIST_TEXT
        )

    def spread(
        self, card_type: str, formation_name: str, user: str
    ) -> tuple[list[DrawnCard], str]:
        """Lay out a spread; return the cards and the text describing it.

        ``card_type`` selects the cards: anything containing "小" uses the
        minor arcana, "混合" the whole deck, anything else the major arcana.
        Raises LookupError for an unknown spread.
        """
        formation = self._formations.get(formation_name)
        if formation is None:
            raise LookupError(
                f"没有找到{formation_name}噢~\n现有牌阵列表: \n" + "\n".join(self._formations)
            )
        if "小" in card_type:
            start, length = MAJOR_COUNT, MINOR_COUNT
        elif card_type == "混合":
            start, length = 0, TOTAL_COUNT
        else:
            start, length = 0, MAJOR_COUNT
        drawn = self._pick(start, length, formation.cards_num)
        parts = [user, "---", formation_name, "\n"]
        for meaning, item in zip(formation.represent[0], drawn):
            parts.append(
                f"{meaning}:{item.position}的『{item.card.name}』\n其释义为: \n{item.description}\n"
            )
        return drawn, "".join(parts)