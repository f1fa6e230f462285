"""Random rebirth: pick a birthplace and a gender by weight."""

from __future__ import annotations

import bisect
import json
import random
from pathlib import Path
from typing import Iterable, Sequence

GENDERS: tuple[tuple[str, int], ...] = (
    ("男孩子", 50707),
    ("女孩子", 48292),
    ("雌雄同体", 1001),
)

_COUNTRY_SCALE = 1e9
_FAILURE_THRESHOLD = 1 << 27

SUCCESS_TEMPLATE = "投胎成功！\n您出生在 {country}, 是 {gender}。"
FAILURE_TEXT = "投胎失败！\n您没能活到出生，祝您下次好运！"


class _WeightedChooser:
    """Picks items with probability proportional to integer weights."""

    def __init__(self, choices: Iterable[tuple[str, int]], rng: random.Random) -> None:
        self._rng = rng
        self._items: list[str] = []
        self._totals: list[int] = []
        total = 0
        for item, weight in choices:
            if weight < 0:
                raise ValueError(f"negative weight for {item!r}")
            if weight == 0:
                continue
            total += weight
            self._items.append(item)
            self._totals.append(total)
        if total < 1:
            raise ValueError("zero Choices with Weight >= 1")
        self._total = total

    def pick(self) -> str:
        r = self._rng.randrange(self._total)
        return self._items[bisect.bisect_right(self._totals, r)]


def load_rates(path: str | Path) -> list[tuple[str, float]]:
    """Read the list of ``{"name", "weight"}`` entries from a JSON file."""
    entries = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(entries, list):
        raise ValueError("rate data must be a JSON array")
    return [(str(e.get("name", "")), float(e.get("weight", 0))) for e in entries]


class Reborn:
    """Chooses a random birthplace and gender."""

    def __init__(self, rates: Sequence[tuple[str, float]], rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._countries = _WeightedChooser(
            ((name, int(weight * _COUNTRY_SCALE)) for name, weight in rates), self._rng
        )
        self._genders = _WeightedChooser(GENDERS, self._rng)

    def random_country(self) -> str:
        return self._countries.pick()

    def random_gender(self) -> str:
        return self._genders.pick()

    def reborn(self) -> str:
        """Return the reply text for one rebirth attempt."""
        if self._rng.getrandbits(31) > _FAILURE_THRESHOLD:
            return SUCCESS_TEMPLATE.format(
                country=self.random_country(), gender=self.random_gender()
            )
        return FAILURE_TEXT