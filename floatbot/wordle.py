"""A word-guessing game with a fixed number of attempts."""

from __future__ import annotations

import bisect
import io
from typing import Iterable

from PIL import Image, ImageDraw, ImageFont

MATCH = "match"
EXIST = "exist"
NOTEXIST = "notexist"
UNDONE = "undone"

COLORS: dict[str, tuple[int, int, int, int]] = {
    MATCH: (125, 166, 108, 255),
    EXIST: (199, 183, 96, 255),
    NOTEXIST: (123, 123, 123, 255),
    UNDONE: (219, 219, 219, 255),
}
_WHITE = (255, 255, 255, 255)

CLASSES: dict[str, int] = {
    "": 5,
    "五阶": 5,
    "六阶": 6,
    "七阶": 7,
}

_SIDE = 20
_SPACE = 10


class WordleError(Exception):
    """Base class for rejected guesses."""


class LengthNotEnough(WordleError):
    def __init__(self) -> None:
        super().__init__("length not enough")


class UnknownWord(WordleError):
    def __init__(self) -> None:
        super().__init__("unknown word")


class TimesRunOut(WordleError):
    def __init__(self) -> None:
        super().__init__("times run out")


def class_for(name: str | None) -> int:
    """The word length for a difficulty name such as "六阶"."""
    try:
        return CLASSES[name or ""]
    except KeyError:
        raise ValueError(f"unknown word class: {name!r}") from None


class Dictionary:
    """A sorted word list with fast membership tests."""

    def __init__(self, words: Iterable[str]) -> None:
        self._words = sorted(words)

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        i = bisect.bisect_left(self._words, word)
        return i < len(self._words) and self._words[i] == word

    def __len__(self) -> int:
        return len(self._words)


class WordleGame:
    """One game: the target word and the guesses made so far."""

    def __init__(self, target: str, dictionary: Dictionary) -> None:
        self.target = target
        self.dictionary = dictionary
        self.length = len(target)
        self.max_guesses = self.length + 1
        self.guesses: list[str] = []

    def guess(self, word: str) -> bool:
        """Record a guess; return True when it is the target.

        Raises LengthNotEnough or UnknownWord for a rejected guess, which is
        not recorded, and TimesRunOut when the last attempt was used without
        winning.
        """
        if word == "":
            return False
        word = word.lower()
        win = word == self.target
        if not win:
            if len(word) != self.length:
                raise LengthNotEnough()
            if word not in self.dictionary:
                raise UnknownWord()
        self.guesses.append(word)
        if win:
            return True
        if len(self.guesses) >= self.max_guesses:
            raise TimesRunOut()
        return False

    def states(self) -> list[list[str]]:
        """For each guess, the mark of every letter: MATCH, EXIST or NOTEXIST."""
        rows = []
        for word in self.guesses:
            row = []
            for letter, wanted in zip(word, self.target):
                if letter == wanted:
                    row.append(MATCH)
                elif letter in self.target:
                    row.append(EXIST)
                else:
                    row.append(NOTEXIST)
            rows.append(row)
        return rows

    def render(self) -> bytes:
        """Draw the board as PNG bytes."""
        cell = _SIDE + 4
        width = cell * self.length + _SPACE * 2 - 4
        height = cell * (self.length + 1) + _SPACE * 2 - 4
        image = Image.new("RGBA", (width, height), _WHITE)
        draw = ImageDraw.Draw(image)
        font = ImageFont.load_default()
        states = self.states()
        for i in range(self.length + 1):
            for j in range(self.length):
                if i < len(self.guesses):
                    x = _SPACE + j * cell
                    y = _SPACE + i * cell
                    draw.rectangle(
                        [x, y, x + _SIDE - 1, y + _SIDE - 1], fill=COLORS[states[i][j]]
                    )
                    draw.text(
                        (10 + j * cell + 7, 10 + i * cell + 4),
                        self.guesses[i][j].upper(),
                        fill=_WHITE,
                        font=font,
                    )
                else:
                    x = 10 + j * cell + 1
                    y = 10 + i * cell + 1
                    draw.rectangle(
                        [x, y, x + _SIDE - 2, y + _SIDE - 2],
                        outline=COLORS[UNDONE],
                        width=1,
                    )
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return buffer.getvalue()