"""Canned replies looked up by exact message text."""

from __future__ import annotations

import json
import random
from typing import Mapping, Sequence


class Thesaurus:
    """Maps a message to a list of possible replies."""

    def __init__(
        self, mapping: Mapping[str, Sequence[str]], rng: random.Random | None = None
    ) -> None:
        self._mapping = {key: list(values) for key, values in mapping.items()}
        self._rng = rng if rng is not None else random.Random()

    def keys(self) -> list[str]:
        """All messages that have replies."""
        return list(self._mapping)

    def __contains__(self, key: object) -> bool:
        return key in self._mapping

    def reply(self, key: str) -> str:
        """A random reply to ``key``; KeyError if there is none."""
        replies = self._mapping[key]
        if not replies:
            raise ValueError(f"no replies for {key!r}")
        return self._rng.choice(replies)


def load_thesaurus(data: str | bytes, rng: random.Random | None = None) -> Thesaurus:
    """Build a Thesaurus from a JSON object of lists of strings."""
    mapping = json.loads(data)
    if not isinstance(mapping, dict):
        raise ValueError("thesaurus data must be a JSON object")
    for key, values in mapping.items():
        if not isinstance(values, list):
            raise ValueError(f"replies for {key!r} must be a list")
    return Thesaurus({k: [str(v) for v in vs] for k, vs in mapping.items()}, rng)