"""Counting of hot words in chat history."""

from __future__ import annotations

import bisect
import re
from collections import Counter
from typing import Iterable, Mapping, Sequence

_CHINESE = re.compile(r"[一-龥]+")

MAX_MESSAGES = 10000
DEFAULT_MESSAGES = 1000
TOP_N = 20


def load_stopwords(text: str) -> list[str]:
    """Split a stopword file into a sorted list."""
    return sorted(text.replace("\r", "").split("\n"))


def is_candidate(word: str, stopwords: Sequence[str]) -> bool:
    """True for an all-Chinese word that is not a stopword.

    ``stopwords`` must be sorted.
    """
    if not _CHINESE.fullmatch(word):
        return False
    i = bisect.bisect_left(stopwords, word)
    return i >= len(stopwords) or stopwords[i] != word


def count_words(slices: Iterable[str], stopwords: Sequence[str]) -> Counter[str]:
    """Count the candidate words among the given word slices."""
    counts: Counter[str] = Counter()
    for piece in slices:
        word = piece.strip()
        if is_candidate(word, stopwords):
            counts[word] += 1
    return counts


def rank_by_word_count(frequencies: Mapping[str, int]) -> list[tuple[str, int]]:
    """Words with their counts, most frequent first."""
    return sorted(frequencies.items(), key=lambda item: item[1], reverse=True)


def _to_int(value: int | str | None) -> int:
    if isinstance(value, int):
        return value
    try:
        return int(value or "")
    except ValueError:
        return 0


def normalize_params(
    gid: int | str | None, count: int | str | None, default_gid: int
) -> tuple[int, int]:
    """Apply the defaults and the limit to a group id and a message count."""
    group = _to_int(gid)
    messages = _to_int(count)
    if messages > MAX_MESSAGES:
        messages = MAX_MESSAGES
    if messages == 0:
        messages = DEFAULT_MESSAGES
    if group == 0:
        group = default_gid
    return group, messages