"""Chat-bot feature logic: games, fortunes, scores, sleep tracking and lookups."""

__version__ = "0.1.0"

__all__ = [
    "reborn",
    "runcode",
    "wtf",
    "sleep",
    "score",
    "shadiao",
    "wordle",
    "wordcount",
    "thesaurus",
    "tiangou",
    "tarot",
    "tracemoe",
    "vtb",
    "ymgal",
]