# floatbot

The logic behind a set of chat-bot features, kept free of any particular
chat protocol. Each module holds the parsing, state and storage for one
feature; a bot front end passes message text in and sends the returned
text or image bytes back out.

## Features

| Module | What it provides |
| --- | --- |
| `floatbot.reborn` | `Reborn`: a weighted random birthplace and gender; `load_rates` reads the weights from JSON |
| `floatbot.runcode` | `parse_command` for `>runcode[raw] <language> <code>` into a `RunRequest`; `cut_too_long` trims long output |
| `floatbot.wtf` | A fixed table of quiz generators (`new_wtf`, `list_text`) and `Wtf.predict`, which queries the web API |
| `floatbot.sleep` | `SleepDB`: good-morning / good-night ranks per group in SQLite, with `morning_reply` and `evening_reply` |
| `floatbot.score` | `ScoreDB` and `sign_in`: daily sign-in, scores capped at 120, levels and `top_scores` |
| `floatbot.shadiao` | `fetch_text(command)` for the commands in `COMMANDS`, plus the response parsers |
| `floatbot.wordle` | `WordleGame` and `Dictionary`: guesses, letter states and a PNG board from `render()` |
| `floatbot.wordcount` | Stopword loading, `count_words`, `rank_by_word_count` and `normalize_params` |
| `floatbot.thesaurus` | `Thesaurus` / `load_thesaurus`: a random canned reply for an exact message |
| `floatbot.tiangou` | `TiangouDB`: random entries from a SQLite table |
| `floatbot.tarot` | `TarotDeck`: draws, lookup by name, the card list and spreads; `parse_draw_command` |
| `floatbot.tracemoe` | `TraceResult` and `describe_result`: formatting of an anime scene search result |
| `floatbot.vtb` | `VtbDB`: a three-level catalogue of voice clips in SQLite, filled from the site's JSON |
| `floatbot.ymgal` | `YmgalDB`, page parsers and `update_pictures`: galgame picture sets scraped and searched |

## Examples

Reborn, with rates read from a JSON array of `name`/`weight` entries:

```python
import random
from floatbot.reborn import Reborn, load_rates

reborn = Reborn(load_rates("rate.json"), random.Random())
print(reborn.reborn())
```

A game of Wordle. A rejected guess raises `LengthNotEnough` or
`UnknownWord` and is not recorded; using the last attempt without winning
raises `TimesRunOut`:

```python
from floatbot.wordle import Dictionary, UnknownWord, WordleGame

dictionary = Dictionary(["apple", "crane", "slate"])
game = WordleGame("crane", dictionary)
try:
    game.guess("slate")
except UnknownWord:
    print("not a word")
print(game.states())
png = game.render()
```

Trimming program output before it is posted:

```python
from floatbot.runcode import cut_too_long, parse_command

request = parse_command(">runcode python print(1)")
print(request.language, request.code)
print(cut_too_long("line\n" * 100))
```

Sign-in scores and levels:

```python
from datetime import datetime
from floatbot.score import ScoreDB, get_level, sign_in

with ScoreDB("score.db") as db:
    result = sign_in(db, 10001, datetime.now())
    print(result.already_signed, result.progress_text)
    print(get_level(db.get_score(10001).score))
```

Sleep tracking:

```python
from datetime import datetime
from floatbot.sleep import SleepDB, evening_reply

with SleepDB("sleep.db") as db:
    position, awake = db.sleep(20002, 10001, datetime.now())
    print(evening_reply(position, awake))
```

## What the package does not do

- It does not connect to any chat service, match incoming messages to
  features or send replies; that is left to the bot front end.
- `runcode` only parses the command and trims output; it does not run code.
- `tracemoe` only formats a result; it does not perform the image search.
- `wordcount` counts words it is given; it does not fetch chat history or
  split messages into words.
- `score` does not draw sign-in cards or ranking charts, and `tarot` does
  not download or cache card pictures; both return data and text only.
- The data files the features read (rates, thesaurus JSON, tarot cards and
  spreads, word lists, databases) are not shipped and are not downloaded.
- There is no command-line entry point.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.