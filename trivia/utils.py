import html
import random


def shuffle(items, rng: random.Random | None = None) -> list:
    """Return a uniformly shuffled copy of `items`. The input is left untouched."""
    pool = list(items)
    source = rng or random
    return source.sample(pool, len(pool))


def decode_text(value: str) -> str:
    return html.unescape(value)
