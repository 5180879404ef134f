"""Caption stream builders shared by the test modules.

WHY: Almost every test builds short caption streams by hand. A compact
cap() helper keeps those streams readable as (text, start, end) rows, and
a seeded generator gives the property tests realistic, reproducible
Whisper-like input.

HOW: cap() builds a Caption, timed() lays out a pause-free run of words,
and make_stream() builds a random stream from a seed, with a small
vocabulary so echoes, stutters, and repeats occur.

RULES:
- Random streams are always seeded; tests must be deterministic
- Generated streams are sorted by start time (well-formed input)
"""

import random
from typing import List, Optional

from caption_cleanup.core.ir import Caption

VOCAB = ["si", "estás", "empezando", "hola", "bien", "pero", "luego", "vale"]
ENDINGS = ["", "", "", "", ",", ".", "?", "...", "…"]


def cap(
    text: str,
    start_ms: int,
    end_ms: int,
    confidence: Optional[float] = 0.9,
) -> Caption:
    return Caption(text=text, start_ms=start_ms, end_ms=end_ms, confidence=confidence)


def timed(texts: List[str], start: int = 0, duration: int = 100, step: int = 150) -> List[Caption]:
    """Captions with sequential timing and no silence gaps."""
    out = []
    t = start
    for text in texts:
        out.append(cap(text, t, t + duration))
        t += step
    return out


def make_stream(seed: int, length: int = 60) -> List[Caption]:
    rng = random.Random(seed)
    out = []
    t = rng.randint(0, 500)
    for i in range(length):
        word = rng.choice(VOCAB) + rng.choice(ENDINGS)
        if rng.random() < 0.05:
            word = "[música]"
        text = word if i == 0 else " " + word
        duration = rng.choice([40, 120, 200, 350, 900, 1500])
        confidence = rng.choice([None, 0.05, 0.5, 0.9, 0.99])
        out.append(Caption(text=text, start_ms=t, end_ms=t + duration, confidence=confidence))
        # Mostly tight spacing, occasional overlap, occasional long pause
        t += rng.choice([-30, 60, 150, 250, 400, 800, 1200])
        t = max(t, out[-1].start_ms)
    return out
