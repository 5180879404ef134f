"""Configuration defaults and .env loading.

WHY: Cleanup thresholds were tuned on real recordings and differ between
speakers and microphones. Keeping every default in one module makes them
easy to find and lets a deployment override them without code changes.

HOW: python-dotenv loads the .env file on import. Each default is a
module-level constant read from an environment variable, falling back to
the tuned value. Pipeline functions use these constants as their keyword
defaults, so explicit arguments always win.

RULES:
- CAPTION_MIN_CONFIDENCE           float, default 0.15
- CAPTION_MAX_WORD_DURATION_MS     int,   default 800
- CAPTION_SILENCE_GAP_MS           int,   default 700
- CAPTION_MAX_WORDS_PER_PAGE       int,   default 8
- CAPTION_MAX_PAGE_DURATION_MS     int,   default 1200
- A malformed override raises ValueError naming the variable
- Values are read once, at import
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

# Load .env from the working directory
load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(
            "{} must be an integer number of milliseconds, got {!r}".format(name, raw)
        ) from None


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(
            "{} must be a number, got {!r}".format(name, raw)
        ) from None


# ---------------------------------------------------------------------------
# Cleanup defaults
# ---------------------------------------------------------------------------

DEFAULT_MIN_CONFIDENCE = _env_float("CAPTION_MIN_CONFIDENCE", 0.15)
"""Captions below this confidence are treated as hallucinations."""

DEFAULT_MAX_WORD_DURATION_MS = _env_int("CAPTION_MAX_WORD_DURATION_MS", 800)
"""No single word is displayed longer than this."""

# Overlap repair: a shrunk caption keeps at least this much duration...
MIN_SHRUNK_DURATION_MS = 50
# ...and ends this far before the next caption starts.
OVERLAP_MARGIN_MS = 10

# ---------------------------------------------------------------------------
# Segmentation and pagination defaults
# ---------------------------------------------------------------------------

DEFAULT_SILENCE_GAP_MS = _env_int("CAPTION_SILENCE_GAP_MS", 700)
"""A gap at least this long between two words is a real pause."""

DEFAULT_MAX_WORDS_PER_PAGE = _env_int("CAPTION_MAX_WORDS_PER_PAGE", 8)
DEFAULT_MIN_TAIL_WORDS = 3

DEFAULT_MAX_PAGE_DURATION_MS = _env_int("CAPTION_MAX_PAGE_DURATION_MS", 1200)
DEFAULT_MIN_TAIL_DURATION_MS = 700
