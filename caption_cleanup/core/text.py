"""Text normalization rules shared by every cleanup and pagination stage.

WHY: Phantom-echo, false-start, and repeated-phrase detection all compare
words. If each stage normalized text its own way, two stages could
disagree about whether "si..." and "si" are the same word. Keeping every
rule here guarantees they agree.

HOW: Small pure functions over a single caption text. The three
normalizations differ on purpose:
  normalize_word        — trim, lowercase, drop . , ! ? and the "…" char
  strip_ellipsis        — drop runs of two or more periods and "…" only
  strip_sentence_punct  — drop . , ! ? only ("…" survives)

RULES:
- "…" (U+2026) and "..." are distinct characters; both are handled
  explicitly, never folded into one another.
- Lowercasing uses str.lower(), which is Unicode-aware (É -> é).
- Sentence ends are judged on the trimmed text: [.?!…] as last char.
- A caption starting with a space begins a new word; without one it
  continues the previous word (sub-word token).
"""

from __future__ import annotations

import re
from typing import Iterable, List

from caption_cleanup.core.ir import Caption

ELLIPSIS = "…"

_WORD_PUNCT_RE = re.compile(r"[.,!?…]")
_ELLIPSIS_RE = re.compile(r"\.{2,}|…")
_SENTENCE_PUNCT_RE = re.compile(r"[.,!?]")
_SENTENCE_END_RE = re.compile(r"[.?!…]$")
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_word(text: str) -> str:
    """Trim, lowercase, and strip . , ! ? … from a word.

    Used for single-word equality (phantom echoes).
    """
    return _WORD_PUNCT_RE.sub("", text.strip().lower())


def strip_ellipsis(text: str) -> str:
    """Trim, lowercase, and remove ellipses ("..", "...", "…")."""
    return _ELLIPSIS_RE.sub("", text.strip().lower())


def strip_sentence_punct(text: str) -> str:
    """Trim, lowercase, and remove . , ! ? (the "…" character is kept)."""
    return _SENTENCE_PUNCT_RE.sub("", text.strip().lower())


def ends_with_ellipsis(text: str) -> bool:
    """True if the trimmed text trails off with "..." or "…"."""
    t = text.strip()
    return t.endswith("...") or t.endswith(ELLIPSIS)


def ends_sentence(text: str) -> bool:
    """True if the trimmed text ends with . ? ! or …."""
    return bool(_SENTENCE_END_RE.search(text.strip()))


def starts_new_word(text: str) -> bool:
    """True if the caption text begins with a space (a real word boundary)."""
    return text.startswith(" ")


def phrase_text(captions: Iterable[Caption]) -> str:
    """Join trimmed, lowercased caption texts with single spaces."""
    return " ".join(c.text.strip().lower() for c in captions)


def split_words(phrase: str) -> List[str]:
    """Split a phrase on whitespace runs.

    Unlike str.split(), an empty phrase yields one empty word, so two empty
    phrases still compare as equal-length.
    """
    return _WHITESPACE_RE.split(phrase)


def joined_trimmed(captions: Iterable[Caption]) -> str:
    """Trimmed caption texts joined with single spaces (for audit log text)."""
    return " ".join(c.text.strip() for c in captions)
