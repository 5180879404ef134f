"""Timing normalization: duration caps and overlap repair.

WHY: Whisper often stretches a word across the pause that follows it, and
DTW timestamps can make neighbours overlap. A word lit up for three
seconds, or two words on screen at once, reads as a glitch.

HOW: One pass in order. Each caption's duration is capped, then the
previously emitted caption is shrunk if it runs past this caption's start.

RULES:
- Never drops or reorders captions
- Cap: end = start + max_word_duration_ms when the duration exceeds it
- Overlap: prev.end = max(prev.start + 50, cap.start - 10)
- Idempotent: running it on its own output changes nothing
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

from caption_cleanup.config import (
    DEFAULT_MAX_WORD_DURATION_MS,
    MIN_SHRUNK_DURATION_MS,
    OVERLAP_MARGIN_MS,
)
from caption_cleanup.core.ir import Caption


def fix_timing_only(
    captions: Sequence[Caption],
    max_word_duration_ms: int = DEFAULT_MAX_WORD_DURATION_MS,
) -> List[Caption]:
    """Cap word durations and remove overlaps without removing any words.

    This is the lossless variant: safe on a raw transcript where every word
    must survive. cleanup_captions() runs the same pass after filtering.

    Args:
        captions: Captions in time order.
        max_word_duration_ms: Longest duration any caption may keep.

    Returns:
        New list of the same length with adjusted end times.
    """
    fixed: List[Caption] = []

    for cap in captions:
        if cap.end_ms - cap.start_ms > max_word_duration_ms:
            cap = replace(cap, end_ms=cap.start_ms + max_word_duration_ms)

        if fixed:
            prev = fixed[-1]
            if prev.end_ms > cap.start_ms:
                fixed[-1] = replace(
                    prev,
                    end_ms=max(
                        prev.start_ms + MIN_SHRUNK_DURATION_MS,
                        cap.start_ms - OVERLAP_MARGIN_MS,
                    ),
                )

        fixed.append(cap)

    return fixed
