"""Derive captions for a cut (edited) video from the original captions.

WHY: After the editor trims the source video, captions must follow the
kept segments into the cut timeline. Re-running speech-to-text on the cut
video is slow and can transcribe differently; remapping the original
word timestamps through the cut map is exact and instant.

HOW: For each cut-map entry, in order, take the original captions that
start inside the entry's original interval and shift them by the
entry's offset. A caption's end is clamped to the entry's final end so it
never bleeds past a cut point. Optionally re-run full_cleanup(), because a
cut can create artifacts that did not exist before (an echo word that now
sits right before the same word from a later segment), then finish with a
lossless timing pass.

RULES:
- Selection: original_start_ms <= caption.start_ms < original_end_ms
- start' = final_start_ms + (start - original_start_ms)
- end'   = min(final_start_ms + (end - original_start_ms), final_end_ms)
- Output order follows the cut map, not the original timeline
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Sequence

from caption_cleanup.config import (
    DEFAULT_MAX_WORD_DURATION_MS,
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_SILENCE_GAP_MS,
)
from caption_cleanup.core.cleanup import full_cleanup
from caption_cleanup.core.ir import Caption, CleanupResult, CutMapEntry
from caption_cleanup.core.timing import fix_timing_only
from caption_cleanup.core.validation import check_caption_stream, check_cut_map

logger = logging.getLogger(__name__)


def remap_captions(
    full_captions: Sequence[Caption],
    cut_map: Sequence[CutMapEntry],
) -> List[Caption]:
    """Forward-remap original captions into the cut timeline, no cleanup."""
    result: List[Caption] = []

    for entry in cut_map:
        for cap in full_captions:
            if not entry.original_start_ms <= cap.start_ms < entry.original_end_ms:
                continue
            offset = cap.start_ms - entry.original_start_ms
            end_offset = cap.end_ms - entry.original_start_ms
            result.append(replace(
                cap,
                start_ms=entry.final_start_ms + offset,
                end_ms=min(entry.final_start_ms + end_offset, entry.final_end_ms),
            ))

    return result


def derive_cut_captions(
    full_captions: Sequence[Caption],
    cut_map: Sequence[CutMapEntry],
    cleanup: bool = True,
    *,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    max_word_duration_ms: int = DEFAULT_MAX_WORD_DURATION_MS,
    silence_gap_ms: int = DEFAULT_SILENCE_GAP_MS,
    strict: bool = False,
) -> CleanupResult:
    """Derive cut-video captions from original captions and a cut map.

    Args:
        full_captions: Captions on the original (uncut) timeline.
        cut_map: Surviving intervals, sorted by final_start_ms.
        cleanup: Re-run the cleanup pipeline and a final timing pass.
        min_confidence: Passed to full_cleanup().
        max_word_duration_ms: Passed to full_cleanup() and the timing pass.
        silence_gap_ms: Passed to full_cleanup().
        strict: Validate the captions and cut map before remapping.

    Returns:
        CleanupResult with cut-timeline captions; the log is empty when
        cleanup is False.

    Raises:
        CaptionStreamError: Only with strict=True, on malformed input.
    """
    if strict:
        check_caption_stream(full_captions)
        check_cut_map(cut_map)

    remapped = remap_captions(full_captions, cut_map)
    logger.info(
        "Remapped %d of %d captions through %d cut segments",
        len(remapped), len(full_captions), len(cut_map),
    )

    if not cleanup:
        return CleanupResult(remapped, [])

    cleaned, log = full_cleanup(
        remapped,
        min_confidence=min_confidence,
        max_word_duration_ms=max_word_duration_ms,
        silence_gap_ms=silence_gap_ms,
    )
    return CleanupResult(fix_timing_only(cleaned, max_word_duration_ms), log)
