"""Caption cleanup — transcript cleanup and subtitle pagination.

WHY: Word-level speech-to-text output is full of artifacts (hallucinated
words, stretched timings, echoes, false starts, repeated takes) and is
far too granular to display. This package turns it into a clean word
stream and display-ready subtitle pages, and follows captions through an
edited (cut) video without re-transcribing.

HOW: Pure, synchronous stages composed left to right:
  full_cleanup()                  — confidence, timing, echo, false-start,
                                    repeated-phrase cleanup with audit log
  group_into_pages() / create_sentence_aware_pages() / paginate()
                                  — sentence-aware pagination
  derive_cut_captions()           — remap through a cut map, then re-clean

RULES:
- Every function is total over lists of any length and never mutates input
- Removal stages return CleanupResult(captions, log)
- paginate() is the preset-driven entry point for pagination
- Python 3.9 compatible (no match/case, no X | Y unions at runtime)
"""

import copy
from typing import List, Optional, Sequence

from .core.cleanup import (
    cleanup_captions,
    full_cleanup,
    remove_false_starts,
    remove_phantom_echoes,
    remove_repeated_phrases,
)
from .core.cut import derive_cut_captions, remap_captions
from .core.ir import (
    Caption,
    CleanupLogEntry,
    CleanupReason,
    CleanupResult,
    CutMapEntry,
    Page,
)
from .core.pages import create_sentence_aware_pages, group_into_pages, group_into_sentences
from .core.silence import drop_phantom_echo_chunks, split_at_silence_gaps
from .core.timing import fix_timing_only
from .core.validation import (
    CaptionStreamError,
    InvalidCaptionTimingError,
    InvalidCutMapError,
    UnsortedCaptionsError,
    check_caption_stream,
    check_cut_map,
)
from .presets import PRESETS, PRESET_OVERLAY, PRESET_VIDEO

__version__ = "0.1.0"

__all__ = [
    "Caption",
    "CleanupLogEntry",
    "CleanupReason",
    "CleanupResult",
    "CutMapEntry",
    "Page",
    "PRESETS",
    "PRESET_OVERLAY",
    "PRESET_VIDEO",
    "CaptionStreamError",
    "InvalidCaptionTimingError",
    "InvalidCutMapError",
    "UnsortedCaptionsError",
    "check_caption_stream",
    "check_cut_map",
    "cleanup_captions",
    "create_sentence_aware_pages",
    "derive_cut_captions",
    "drop_phantom_echo_chunks",
    "fix_timing_only",
    "full_cleanup",
    "group_into_pages",
    "group_into_sentences",
    "paginate",
    "remap_captions",
    "remove_false_starts",
    "remove_phantom_echoes",
    "remove_repeated_phrases",
    "split_at_silence_gaps",
]


def paginate(
    captions: Sequence[Caption],
    preset: str = "overlay",
    config: Optional[dict] = None,
) -> List[Page]:
    """Paginate cleaned captions using a named preset or a custom config.

    HOW: Resolves the preset name to a config dict (or uses the custom
    config), copies it, pops "mode", and passes the remaining keys to the
    matching paginator.

    RULES:
    - preset must be one of: "overlay", "video"
    - If config is provided, it overrides the preset entirely
    - config["mode"] must be "words" or "duration"

    Args:
        captions: Cleaned captions in time order.
        preset: Preset name. Default: "overlay".
        config: Optional custom config dict.

    Returns:
        Pages in display order.

    Raises:
        ValueError: Unknown preset name or mode.
    """
    if config is not None:
        cfg = copy.deepcopy(config)
    else:
        if preset not in PRESETS:
            raise ValueError(
                "Unknown preset '{}'. Available: {}".format(
                    preset, ", ".join(PRESETS.keys())
                )
            )
        cfg = copy.deepcopy(PRESETS[preset])

    mode = cfg.pop("mode", "words")
    if mode == "words":
        return group_into_pages(captions, **cfg)
    if mode == "duration":
        return create_sentence_aware_pages(captions, **cfg)
    raise ValueError("Unknown pagination mode '{}'. Available: words, duration".format(mode))
