"""Pagination presets for the two page layouts.

WHY: The editor overlay and the rendered video paginate differently. The
overlay shows a fixed number of words per page. The rendered video paces
pages by on-screen time. Naming the two layouts lets callers choose one by
name without knowing the thresholds.

HOW: Each preset is a plain dict. "mode" picks the paginator ("words" or
"duration"); the remaining keys are that paginator's keyword arguments.
PRESETS maps names to dicts.

RULES:
- Presets are constants. Never mutate them; paginate() works on a copy.
- silence_gap_ms is shared by both modes.
"""

from typing import Dict

from caption_cleanup.config import (
    DEFAULT_MAX_PAGE_DURATION_MS,
    DEFAULT_MAX_WORDS_PER_PAGE,
    DEFAULT_MIN_TAIL_DURATION_MS,
    DEFAULT_MIN_TAIL_WORDS,
    DEFAULT_SILENCE_GAP_MS,
)

# Editor overlay: word-count pages
PRESET_OVERLAY: Dict = {
    "mode": "words",
    "silence_gap_ms": DEFAULT_SILENCE_GAP_MS,
    "max_words_per_page": DEFAULT_MAX_WORDS_PER_PAGE,
    "min_tail_words": DEFAULT_MIN_TAIL_WORDS,
}

# Rendered video: duration-paced pages
PRESET_VIDEO: Dict = {
    "mode": "duration",
    "silence_gap_ms": DEFAULT_SILENCE_GAP_MS,
    "max_page_duration_ms": DEFAULT_MAX_PAGE_DURATION_MS,
    "min_tail_duration_ms": DEFAULT_MIN_TAIL_DURATION_MS,
}

PRESETS: Dict[str, Dict] = {
    "overlay": PRESET_OVERLAY,
    "video": PRESET_VIDEO,
}
