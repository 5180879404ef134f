"""Adapter: whisper.cpp JSON output to word-level Captions.

WHY: whisper.cpp run with --max-len 1 emits one transcription item per
word, each with segment offsets and, when DTW is enabled, a per-token
t_dtw timestamp. Segment offsets are coarse; DTW timestamps are much more
accurate for word starts. Segment end offsets also stretch across pauses,
so end times are estimated from word length instead.

HOW: For each non-empty item:
  start = t_dtw * 10 (centiseconds -> ms), or offsets.from when t_dtw is -1
  end   = min(next item's start, start + max(150, 70 * len(word)));
          the last item uses offsets.to instead of a next start
  if end <= start: end = start + max(50, offsets.to - offsets.from)

RULES:
- Items with empty text are skipped
- The first caption's text is left-stripped; later texts keep their
  leading space (it marks the word boundary)
- confidence is the first token's probability "p"
- timestamp_ms keeps the DTW value (None when unavailable)
- DTW needs flash attention disabled in whisper.cpp; with it enabled
  every t_dtw is -1 and offsets are used throughout
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from caption_cleanup.core.ir import Caption

_MIN_ESTIMATED_MS = 150
_MS_PER_CHAR = 70
_MIN_DURATION_MS = 50


def _dtw_ms(item: Dict[str, Any]) -> Optional[int]:
    t_dtw = item["tokens"][0]["t_dtw"]
    return None if t_dtw == -1 else t_dtw * 10


def _start_ms(item: Dict[str, Any]) -> int:
    dtw = _dtw_ms(item)
    return dtw if dtw is not None else item["offsets"]["from"]


def to_captions_dtw(whisper_output: Dict[str, Any]) -> List[Caption]:
    """Convert whisper.cpp JSON output into Captions using DTW timestamps.

    Args:
        whisper_output: Parsed whisper.cpp JSON with a "transcription" list.

    Returns:
        Captions in transcription order.
    """
    transcription = whisper_output["transcription"]
    captions: List[Caption] = []

    for i, item in enumerate(transcription):
        if item["text"] == "":
            continue

        dtw = _dtw_ms(item)
        start = _start_ms(item)
        offsets = item["offsets"]

        estimated_max = max(_MIN_ESTIMATED_MS, len(item["text"].strip()) * _MS_PER_CHAR)
        if i + 1 < len(transcription):
            end = min(_start_ms(transcription[i + 1]), start + estimated_max)
        else:
            end = min(offsets["to"], start + estimated_max)

        if end <= start:
            end = start + max(_MIN_DURATION_MS, offsets["to"] - offsets["from"])

        captions.append(Caption(
            text=item["text"].lstrip() if not captions else item["text"],
            start_ms=start,
            end_ms=end,
            confidence=item["tokens"][0]["p"],
            timestamp_ms=dtw,
        ))

    return captions
