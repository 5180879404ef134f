"""Precondition checks for caption streams and cut maps.

WHY: Every stage assumes captions arrive sorted by start time with sane
durations. On unsorted input the silence splitter sees negative gaps and
silently mis-segments. Strict callers can check the stream up front and
get a clear error instead of a quietly wrong page layout.

HOW: check_caption_stream() and check_cut_map() scan once and raise on the
first violation. The pipeline calls them only when asked (strict=True), so
the default behaviour stays total over any input.

RULES:
- Start times must be non-decreasing
- Times must be non-negative and end_ms >= start_ms
- Cut maps: positive-length intervals, sorted by final_start_ms,
  non-overlapping in the final timeline
"""

from __future__ import annotations

from typing import Sequence

from caption_cleanup.core.ir import Caption, CutMapEntry


class CaptionStreamError(ValueError):
    """Base class for malformed caption streams and cut maps."""


class UnsortedCaptionsError(CaptionStreamError):
    """Raised when start times decrease between two adjacent captions."""

    def __init__(self, index: int, prev_start_ms: int, start_ms: int) -> None:
        self.index = index
        super().__init__(
            "Caption {} starts at {}ms, before the previous caption ({}ms)".format(
                index, start_ms, prev_start_ms
            )
        )


class InvalidCaptionTimingError(CaptionStreamError):
    """Raised when a caption has negative times or ends before it starts."""

    def __init__(self, index: int, caption: Caption) -> None:
        self.index = index
        super().__init__(
            "Caption {} ({!r}) has invalid timing {}ms-{}ms".format(
                index, caption.text.strip(), caption.start_ms, caption.end_ms
            )
        )


class InvalidCutMapError(CaptionStreamError):
    """Raised when a cut map is unsorted, overlapping, or has empty intervals."""


def check_caption_stream(captions: Sequence[Caption]) -> None:
    """Raise if captions are unsorted or have impossible timing.

    Raises:
        InvalidCaptionTimingError: negative time or end_ms < start_ms.
        UnsortedCaptionsError: start_ms decreases between neighbours.
    """
    for i, cap in enumerate(captions):
        if cap.start_ms < 0 or cap.end_ms < cap.start_ms:
            raise InvalidCaptionTimingError(i, cap)
        if i > 0 and cap.start_ms < captions[i - 1].start_ms:
            raise UnsortedCaptionsError(i, captions[i - 1].start_ms, cap.start_ms)


def check_cut_map(cut_map: Sequence[CutMapEntry]) -> None:
    """Raise InvalidCutMapError if the cut map breaks its ordering contract."""
    for i, entry in enumerate(cut_map):
        if entry.original_end_ms <= entry.original_start_ms:
            raise InvalidCutMapError(
                "Cut map entry {} (segment {}) has an empty original interval".format(
                    i, entry.segment_index
                )
            )
        if entry.final_end_ms <= entry.final_start_ms:
            raise InvalidCutMapError(
                "Cut map entry {} (segment {}) has an empty final interval".format(
                    i, entry.segment_index
                )
            )
        if i > 0 and entry.final_start_ms < cut_map[i - 1].final_end_ms:
            raise InvalidCutMapError(
                "Cut map entry {} (segment {}) starts at {}ms, overlapping or "
                "preceding the previous entry ending at {}ms".format(
                    i, entry.segment_index, entry.final_start_ms, cut_map[i - 1].final_end_ms
                )
            )
