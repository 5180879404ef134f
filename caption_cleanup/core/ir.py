"""Value records shared by every stage of the caption pipeline.

WHY: Speech-to-text engines emit a flat list of timestamped words. Every
cleanup stage, the paginator, and the cut deriver consume and produce the
same word-level unit, so it lives in one place with one set of rules.

HOW: Frozen dataclasses model the records:
  Caption          — one timestamped word (or sub-word) from the transcript
  CleanupLogEntry  — one audited removal decision
  Page             — a display-ready group of captions
  CutMapEntry      — one surviving interval of an edited (cut) video
CleanupResult pairs a caption list with the removals that produced it.

RULES:
- Records are immutable. Stages build new records with dataclasses.replace.
- All times are integer milliseconds.
- Caption.text keeps its leading space; the space marks a word boundary
  and is part of the concatenated page text.
- to_dict() always emits the camelCase wire form used by the renderer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Tuple


@dataclass(frozen=True)
class Caption:
    """A single timestamped word from a speech-to-text transcript.

    RULES:
    - text: raw token text, possibly with a leading space (" word")
    - start_ms / end_ms: integer milliseconds
    - confidence: 0.0–1.0, or None when the engine gives none
    - timestamp_ms: raw DTW timestamp when the engine provides one;
      carried through untouched, never used for timing decisions
    """

    text: str
    start_ms: int
    end_ms: int
    confidence: Optional[float] = None
    timestamp_ms: Optional[int] = None

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "text": self.text,
            "startMs": self.start_ms,
            "endMs": self.end_ms,
        }
        if self.timestamp_ms is not None:
            data["timestampMs"] = self.timestamp_ms
        if self.confidence is not None:
            data["confidence"] = self.confidence
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Caption:
        """Build a Caption from its camelCase wire form.

        Optional fields (confidence, timestampMs) default to None; a null
        value is treated the same as an absent one.
        """
        return cls(
            text=data["text"],
            start_ms=data["startMs"],
            end_ms=data["endMs"],
            confidence=data.get("confidence"),
            timestamp_ms=data.get("timestampMs"),
        )


class CleanupReason(str, Enum):
    """Why a caption was removed. Values are the wire strings."""

    low_confidence = "low_confidence"
    sound_effect = "sound_effect"
    repeated_phrase = "repeated_phrase"
    false_start = "false_start"
    phantom_echo = "phantom_echo"


@dataclass(frozen=True)
class CleanupLogEntry:
    """One removal decision made by a cleanup stage.

    WHY: Cleanup must never lose words silently. Every dropped caption (or
    dropped span of captions) is recorded so an editor can audit what the
    pipeline removed and why.

    RULES:
    - text is the trimmed text of the removed caption, or the removed
      span's trimmed texts joined with single spaces
    - start_ms is the start of the first removed caption
    - confidence is set for low_confidence and phantom_echo entries
    - skipped_until_ms is set for false_start entries: the start of the
      caption the speaker restarted with
    """

    reason: CleanupReason
    text: str
    start_ms: int
    confidence: Optional[float] = None
    skipped_until_ms: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "reason": self.reason.value,
            "text": self.text,
            "startMs": self.start_ms,
        }
        if self.confidence is not None:
            data["confidence"] = self.confidence
        if self.skipped_until_ms is not None:
            data["skippedUntilMs"] = self.skipped_until_ms
        return data


class CleanupResult(NamedTuple):
    """Captions surviving a stage, plus the removals the stage logged.

    Unpacks as ``captions, log = remove_false_starts(captions)``.
    """

    captions: List[Caption]
    log: List[CleanupLogEntry]


@dataclass(frozen=True)
class Page:
    """A display-ready subtitle page.

    RULES:
    - words is never empty
    - start_ms is the first word's start, end_ms the last word's end
    - a page never spans a sentence boundary or a silence gap
    """

    start_ms: int
    end_ms: int
    words: Tuple[Caption, ...]

    @classmethod
    def from_words(cls, words: List[Caption]) -> Page:
        return cls(
            start_ms=words[0].start_ms,
            end_ms=words[-1].end_ms,
            words=tuple(words),
        )

    @property
    def text(self) -> str:
        """Word texts concatenated as-is (leading spaces separate words)."""
        return "".join(w.text for w in self.words)

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    def to_dict(self) -> Dict[str, Any]:
        return {
            "startMs": self.start_ms,
            "endMs": self.end_ms,
            "words": [w.to_dict() for w in self.words],
        }

    def to_tiktok_page(self) -> Dict[str, Any]:
        """Render the page in the token layout the video renderer reads.

        Each word becomes ``{text, fromMs, toMs}``; the page carries its
        concatenated text, start, and duration.
        """
        return {
            "text": self.text,
            "startMs": self.start_ms,
            "tokens": [
                {"text": w.text, "fromMs": w.start_ms, "toMs": w.end_ms}
                for w in self.words
            ],
            "durationMs": self.duration_ms,
        }


@dataclass(frozen=True)
class CutMapEntry:
    """One interval of the original video that survives editing.

    RULES:
    - [original_start_ms, original_end_ms) in the source video appears at
      [final_start_ms, final_end_ms) in the cut output
    - a cut map is sorted by final_start_ms and non-overlapping in the
      final timeline
    """

    segment_index: int
    original_start_ms: int
    original_end_ms: int
    final_start_ms: int
    final_end_ms: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CutMapEntry:
        return cls(
            segment_index=data["segmentIndex"],
            original_start_ms=data["originalStartMs"],
            original_end_ms=data["originalEndMs"],
            final_start_ms=data["finalStartMs"],
            final_end_ms=data["finalEndMs"],
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "segmentIndex": self.segment_index,
            "originalStartMs": self.original_start_ms,
            "originalEndMs": self.original_end_ms,
            "finalStartMs": self.final_start_ms,
            "finalEndMs": self.final_end_ms,
        }
