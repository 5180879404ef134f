"""Caption cleanup stages for raw Whisper output.

WHY: Word-level speech-to-text output carries artifacts that look broken
on screen: hallucinated low-confidence words, bracketed sound-effect
annotations, words stretched across pauses, lone "echo" words before an
utterance, abandoned false starts ("Si estás... si estás empezando"), and
whole phrases repeated when the speaker re-recorded a take.

HOW: Four stages, each a pure function returning a CleanupResult:
  1. cleanup_captions        — confidence/annotation filter + timing pass
  2. remove_phantom_echoes   — lone word matching the next utterance's start
  3. remove_false_starts     — short phrase ending in "..." then repeated
  4. remove_repeated_phrases — keep only the last take of a repeated phrase
full_cleanup() runs them in that order and concatenates their logs.

RULES:
- Order is load-bearing. Hallucinated words must be gone before any
  pattern stage compares phrases, and an echo left in place can look like
  a stutter to the false-start stage.
- Stages never reorder captions and never lengthen the list.
- Every removal produces exactly one CleanupLogEntry.
- Heuristic thresholds below were tuned empirically; they are kept as
  named constants so they can be tuned, not because they are exact.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from caption_cleanup.config import (
    DEFAULT_MAX_WORD_DURATION_MS,
    DEFAULT_MIN_CONFIDENCE,
    DEFAULT_SILENCE_GAP_MS,
)
from caption_cleanup.core.ir import (
    Caption,
    CleanupLogEntry,
    CleanupReason,
    CleanupResult,
)
from caption_cleanup.core.silence import is_phantom_echo, split_at_silence_gaps
from caption_cleanup.core.text import (
    ends_with_ellipsis,
    joined_trimmed,
    phrase_text,
    split_words,
    strip_ellipsis,
    strip_sentence_punct,
)
from caption_cleanup.core.timing import fix_timing_only
from caption_cleanup.core.validation import check_caption_stream

logger = logging.getLogger(__name__)

# False starts: the "..." must appear within this many captions of i.
FALSE_START_WINDOW = 3
# Captions after the "..." searched for the restarted phrase.
FALSE_START_LOOKAHEAD = 7
# A lone word ending in "..." is not enough evidence.
MIN_FALSE_START_WORDS = 2
# The abandoned phrase must be longer than this many characters.
MIN_FALSE_START_CHARS = 2
MIN_CAPTIONS_FOR_FALSE_STARTS = 3

MIN_REPEAT_PHRASE_WORDS = 3
MAX_REPEAT_PHRASE_WORDS = 10
PHRASE_SIMILARITY = 0.8
MIN_CAPTIONS_FOR_REPEATS = 5


def cleanup_captions(
    captions: Sequence[Caption],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    max_word_duration_ms: int = DEFAULT_MAX_WORD_DURATION_MS,
) -> CleanupResult:
    """Drop low-confidence and annotation captions, then fix timing.

    WHY: Whisper hallucinates words with very low confidence and emits
    non-speech annotations like "[Sonido del agua]". Both must go before
    overlap repair, otherwise a dropped word could shrink a real neighbour.

    HOW: First pass filters, second pass runs fix_timing_only() on the
    survivors.

    RULES:
    - confidence present and < min_confidence -> low_confidence
    - text contains "[" or "]" -> sound_effect
    - captions without a confidence are never dropped for confidence

    Args:
        captions: Raw captions in time order.
        min_confidence: Confidence floor.
        max_word_duration_ms: Duration cap for the timing pass.

    Returns:
        CleanupResult with the filtered, timing-fixed captions.
    """
    log: List[CleanupLogEntry] = []
    filtered: List[Caption] = []

    for cap in captions:
        if cap.confidence is not None and cap.confidence < min_confidence:
            logger.debug(
                "Dropped low-confidence caption %r at %dms (%.3f)",
                cap.text, cap.start_ms, cap.confidence,
            )
            log.append(CleanupLogEntry(
                reason=CleanupReason.low_confidence,
                text=cap.text.strip(),
                start_ms=cap.start_ms,
                confidence=cap.confidence,
            ))
            continue

        if "[" in cap.text or "]" in cap.text:
            logger.debug("Dropped annotation %r at %dms", cap.text, cap.start_ms)
            log.append(CleanupLogEntry(
                reason=CleanupReason.sound_effect,
                text=cap.text.strip(),
                start_ms=cap.start_ms,
            ))
            continue

        filtered.append(cap)

    return CleanupResult(fix_timing_only(filtered, max_word_duration_ms), log)


def remove_phantom_echoes(
    captions: Sequence[Caption],
    silence_gap_ms: int = DEFAULT_SILENCE_GAP_MS,
) -> CleanupResult:
    """Remove lone words that echo the start of the following utterance.

    WHY: Whisper sometimes detects a breath or pre-articulation as the word
    about to be spoken. The result is an isolated word, then a pause, then
    the real utterance starting with the same word:
    [silence] "si" [940ms] "si estás empezando..."

    HOW: Split at silence gaps. A single-caption chunk whose normalized
    text equals the normalized first caption of the next chunk is dropped.

    RULES:
    - Only the immediately following chunk is consulted
    - Multi-caption chunks are never dropped
    - The last chunk is never dropped
    """
    if len(captions) < 2:
        return CleanupResult(list(captions), [])

    chunks = split_at_silence_gaps(captions, silence_gap_ms)
    result: List[Caption] = []
    log: List[CleanupLogEntry] = []

    for i, chunk in enumerate(chunks):
        if i + 1 < len(chunks) and is_phantom_echo(chunk, chunks[i + 1]):
            echo = chunk[0]
            logger.debug("Dropped phantom echo %r at %dms", echo.text, echo.start_ms)
            log.append(CleanupLogEntry(
                reason=CleanupReason.phantom_echo,
                text=echo.text.strip(),
                start_ms=echo.start_ms,
                confidence=echo.confidence,
            ))
            continue
        result.extend(chunk)

    return CleanupResult(result, log)


def _find_false_start_end(captions: Sequence[Caption], start: int) -> Optional[int]:
    """Index of the first caption ending in an ellipsis within the window."""
    for j in range(start, min(start + FALSE_START_WINDOW, len(captions))):
        if ends_with_ellipsis(captions[j].text):
            return j
    return None


def remove_false_starts(captions: Sequence[Caption]) -> CleanupResult:
    """Remove stutters and restarts ("Si estás... Si estás empezando").

    WHY: Speakers often begin a phrase, trail off, and start over. Whisper
    marks the abandoned attempt with a trailing ellipsis. Showing both
    attempts doubles the words on screen for no meaning.

    HOW: At each position, look up to FALSE_START_WINDOW captions ahead for
    one ending in "..." or "…". The captions up to and including it form
    the lead phrase (ellipses stripped). If the next FALSE_START_LOOKAHEAD
    captions (. , ! ? stripped) contain the lead phrase as a substring, the
    lead captions are dropped and scanning resumes right after them.

    RULES:
    - Fewer than 3 captions -> returned unchanged
    - The lead phrase needs at least 2 non-empty words and more than
      2 characters
    - Substring matching can misfire on short common phrases; the
      minimums above are the guard
    """
    if len(captions) < MIN_CAPTIONS_FOR_FALSE_STARTS:
        return CleanupResult(list(captions), [])

    result: List[Caption] = []
    log: List[CleanupLogEntry] = []
    i = 0

    while i < len(captions):
        end = _find_false_start_end(captions, i)
        if end is not None:
            lead_words = [w for w in (strip_ellipsis(c.text) for c in captions[i:end + 1]) if w]

            if len(lead_words) >= MIN_FALSE_START_WORDS:
                lead_phrase = " ".join(lead_words)
                next_phrase = " ".join(
                    strip_sentence_punct(c.text)
                    for c in captions[end + 1:end + 1 + FALSE_START_LOOKAHEAD]
                )

                if len(lead_phrase) > MIN_FALSE_START_CHARS and lead_phrase in next_phrase:
                    restart = captions[end + 1] if end + 1 < len(captions) else None
                    logger.debug(
                        "Dropped false start %r at %dms",
                        lead_phrase, captions[i].start_ms,
                    )
                    log.append(CleanupLogEntry(
                        reason=CleanupReason.false_start,
                        text=joined_trimmed(captions[i:end + 1]),
                        start_ms=captions[i].start_ms,
                        skipped_until_ms=restart.start_ms if restart is not None else None,
                    ))
                    i = end + 1
                    continue

        result.append(captions[i])
        i += 1

    return CleanupResult(result, log)


def _phrases_similar(phrase1: str, phrase2: str) -> bool:
    """Equal word count and at least 80% of positions match exactly."""
    words1 = split_words(phrase1)
    words2 = split_words(phrase2)

    if len(words1) != len(words2):
        return False

    matches = sum(1 for a, b in zip(words1, words2) if a == b)
    return matches / len(words1) >= PHRASE_SIMILARITY


def _find_repeated_phrase_length(captions: Sequence[Caption], start: int) -> int:
    """Shortest phrase length at start that is immediately repeated, or 0.

    Lengths are tried in ascending order and the first match wins, so a
    short repeated phrase is preferred over a longer one.
    """
    longest = min(MAX_REPEAT_PHRASE_WORDS, (len(captions) - start) // 2)
    for length in range(MIN_REPEAT_PHRASE_WORDS, longest + 1):
        first = phrase_text(captions[start:start + length])
        second = phrase_text(captions[start + length:start + 2 * length])
        if _phrases_similar(first, second):
            return length
    return 0


def _count_repetitions(captions: Sequence[Caption], start: int, length: int) -> int:
    """How many consecutive times the phrase at start occurs (at least 1)."""
    base = phrase_text(captions[start:start + length])
    count = 1
    check = start + length

    while check + length <= len(captions):
        if not _phrases_similar(base, phrase_text(captions[check:check + length])):
            break
        count += 1
        check += length

    return count


def remove_repeated_phrases(captions: Sequence[Caption]) -> CleanupResult:
    """Collapse re-recorded phrase repeats to the last take.

    WHY: When someone records several takes of the same line back to back,
    the transcript contains the phrase two or more times in a row. Only the
    last take is the one the speaker meant to keep.

    HOW: At each position, find the shortest phrase length (3 to 10 words)
    that is immediately followed by a similar phrase, count consecutive
    repetitions, and skip all but the last. Similar means equal word count
    and >= 80% positional word match (case-insensitive, punctuation kept).

    RULES:
    - Fewer than 5 captions -> returned unchanged
    - The first caption of the kept take is emitted without a new search;
      scanning resumes after it
    """
    if len(captions) < MIN_CAPTIONS_FOR_REPEATS:
        return CleanupResult(list(captions), [])

    result: List[Caption] = []
    log: List[CleanupLogEntry] = []
    i = 0

    while i < len(captions):
        length = _find_repeated_phrase_length(captions, i)

        if length > 0:
            repeats = _count_repetitions(captions, i, length)
            skip = (repeats - 1) * length
            if skip > 0:
                skipped = captions[i:i + skip]
                logger.debug(
                    "Dropped %d repeated take(s) of %d words at %dms",
                    repeats - 1, length, captions[i].start_ms,
                )
                log.append(CleanupLogEntry(
                    reason=CleanupReason.repeated_phrase,
                    text=joined_trimmed(skipped),
                    start_ms=captions[i].start_ms,
                ))
            i += skip

        if i < len(captions):
            result.append(captions[i])
            i += 1

    return CleanupResult(result, log)


def full_cleanup(
    captions: Sequence[Caption],
    *,
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    max_word_duration_ms: int = DEFAULT_MAX_WORD_DURATION_MS,
    silence_gap_ms: int = DEFAULT_SILENCE_GAP_MS,
    strict: bool = False,
) -> CleanupResult:
    """Run every cleanup stage in its fixed order.

    HOW:
      1. cleanup_captions        (confidence + annotations + timing)
      2. remove_phantom_echoes
      3. remove_false_starts
      4. remove_repeated_phrases

    RULES:
    - The returned log holds each stage's entries, stage by stage
      (not globally sorted by time)
    - strict=True checks the input with check_caption_stream() first and
      raises CaptionStreamError on unsorted or impossible timing

    Args:
        captions: Raw captions from the speech-to-text engine.
        min_confidence: Confidence floor for stage 1.
        max_word_duration_ms: Duration cap for stage 1.
        silence_gap_ms: Pause length used by phantom-echo detection.
        strict: Validate input ordering and timing first.

    Returns:
        CleanupResult with the cleaned captions and the full audit log.
    """
    if strict:
        check_caption_stream(captions)

    result, log = cleanup_captions(
        captions,
        min_confidence=min_confidence,
        max_word_duration_ms=max_word_duration_ms,
    )

    result, echo_log = remove_phantom_echoes(result, silence_gap_ms=silence_gap_ms)
    log.extend(echo_log)

    result, false_start_log = remove_false_starts(result)
    log.extend(false_start_log)

    result, repeat_log = remove_repeated_phrases(result)
    log.extend(repeat_log)

    logger.info(
        "Cleaned: %d -> %d captions (%d removals logged)",
        len(captions), len(result), len(log),
    )
    return CleanupResult(result, log)
