"""Silence-gap segmentation of a caption stream.

WHY: A pause in speech is meaningful. Pages must never straddle one, and
phantom-echo detection looks for a lone word sitting between two pauses.
Both need the same definition of "pause".

HOW: split_at_silence_gaps() walks adjacent pairs and starts a new chunk
whenever the next caption starts at least silence_gap_ms after the
previous one ends. drop_phantom_echo_chunks() filters chunk lists for the
paginators.

RULES:
- Chunks partition the input: concatenated, they equal it exactly
- A gap exactly equal to the threshold splits
- Empty input -> no chunks; one caption -> one chunk
"""

from __future__ import annotations

from typing import List, Sequence

from caption_cleanup.config import DEFAULT_SILENCE_GAP_MS
from caption_cleanup.core.ir import Caption
from caption_cleanup.core.text import normalize_word


def split_at_silence_gaps(
    captions: Sequence[Caption],
    silence_gap_ms: int = DEFAULT_SILENCE_GAP_MS,
) -> List[List[Caption]]:
    """Split captions into chunks at every gap >= silence_gap_ms.

    Args:
        captions: Captions in time order.
        silence_gap_ms: Minimum gap (next start - previous end) that splits.

    Returns:
        List of non-empty chunks, in input order.
    """
    if not captions:
        return []

    chunks: List[List[Caption]] = []
    current = [captions[0]]

    for prev, cap in zip(captions, captions[1:]):
        if cap.start_ms - prev.end_ms >= silence_gap_ms:
            chunks.append(current)
            current = []
        current.append(cap)
    chunks.append(current)

    return chunks


def is_phantom_echo(chunk: Sequence[Caption], next_chunk: Sequence[Caption]) -> bool:
    """True if chunk is a lone word repeating the first word of next_chunk.

    Whisper sometimes turns a breath or pre-articulation into the word the
    speaker is about to say: "si" [pause] "si estás...". Only single-word
    chunks qualify, and a word that normalizes to nothing never matches.
    """
    if len(chunk) != 1 or not next_chunk:
        return False
    word = normalize_word(chunk[0].text)
    return bool(word) and word == normalize_word(next_chunk[0].text)


def drop_phantom_echo_chunks(chunks: Sequence[List[Caption]]) -> List[List[Caption]]:
    """Filter out phantom-echo chunks, consulting only the following chunk.

    The last chunk is always kept, since nothing follows it.
    """
    result: List[List[Caption]] = []
    for i, chunk in enumerate(chunks):
        if i + 1 < len(chunks) and is_phantom_echo(chunk, chunks[i + 1]):
            continue
        result.append(chunk)
    return result
