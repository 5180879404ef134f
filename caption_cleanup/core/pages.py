"""Sentence-aware pagination of cleaned captions into subtitle pages.

WHY: Viewers read a page at a glance. A page that mixes the end of one
sentence with the start of the next, or that bridges a real pause, reads
wrong. Long sentences still need splitting so a page never overflows.

HOW: Three passes:
  0. split_at_silence_gaps(); the duration paginator also drops
     phantom-echo chunks here
  1. group each chunk into sentences (cut after . ? ! …)
  2. paginate each sentence independently, by word count
     (group_into_pages) or by duration (create_sentence_aware_pages)
A short trailing page is merged back into the previous one unless a
silence gap separates them.

RULES:
- Pages never span a chunk or sentence boundary
- group_into_pages() never drops a caption: its pages hold every input
  caption, in order
- A split never happens at a sentence's last caption
- Duration splits only happen before a caption starting with a space
  (a true word boundary, never mid-word)
- Pages are emitted in chunk, then sentence, then split order
"""

from __future__ import annotations

from typing import Callable, List, Sequence

from caption_cleanup.config import (
    DEFAULT_MAX_PAGE_DURATION_MS,
    DEFAULT_MAX_WORDS_PER_PAGE,
    DEFAULT_MIN_TAIL_DURATION_MS,
    DEFAULT_MIN_TAIL_WORDS,
    DEFAULT_SILENCE_GAP_MS,
)
from caption_cleanup.core.ir import Caption, Page
from caption_cleanup.core.silence import drop_phantom_echo_chunks, split_at_silence_gaps
from caption_cleanup.core.text import ends_sentence, starts_new_word

# should_split(page_so_far, index_in_sentence, sentence) -> bool
SplitRule = Callable[[List[Caption], int, Sequence[Caption]], bool]
# is_short_tail(tail) -> bool
TailRule = Callable[[List[Caption]], bool]


def group_into_sentences(captions: Sequence[Caption]) -> List[List[Caption]]:
    """Cut captions after every sentence-ending caption.

    An unterminated trailing run forms a final sentence.
    """
    sentences: List[List[Caption]] = []
    current: List[Caption] = []

    for cap in captions:
        current.append(cap)
        if ends_sentence(cap.text):
            sentences.append(current)
            current = []
    if current:
        sentences.append(current)

    return sentences


def _paginate_sentence(
    sentence: Sequence[Caption],
    should_split: SplitRule,
    is_short_tail: TailRule,
    silence_gap_ms: int,
) -> List[Page]:
    chunks: List[List[Caption]] = []
    chunk: List[Caption] = []

    for i, cap in enumerate(sentence):
        chunk.append(cap)
        if i < len(sentence) - 1 and should_split(chunk, i, sentence):
            chunks.append(chunk)
            chunk = []
    if chunk:
        chunks.append(chunk)

    # Merge a short tail back, unless a real pause separates it
    if len(chunks) > 1:
        tail = chunks[-1]
        prev = chunks[-2]
        gap = tail[0].start_ms - prev[-1].end_ms
        if is_short_tail(tail) and gap < silence_gap_ms:
            prev.extend(tail)
            chunks.pop()

    return [Page.from_words(c) for c in chunks]


def _build_pages(
    captions: Sequence[Caption],
    should_split: SplitRule,
    is_short_tail: TailRule,
    silence_gap_ms: int,
    drop_echoes: bool = False,
) -> List[Page]:
    pages: List[Page] = []
    chunks = split_at_silence_gaps(captions, silence_gap_ms)
    if drop_echoes:
        chunks = drop_phantom_echo_chunks(chunks)

    for chunk in chunks:
        for sentence in group_into_sentences(chunk):
            pages.extend(_paginate_sentence(sentence, should_split, is_short_tail, silence_gap_ms))

    return pages


def group_into_pages(
    captions: Sequence[Caption],
    silence_gap_ms: int = DEFAULT_SILENCE_GAP_MS,
    max_words_per_page: int = DEFAULT_MAX_WORDS_PER_PAGE,
    min_tail_words: int = DEFAULT_MIN_TAIL_WORDS,
) -> List[Page]:
    """Paginate captions by word count (the overlay layout).

    A page is closed once it holds max_words_per_page captions. A final
    page with fewer than min_tail_words captions is merged into the one
    before it when no silence gap separates them. Every input caption
    appears in exactly one page.

    Args:
        captions: Cleaned captions in time order.
        silence_gap_ms: Pause length that forces a page break.
        max_words_per_page: Captions per page before splitting.
        min_tail_words: Tail pages shorter than this are merged back.

    Returns:
        Pages in display order.
    """

    def should_split(chunk: List[Caption], i: int, sentence: Sequence[Caption]) -> bool:
        return len(chunk) >= max_words_per_page

    def is_short_tail(tail: List[Caption]) -> bool:
        return len(tail) < min_tail_words

    return _build_pages(captions, should_split, is_short_tail, silence_gap_ms)


def create_sentence_aware_pages(
    captions: Sequence[Caption],
    max_page_duration_ms: int = DEFAULT_MAX_PAGE_DURATION_MS,
    silence_gap_ms: int = DEFAULT_SILENCE_GAP_MS,
    min_tail_duration_ms: int = DEFAULT_MIN_TAIL_DURATION_MS,
) -> List[Page]:
    """Paginate captions by on-screen duration (the rendered-video layout).

    A page is closed once it spans max_page_duration_ms, but only when the
    next caption starts a new word, so sub-word tokens stay together. A
    final page spanning less than min_tail_duration_ms is merged into the
    one before it when no silence gap separates them. Lone phantom-echo
    words (see drop_phantom_echo_chunks) are dropped before paginating.

    Args:
        captions: Cleaned captions in time order.
        max_page_duration_ms: Page span that triggers a split.
        silence_gap_ms: Pause length that forces a page break.
        min_tail_duration_ms: Tail pages shorter than this are merged back.

    Returns:
        Pages in display order.
    """

    def should_split(chunk: List[Caption], i: int, sentence: Sequence[Caption]) -> bool:
        span = sentence[i].end_ms - chunk[0].start_ms
        return span >= max_page_duration_ms and starts_new_word(sentence[i + 1].text)

    def is_short_tail(tail: List[Caption]) -> bool:
        return tail[-1].end_ms - tail[0].start_ms < min_tail_duration_ms

    return _build_pages(
        captions, should_split, is_short_tail, silence_gap_ms, drop_echoes=True,
    )
