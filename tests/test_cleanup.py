"""Unit tests for the cleanup stages and the full cleanup pipeline.

WHY: Each stage is a heuristic with precise thresholds and tie-breaks. A
small drift (a window of 4 instead of 3, longest-match instead of
shortest) silently changes which words viewers see.

HOW: One test class per stage, built from short Spanish streams like the
ones that motivated each heuristic, then pipeline-level tests that check
stage order and the combined audit log.

RULES:
- Log entries are compared field by field, in stage order
"""

from caption_cleanup.core.cleanup import (
    cleanup_captions,
    full_cleanup,
    remove_false_starts,
    remove_phantom_echoes,
    remove_repeated_phrases,
)
from caption_cleanup.core.ir import CleanupReason
from tests.helpers import cap, timed


def texts(captions):
    return [c.text.strip() for c in captions]


class TestCleanupCaptions:
    """Confidence and annotation filtering followed by the timing pass."""

    def test_drops_low_confidence(self):
        captions = [cap("hola", 0, 100, 0.9), cap(" fantasma", 200, 300, 0.1)]
        result, log = cleanup_captions(captions)
        assert texts(result) == ["hola"]
        assert len(log) == 1
        assert log[0].reason is CleanupReason.low_confidence
        assert log[0].text == "fantasma"
        assert log[0].confidence == 0.1
        assert log[0].start_ms == 200

    def test_confidence_at_threshold_is_kept(self):
        result, log = cleanup_captions([cap("hola", 0, 100, 0.15)])
        assert len(result) == 1
        assert log == []

    def test_missing_confidence_is_kept(self):
        result, _ = cleanup_captions([cap("hola", 0, 100, None)])
        assert len(result) == 1

    def test_custom_min_confidence(self):
        result, _ = cleanup_captions([cap("hola", 0, 100, 0.4)], min_confidence=0.5)
        assert result == []

    def test_drops_bracketed_annotations(self):
        captions = [
            cap("[Sonido", 0, 100),
            cap(" del", 100, 200),
            cap(" agua]", 200, 300),
        ]
        result, log = cleanup_captions(captions)
        assert texts(result) == ["del"]
        assert [e.reason for e in log] == [CleanupReason.sound_effect] * 2
        assert log[0].confidence is None

    def test_low_confidence_logged_before_annotation_check(self):
        _, log = cleanup_captions([cap("[music]", 0, 100, 0.01)])
        assert log[0].reason is CleanupReason.low_confidence

    def test_dropped_caption_does_not_shrink_neighbour(self):
        captions = [
            cap("hola", 0, 500),
            cap(" [ruido]", 300, 400),
            cap(" amigo", 600, 800),
        ]
        result, _ = cleanup_captions(captions)
        assert result[0].end_ms == 500

    def test_applies_timing_fix(self):
        result, _ = cleanup_captions([cap("hola", 0, 3000), cap(" amigo", 500, 700)])
        assert result[0].end_ms == 490

    def test_empty_input(self):
        assert cleanup_captions([]) == ([], [])


class TestRemovePhantomEchoes:
    def test_no_echo_returns_same_captions(self):
        captions = [cap("Hello", 0, 200), cap(" world.", 250, 500)]
        result, log = remove_phantom_echoes(captions)
        assert result == captions
        assert log == []

    def test_removes_echo(self, phantom_echo_stream):
        result, _ = remove_phantom_echoes(phantom_echo_stream)
        assert len(result) == 3
        assert result[0].text == "before."
        assert result[1].text == " si"
        assert result[1].start_ms == 14200
        assert result[2].text == " estás"

    def test_keeps_isolated_word_with_different_successor(self):
        captions = [cap("ok", 0, 100), cap(" pero", 900, 1100), cap(" luego", 1150, 1400)]
        result, _ = remove_phantom_echoes(captions)
        assert len(result) == 3

    def test_keeps_multi_word_chunk(self):
        captions = [
            cap("si", 0, 100),
            cap(" estás", 150, 300),
            cap(" si", 1100, 1300),
            cap(" estás", 1350, 1500),
        ]
        result, _ = remove_phantom_echoes(captions)
        assert len(result) == 4

    def test_logs_removed_echo(self):
        captions = [
            cap("si", 13240, 13400, 0.6),
            cap(" si", 14200, 14400, 0.95),
            cap(" estás.", 14450, 14700, 0.95),
        ]
        _, log = remove_phantom_echoes(captions)
        assert len(log) == 1
        assert log[0].reason is CleanupReason.phantom_echo
        assert log[0].text == "si"
        assert log[0].start_ms == 13240
        assert log[0].confidence == 0.6

    def test_multiple_echoes(self):
        captions = [
            cap("si", 0, 100, 0.5),
            cap(" si", 900, 1000),
            cap(" estás.", 1050, 1300),
            cap(" pero", 5000, 5100, 0.4),
            cap(" pero", 5900, 6100),
            cap(" luego.", 6150, 6400),
        ]
        result, log = remove_phantom_echoes(captions)
        assert texts(result) == ["si", "estás.", "pero", "luego."]
        assert [e.start_ms for e in log] == [0, 5000]

    def test_ignores_punctuation(self):
        captions = [cap("si...", 0, 100), cap(" si", 900, 1000), cap(" estás.", 1050, 1300)]
        result, _ = remove_phantom_echoes(captions)
        assert len(result) == 2
        assert result[0].start_ms == 900

    def test_fewer_than_two_captions(self):
        assert remove_phantom_echoes([]) == ([], [])
        single = [cap("hello", 0, 100)]
        assert remove_phantom_echoes(single).captions == single

    def test_custom_silence_gap(self):
        captions = [cap("si", 0, 100), cap(" si", 500, 600), cap(" estás.", 650, 900)]
        assert len(remove_phantom_echoes(captions).captions) == 3
        assert len(remove_phantom_echoes(captions, silence_gap_ms=300).captions) == 2

    def test_only_next_chunk_is_consulted(self):
        captions = [
            cap("si", 0, 100),
            cap(" no", 900, 1000),
            cap(" si", 1800, 1900),
            cap(" estás.", 1950, 2100),
        ]
        # "si" does not match "no"; "no" does not match "si"
        result, _ = remove_phantom_echoes(captions)
        assert len(result) == 4


class TestRemoveFalseStarts:
    def test_removes_two_word_false_start(self, false_start_stream):
        result, log = remove_false_starts(false_start_stream)
        assert texts(result) == ["si", "estás."]
        assert result[0].start_ms == 1100
        assert len(log) == 1
        assert log[0].reason is CleanupReason.false_start
        assert log[0].text == "si estás..."
        assert log[0].start_ms == 0
        assert log[0].skipped_until_ms == 1100

    def test_rerun_on_own_output_is_unchanged(self, false_start_stream):
        once, _ = remove_false_starts(false_start_stream)
        twice, log = remove_false_starts(once)
        assert twice == once
        assert log == []

    def test_unicode_ellipsis(self):
        captions = [
            cap("si", 0, 100),
            cap(" estás…", 150, 400),
            cap(" si", 1100, 1300),
            cap(" estás", 1350, 1500),
            cap(" empezando.", 1550, 1900),
        ]
        result, _ = remove_false_starts(captions)
        assert texts(result) == ["si", "estás", "empezando."]

    def test_single_word_ellipsis_is_not_enough(self):
        captions = [cap("si...", 0, 100), cap(" si", 900, 1000), cap(" estás.", 1050, 1300)]
        result, log = remove_false_starts(captions)
        assert len(result) == 3
        assert log == []

    def test_not_repeated_is_kept(self):
        captions = [
            cap("pues", 0, 100),
            cap(" bueno...", 150, 400),
            cap(" vamos", 1100, 1300),
            cap(" allá.", 1350, 1600),
        ]
        result, _ = remove_false_starts(captions)
        assert len(result) == 4

    def test_ellipsis_beyond_window_is_ignored(self):
        captions = [
            cap("si", 0, 100),
            cap(" tú", 110, 200),
            cap(" me", 210, 300),
            cap(" dices...", 310, 500),
            cap(" si", 1100, 1200),
            cap(" tú", 1210, 1300),
            cap(" me", 1310, 1400),
            cap(" dices", 1410, 1500),
        ]
        # From index 0 the window covers 0..2 only; from index 1 the
        # phrase "tú me dices" repeats, so indices 1..3 are dropped.
        result, log = remove_false_starts(captions)
        assert texts(result) == ["si", "si", "tú", "me", "dices"]
        assert log[0].text == "tú me dices..."

    def test_lookahead_is_seven_captions(self):
        lead = [cap("muy", 0, 100), cap(" bien...", 110, 200)]
        filler = timed([" a", " b", " c", " d", " e", " f"], start=300)
        too_far = [cap(" muy", 1300, 1400), cap(" bien", 1410, 1500)]
        result, _ = remove_false_starts(lead + filler + too_far)
        assert len(result) == 10

        within = timed([" a", " b", " c", " d", " e"], start=300)
        result, _ = remove_false_starts(lead + within + too_far)
        assert len(result) == 7

    def test_fewer_than_three_captions(self):
        captions = [cap("si", 0, 100), cap(" estás...", 150, 400)]
        assert remove_false_starts(captions).captions == captions

    def test_no_ellipsis_leaves_stream_unchanged(self):
        captions = [cap("a", 0, 100), cap(" b", 110, 200), cap(" c", 210, 300)]
        result, log = remove_false_starts(captions)
        assert result == captions
        assert log == []


class TestRemoveRepeatedPhrases:
    def test_keeps_last_take(self):
        captions = timed([
            "vamos", " a", " empezar",
            " vamos", " a", " empezar",
            " ahora.",
        ])
        result, log = remove_repeated_phrases(captions)
        assert texts(result) == ["vamos", "a", "empezar", "ahora."]
        assert result[0].start_ms == captions[3].start_ms
        assert len(log) == 1
        assert log[0].reason is CleanupReason.repeated_phrase
        assert log[0].text == "vamos a empezar"
        assert log[0].start_ms == 0

    def test_three_takes(self):
        captions = timed(["uno", " dos", " tres"] * 3 + [" fin."])
        result, log = remove_repeated_phrases(captions)
        assert texts(result) == ["uno", "dos", "tres", "fin."]
        assert log[0].text == "uno dos tres uno dos tres"

    def test_similarity_allows_one_mismatch_in_five(self):
        captions = timed([
            "hoy", " vamos", " a", " hablar", " mucho",
            " hoy", " vamos", " a", " hablar", " poco",
        ])
        result, _ = remove_repeated_phrases(captions)
        assert texts(result) == ["hoy", "vamos", "a", "hablar", "poco"]

    def test_one_mismatch_in_three_is_not_similar(self):
        captions = timed(["a", " b", " c", " a", " b", " x"])
        result, log = remove_repeated_phrases(captions)
        assert len(result) == 6
        assert log == []

    def test_case_insensitive_but_punctuation_sensitive(self):
        same = timed(["Hola", " que", " tal", " hola", " QUE", " tal"])
        assert len(remove_repeated_phrases(same).captions) == 3

        punct = timed(["hola", " que", " tal", " hola,", " que,", " tal."])
        assert len(remove_repeated_phrases(punct).captions) == 6

    def test_shortest_phrase_wins(self):
        # Both a 3-word and a 6-word repeat exist at index 0; the 3-word
        # search runs first, so the four 3-word takes collapse to one.
        captions = timed(["la", " la", " la"] * 4)
        result, _ = remove_repeated_phrases(captions)
        assert len(result) == 3

    def test_fewer_than_five_captions(self):
        captions = timed(["a", " b", " a", " b"])
        assert remove_repeated_phrases(captions).captions == captions

    def test_empty_input(self):
        assert remove_repeated_phrases([]) == ([], [])


class TestFullCleanup:
    def test_runs_stages_in_order_with_stage_ordered_log(self):
        captions = [
            cap("si", 0, 100, 0.5),                  # phantom echo
            cap(" si", 1000, 1100),
            cap(" estás...", 1150, 1400),            # false start
            cap(" [respira]", 1450, 1500),           # annotation
            cap(" si", 1550, 1650),
            cap(" estás", 1700, 1800),
            cap(" empezando.", 1850, 2100),
            cap(" muy", 2150, 2250, 0.05),           # low confidence
            cap(" bien", 2300, 2400),
        ]
        result, log = full_cleanup(captions)
        assert texts(result) == ["si", "estás", "empezando.", "bien"]
        assert [e.reason for e in log] == [
            CleanupReason.sound_effect,
            CleanupReason.low_confidence,
            CleanupReason.phantom_echo,
            CleanupReason.false_start,
        ]

    def test_removes_echo_before_false_start_detection(self):
        captions = [
            cap("si", 0, 100),
            cap(" si", 900, 1000),
            cap(" estás.", 1050, 1300),
        ]
        result, log = full_cleanup(captions)
        assert texts(result) == ["si", "estás."]
        assert [e.reason for e in log] == [CleanupReason.phantom_echo]

    def test_passes_thresholds_through(self):
        captions = [cap("hola", 0, 3000, 0.3), cap(" amigo", 3100, 3300, 0.9)]
        result, _ = full_cleanup(captions, min_confidence=0.5, max_word_duration_ms=100)
        assert texts(result) == ["amigo"]
        assert result[0].end_ms == 3200

    def test_empty_input(self):
        assert full_cleanup([]) == ([], [])

    def test_does_not_mutate_input(self):
        captions = [cap("a", 0, 3000), cap(" b", 100, 300)]
        full_cleanup(captions)
        assert captions[0].end_ms == 3000
