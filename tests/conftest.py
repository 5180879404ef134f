"""Shared fixtures for the caption_cleanup test suite.

WHY: Several modules exercise the same Whisper artifacts. Keeping the
canonical streams here means every stage is tested against the same
example of each artifact.

HOW: Fixtures return fresh lists built with the builders in
tests/helpers.py.

RULES:
- Fixture streams are well-formed: sorted starts, positive durations
"""

import pytest

from tests.helpers import cap, timed


@pytest.fixture
def phantom_echo_stream():
    """ "before." then a lone breath "si", a pause, and the real "si estás"."""
    return [
        cap("before.", 0, 200),
        cap(" si", 13240, 13400, 0.6),
        cap(" si", 14200, 14400, 0.95),
        cap(" estás", 14450, 14700, 0.95),
    ]


@pytest.fixture
def false_start_stream():
    """ "si estás..." abandoned, then restarted as "si estás." after a pause."""
    return [
        cap("si", 0, 100),
        cap(" estás...", 150, 400),
        cap(" si", 1100, 1300),
        cap(" estás.", 1350, 1600),
    ]


@pytest.fixture
def ten_word_sentence():
    """One pause-free sentence of ten words."""
    return timed(["w0"] + [" w{}".format(i) for i in range(1, 9)] + [" w9."])
