import pytest

from trip_stream.decoding.sentinel import SentinelMatcher, failure_function
from trip_stream.domain.models import SENTINEL


def test_failure_function_of_default_sentinel():
    assert failure_function(SENTINEL) == [0, 1, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 1, 2, 3]


def test_failure_function_with_repeated_prefix():
    assert failure_function("abab") == [0, 0, 1, 2]
    assert failure_function("aaaa") == [0, 1, 2, 3]


def test_empty_sentinel_is_rejected():
    with pytest.raises(ValueError):
        SentinelMatcher("")


def test_match_inside_single_fragment():
    matcher = SentinelMatcher(SENTINEL)
    text = "plan---JSON_DATA---{}"
    end = matcher.scan(text)

    assert end == len("plan---JSON_DATA---")
    assert matcher.matched
    assert matcher.pending == 0


def test_partial_match_is_pending_across_fragments():
    matcher = SentinelMatcher(SENTINEL)

    assert matcher.scan("Day 2\n---JSO") is None
    assert matcher.pending == 6
    assert not matcher.matched

    assert matcher.scan("N_DATA---{") == 9
    assert matcher.matched


def test_broken_prefix_resets_pending():
    matcher = SentinelMatcher(SENTINEL)

    matcher.scan("---JS")
    assert matcher.pending == 5

    matcher.scan("X and more")
    assert matcher.pending == 0


def test_extra_leading_dash_still_matches():
    matcher = SentinelMatcher(SENTINEL)
    end = matcher.scan("----JSON_DATA---")

    assert end == 16
    assert matcher.matched


def test_dashes_alone_stay_pending():
    matcher = SentinelMatcher(SENTINEL)
    matcher.scan("a -----")

    # Only the longest prefix of the sentinel counts.
    assert matcher.pending == 3


def test_scan_after_match_is_noop():
    matcher = SentinelMatcher(SENTINEL)
    matcher.scan(SENTINEL)

    assert matcher.scan(SENTINEL) is None
    assert matcher.matched


def test_reset():
    matcher = SentinelMatcher("ab")
    matcher.scan("xab")
    matcher.reset()

    assert not matcher.matched
    assert matcher.pending == 0
    assert matcher.scan("a") is None
    assert matcher.pending == 1
