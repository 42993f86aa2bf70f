import pytest

from trip_stream.decoding.sanitizer import sanitize

CLEAN = '{"title": "T", "locations": []}'


def test_clean_text_is_unchanged():
    assert sanitize(CLEAN) == CLEAN


def test_surrounding_whitespace_is_removed():
    assert sanitize(f"\n\n  {CLEAN}  \n") == CLEAN


@pytest.mark.parametrize(
    "wrapped",
    [
        f"```json\n{CLEAN}\n```",
        f"```JSON\n{CLEAN}\n```",
        f"```\n{CLEAN}\n```",
        f"\n  ```json\n{CLEAN}\n```\n  ",
        f"```json {CLEAN}```",
        f"```json\r\n{CLEAN}\r\n```",
    ],
)
def test_fences_are_stripped(wrapped):
    assert sanitize(wrapped) == CLEAN


def test_unclosed_fence_is_stripped():
    assert sanitize(f"```json\n{CLEAN}") == CLEAN


def test_sanitize_is_idempotent():
    for text in [CLEAN, f"```json\n{CLEAN}\n```", f"```\n```json\n{CLEAN}\n```\n```", "  "]:
        once = sanitize(text)
        assert sanitize(once) == once


def test_backticks_inside_content_are_kept():
    text = '{"description": "try the ```special``` noodles"}'
    assert sanitize(text) == text


def test_empty_trailer():
    assert sanitize("") == ""
    assert sanitize("```json\n```") == ""
