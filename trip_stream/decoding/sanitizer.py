"""Cleanup of the raw trailer before it is parsed as JSON.

Models often wrap structured output in a Markdown code fence even when
told not to. sanitize() removes surrounding whitespace and any number of
wrapping fences; it is idempotent.
"""

from __future__ import annotations

import re

_OPENING_FENCE = re.compile(r"\A```[A-Za-z0-9_.+-]*[ \t]*(?:\r?\n)?")
_CLOSING_FENCE = re.compile(r"(?:\r?\n)?[ \t]*```\Z")


def sanitize(trailer: str) -> str:
    """Strip whitespace and code-fence markers around a trailer.

    Args:
        trailer: Raw text that followed the sentinel.

    Returns:
        The candidate JSON text. Already-clean text is returned unchanged.
    """
    candidate = trailer.strip()
    while True:
        stripped = _OPENING_FENCE.sub("", candidate, count=1)
        stripped = _CLOSING_FENCE.sub("", stripped, count=1).strip()
        if stripped == candidate:
            return candidate
        candidate = stripped
