"""Key canonicalization for the slash-delimited storage namespace."""

from __future__ import annotations

from typing import Iterator

SEPARATOR = "/"
ROOT = ""


def normalize_key(key: str) -> str:
    """Return the canonical form of a key.

    Empty segments are dropped, so leading, trailing and repeated slashes
    collapse: ``"/docs//a.txt/"`` becomes ``"docs/a.txt"``.
    """
    return SEPARATOR.join(segment for segment in key.split(SEPARATOR) if segment)


def parent_keys(key: str) -> Iterator[str]:
    """Yield every ancestor directory of a key, shallowest first.

    The root is not yielded; a single-segment key has no ancestors.
    """
    segments = normalize_key(key).split(SEPARATOR)
    for depth in range(1, len(segments)):
        yield SEPARATOR.join(segments[:depth])


def child_prefix(key: str) -> str:
    """Return the prefix shared by all descendants of a canonical key."""
    return key + SEPARATOR if key else ROOT
