"""Inclusive byte ranges for partial downloads."""

from __future__ import annotations

from dataclasses import dataclass

from ephemeral_storage.infra.storage.client import InvalidBufferError


@dataclass(frozen=True, slots=True)
class ByteRange:
    """Inclusive ``[start, end]`` byte offsets into an object."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1


def extract_range(
    payload: bytes,
    byte_range: ByteRange | None,
    *,
    key: str | None = None,
) -> bytes:
    """Slice a byte range out of a full object payload.

    Args:
        payload: Complete object content.
        byte_range: Inclusive range to extract, or None for the whole payload.
        key: Object key, only used for error reporting.

    Returns:
        The payload itself when no range is given, otherwise exactly
        ``byte_range.length`` bytes starting at ``byte_range.start``.

    Raises:
        InvalidBufferError: If the range is not within ``[0, len(payload))``
            or is inverted.
    """
    if byte_range is None:
        return payload

    start, end = byte_range.start, byte_range.end
    if start < 0 or end >= len(payload) or start > end:
        raise InvalidBufferError(
            f"Range {start}-{end} is outside of a {len(payload)} byte object",
            key=key,
        )

    chunk = payload[start : end + 1]
    if len(chunk) != byte_range.length:
        raise InvalidBufferError(
            f"Range {start}-{end} could not be read in full", key=key
        )
    return chunk
