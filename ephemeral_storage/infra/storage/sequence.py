"""Lazy byte streams used to move object payloads in and out of storage."""

from __future__ import annotations

from typing import AsyncIterable, AsyncIterator

from ephemeral_storage.common.config import DEFAULT_CHUNK_SIZE_BYTES


class ByteBufferSequence:
    """Async iterable streaming a fixed buffer in chunks of at most
    ``chunk_size`` bytes.

    Each ``async for`` starts over from the beginning of the buffer.
    """

    def __init__(
        self,
        buffer: bytes,
        chunk_size: int = DEFAULT_CHUNK_SIZE_BYTES,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._buffer = bytes(buffer)
        self._chunk_size = chunk_size

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    def __len__(self) -> int:
        return len(self._buffer)

    async def __aiter__(self) -> AsyncIterator[bytes]:
        view = memoryview(self._buffer)
        for offset in range(0, len(view), self._chunk_size):
            yield bytes(view[offset : offset + self._chunk_size])


class StorageSequence:
    """A stream of byte chunks together with its declared total length.

    Args:
        source: Any async iterable producing ``bytes``-like chunks.
        length: Declared number of bytes, or None when unknown.
    """

    def __init__(self, source: AsyncIterable[bytes], length: int | None) -> None:
        self._source = source
        self.length = length

    @classmethod
    def from_bytes(
        cls,
        data: bytes,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE_BYTES,
    ) -> "StorageSequence":
        sequence = ByteBufferSequence(data, chunk_size=chunk_size)
        return cls(sequence, len(sequence))

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._source.__aiter__()

    async def collect(self) -> bytes:
        """Drain the stream into a single contiguous buffer."""
        collected = bytearray()
        async for chunk in self._source:
            collected += chunk
        return bytes(collected)
