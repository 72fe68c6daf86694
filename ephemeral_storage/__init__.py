"""In-memory object storage for tests, previews, and local development."""

from ephemeral_storage.infra.storage import (
    ByteBufferSequence,
    ByteRange,
    EphemeralStorage,
    EphemeralStorageClient,
    MultipartChunk,
    StorageError,
    StorageSequence,
)

__all__ = [
    "ByteBufferSequence",
    "ByteRange",
    "EphemeralStorage",
    "EphemeralStorageClient",
    "MultipartChunk",
    "StorageError",
    "StorageSequence",
]
