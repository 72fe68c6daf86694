"""In-memory object storage backend.

This package provides an ephemeral, process-local implementation of the
storage client protocol, emulating directories and multipart uploads over a
flat key/payload table.
"""

from .client import (
    InvalidBufferError,
    InvalidKeyError,
    InvalidMultipartChunkError,
    InvalidMultipartIdError,
    MultipartChunk,
    StorageClient,
    StorageError,
    UnknownStorageError,
)
from .engine import EphemeralStorage
from .ephemeral_client import EphemeralStorageClient
from .ranges import ByteRange, extract_range
from .sequence import ByteBufferSequence, StorageSequence

__all__ = [
    "ByteBufferSequence",
    "ByteRange",
    "EphemeralStorage",
    "EphemeralStorageClient",
    "InvalidBufferError",
    "InvalidKeyError",
    "InvalidMultipartChunkError",
    "InvalidMultipartIdError",
    "MultipartChunk",
    "StorageClient",
    "StorageError",
    "StorageSequence",
    "UnknownStorageError",
    "extract_range",
]
