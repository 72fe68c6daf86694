"""Storage client protocol, error types, and shared data types.

This module defines the asynchronous interface every storage backend exposes,
covering plain object management, directory emulation, ranged downloads and
multipart uploads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Sequence

if TYPE_CHECKING:
    from ephemeral_storage.infra.storage.ranges import ByteRange
    from ephemeral_storage.infra.storage.sequence import StorageSequence


class StorageError(RuntimeError):
    """Raised when object storage operations fail.

    Attributes:
        message: Human-readable error message.
        key: Object key associated with the operation (if applicable).
    """

    default_message = "Storage operation failed"

    def __init__(self, message: str | None = None, *, key: str | None = None) -> None:
        self.message = message or self.default_message
        self.key = key
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.key is not None:
            return f"{self.message} key={self.key}"
        return self.message


class InvalidKeyError(StorageError):
    """Raised when an operation references a key with no stored object."""

    default_message = "Invalid key"


class InvalidBufferError(StorageError):
    """Raised when a requested byte range cannot be served from an object."""

    default_message = "Invalid buffer range"


class InvalidMultipartIdError(StorageError):
    """Raised when a multipart upload id is unknown, finished, aborted, or
    bound to a different key."""

    default_message = "Invalid multipart upload id"

    def __init__(
        self,
        message: str | None = None,
        *,
        key: str | None = None,
        upload_id: str | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.upload_id = upload_id


class InvalidMultipartChunkError(StorageError):
    """Raised for a non-positive part number, or when a chunk reference does
    not match a stored part."""

    default_message = "Invalid multipart chunk"

    def __init__(
        self,
        message: str | None = None,
        *,
        key: str | None = None,
        upload_id: str | None = None,
        part_number: int | None = None,
    ) -> None:
        super().__init__(message, key=key)
        self.upload_id = upload_id
        self.part_number = part_number


class UnknownStorageError(StorageError):
    """Wraps an unexpected failure raised while reading an input stream."""

    default_message = "Unexpected storage failure"


@dataclass(frozen=True, slots=True)
class MultipartChunk:
    """Reference to a stored part of a multipart upload."""

    chunk_id: str
    number: int


class StorageClient(Protocol):
    """Protocol defining the interface for object storage backends.

    Keys are slash-delimited paths; directories are emulated on top of a flat
    key space. Every method is a coroutine and may be awaited concurrently.
    """

    async def upload(self, *, key: str, sequence: "StorageSequence") -> None:
        """Store an object, replacing any previous object at the key.

        Args:
            key: Destination object key.
            sequence: Byte stream holding the full object content.

        Raises:
            UnknownStorageError: If reading the byte stream fails.
        """
        ...

    async def download(
        self,
        *,
        key: str,
        byte_range: "ByteRange | None" = None,
    ) -> "StorageSequence":
        """Stream an object, or an inclusive byte range of it.

        Args:
            key: Source object key.
            byte_range: Optional inclusive range to return.

        Returns:
            StorageSequence whose length equals the returned payload size.

        Raises:
            InvalidKeyError: If no object is stored at the key.
            InvalidBufferError: If the range falls outside the object.
        """
        ...

    async def exists(self, *, key: str) -> bool:
        """Return True if an object or a directory is registered at the key."""
        ...

    async def size(self, *, key: str) -> int:
        """Return the object size in bytes, or 0 when nothing is stored."""
        ...

    async def copy(self, *, source: str, destination: str) -> None:
        """Copy a single object to another key.

        Raises:
            InvalidKeyError: If no object is stored at the source key.
        """
        ...

    async def list(self, *, key: str | None = None) -> list[str]:
        """Return the sorted immediate child names under a prefix."""
        ...

    async def delete(self, *, key: str) -> None:
        """Delete an object or a whole directory tree. Missing keys are ignored."""
        ...

    async def create_directory(self, *, key: str) -> None:
        """Register a directory and all of its ancestors."""
        ...

    async def create_multipart_upload(self, *, key: str) -> str:
        """Start a multipart upload session.

        Args:
            key: Object key the assembled upload will be stored under.

        Returns:
            Upload id for subsequent multipart operations.
        """
        ...

    async def upload_part(
        self,
        *,
        upload_id: str,
        key: str,
        number: int,
        sequence: "StorageSequence",
    ) -> MultipartChunk:
        """Store one numbered part of a multipart upload.

        Args:
            upload_id: Multipart upload id from create_multipart_upload.
            key: Object key the upload was started for.
            number: Part number (1-based). Re-uploading a number replaces it.
            sequence: Byte stream holding the part content.

        Returns:
            MultipartChunk to pass back when finishing the upload.

        Raises:
            InvalidMultipartChunkError: If the part number is not positive.
            InvalidMultipartIdError: If the upload id is invalid for the key.
            UnknownStorageError: If reading the byte stream fails.
        """
        ...

    async def abort_multipart_upload(self, *, upload_id: str, key: str) -> None:
        """Discard a multipart upload and all of its parts.

        Raises:
            InvalidMultipartIdError: If the upload id is invalid for the key.
        """
        ...

    async def finish_multipart_upload(
        self,
        *,
        upload_id: str,
        key: str,
        chunks: Sequence[MultipartChunk],
    ) -> None:
        """Assemble the referenced parts, in part-number order, into one object.

        Args:
            upload_id: Multipart upload id.
            key: Object key the upload was started for.
            chunks: Chunk references returned by upload_part.

        Raises:
            InvalidMultipartIdError: If the upload id is invalid for the key.
            InvalidMultipartChunkError: If a chunk reference does not match a
                stored part.
        """
        ...
