"""In-memory state engine emulating a hierarchical object namespace.

Objects live in a flat key/payload table. Directories are tracked separately
so that empty directories exist and every ancestor of a stored key can be
listed and checked for existence. Multipart uploads are staged per upload id
until they are finished into a single object or aborted.

All public methods run under one lock, so concurrent callers observe the
same state as if operations ran one after another.
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ephemeral_storage.infra.storage.client import (
    InvalidKeyError,
    InvalidMultipartChunkError,
    InvalidMultipartIdError,
    MultipartChunk,
)
from ephemeral_storage.infra.storage.keys import (
    ROOT,
    SEPARATOR,
    child_prefix,
    normalize_key,
    parent_keys,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoredPart:
    """A part payload together with the chunk id it was stored under."""

    chunk_id: str
    payload: bytes


@dataclass(slots=True)
class MultipartUpload:
    """An open multipart upload bound to its target key."""

    key: str
    parts: dict[int, StoredPart] = field(default_factory=dict)


class EphemeralStorage:
    """Thread-safe in-memory object and directory store."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._objects: dict[str, bytes] = {}
        self._directories: set[str] = {ROOT}
        self._uploads: dict[str, MultipartUpload] = {}
        self._ids = itertools.count(1)

    # Objects

    def put(self, key: str, payload: bytes) -> None:
        """Store a payload, replacing any object already at the key."""
        key = normalize_key(key)
        data = bytes(payload)
        with self._lock:
            self._objects[key] = data
            self._ensure_parent_directories(key)

    def get(self, key: str) -> bytes | None:
        with self._lock:
            return self._objects.get(normalize_key(key))

    def exists(self, key: str) -> bool:
        """Return True for a stored object or a registered directory.

        Directory existence is exact membership; a path is not treated as a
        directory merely because some stored key starts with it.
        """
        key = normalize_key(key)
        with self._lock:
            return key in self._objects or key in self._directories

    def size(self, key: str) -> int:
        """Return the payload length, or 0 when no object is stored."""
        with self._lock:
            payload = self._objects.get(normalize_key(key))
            return len(payload) if payload is not None else 0

    def remove(self, key: str) -> None:
        """Delete the key and everything beneath it. Missing keys are ignored.

        The root directory always survives.
        """
        key = normalize_key(key)
        prefix = key + SEPARATOR
        with self._lock:
            self._objects = {
                object_key: payload
                for object_key, payload in self._objects.items()
                if object_key != key and not object_key.startswith(prefix)
            }
            self._directories = {
                directory
                for directory in self._directories
                if directory == ROOT
                or (directory != key and not directory.startswith(prefix))
            }

    def copy(self, source: str, destination: str) -> None:
        """Duplicate a single object. Descendants of the source are not copied.

        Raises:
            InvalidKeyError: If no object is stored at the source key.
        """
        source = normalize_key(source)
        destination = normalize_key(destination)
        with self._lock:
            payload = self._objects.get(source)
            if payload is None:
                raise InvalidKeyError("Source object does not exist", key=source)
            self._objects[destination] = payload
            self._ensure_parent_directories(destination)

    # Directories

    def create_directory(self, key: str) -> None:
        key = normalize_key(key)
        with self._lock:
            self._directories.add(key)
            self._ensure_parent_directories(key)

    def list(self, prefix: str | None = None) -> list[str]:
        """Return the sorted names of the immediate children of a prefix.

        Both stored objects and registered directories contribute, so an
        empty directory shows up in its parent's listing.
        """
        root_prefix = child_prefix(normalize_key(prefix or ROOT))
        with self._lock:
            names = _child_names(self._objects, root_prefix)
            names.update(_child_names(self._directories, root_prefix))
        return sorted(names)

    # Multipart uploads

    def create_multipart_upload(self, key: str) -> str:
        """Open a multipart upload and register the key's parent directories."""
        key = normalize_key(key)
        with self._lock:
            upload_id = f"upload-{next(self._ids)}"
            self._uploads[upload_id] = MultipartUpload(key=key)
            self._ensure_parent_directories(key)
        logger.debug("multipart_created upload_id=%s key=%s", upload_id, key)
        return upload_id

    def add_multipart_part(
        self,
        upload_id: str,
        key: str,
        number: int,
        payload: bytes,
    ) -> MultipartChunk:
        """Store a numbered part, replacing any part with the same number.

        Raises:
            InvalidMultipartChunkError: If the part number is not positive.
            InvalidMultipartIdError: If the upload id is invalid for the key.
        """
        key = normalize_key(key)
        if number <= 0:
            raise InvalidMultipartChunkError(
                "Part number must be positive",
                key=key,
                upload_id=upload_id,
                part_number=number,
            )
        data = bytes(payload)
        with self._lock:
            upload = self._resolve_upload(upload_id, key)
            chunk_id = f"chunk-{next(self._ids)}"
            upload.parts[number] = StoredPart(chunk_id=chunk_id, payload=data)
        return MultipartChunk(chunk_id=chunk_id, number=number)

    def abort_multipart_upload(self, upload_id: str, key: str) -> None:
        key = normalize_key(key)
        with self._lock:
            self._resolve_upload(upload_id, key)
            del self._uploads[upload_id]
        logger.debug("multipart_aborted upload_id=%s key=%s", upload_id, key)

    def finish_multipart_upload(
        self,
        upload_id: str,
        key: str,
        chunks: Sequence[MultipartChunk],
    ) -> None:
        """Concatenate the referenced parts in part-number order into one object.

        Parts that are not referenced are dropped. Nothing is stored unless
        every reference matches a stored part.

        Raises:
            InvalidMultipartIdError: If the upload id is invalid for the key.
            InvalidMultipartChunkError: If a reference names a missing part or
                carries a chunk id other than the stored one.
        """
        key = normalize_key(key)
        with self._lock:
            upload = self._resolve_upload(upload_id, key)
            assembled = bytearray()
            for chunk in sorted(chunks, key=lambda c: c.number):
                part = upload.parts.get(chunk.number)
                if part is None or part.chunk_id != chunk.chunk_id:
                    raise InvalidMultipartChunkError(
                        "Chunk does not match a stored part",
                        key=key,
                        upload_id=upload_id,
                        part_number=chunk.number,
                    )
                assembled += part.payload
            self._objects[key] = bytes(assembled)
            self._ensure_parent_directories(key)
            del self._uploads[upload_id]
        logger.debug(
            "multipart_finished upload_id=%s key=%s size=%d",
            upload_id,
            key,
            len(assembled),
        )

    def pending_uploads(self) -> list[str]:
        """Return the ids of multipart uploads that are still open."""
        with self._lock:
            return sorted(self._uploads)

    def clear(self) -> None:
        """Drop every object, directory and upload, keeping only the root."""
        with self._lock:
            self._objects.clear()
            self._directories = {ROOT}
            self._uploads.clear()

    # Internals

    def _resolve_upload(self, upload_id: str, key: str) -> MultipartUpload:
        upload = self._uploads.get(upload_id)
        if upload is None or upload.key != key:
            raise InvalidMultipartIdError(
                "Unknown multipart upload", key=key, upload_id=upload_id
            )
        return upload

    def _ensure_parent_directories(self, key: str) -> None:
        self._directories.update(parent_keys(key))


def _child_names(keys: Iterable[str], root_prefix: str) -> set[str]:
    names: set[str] = set()
    for key in keys:
        if not key.startswith(root_prefix):
            continue
        remainder = key[len(root_prefix) :]
        if remainder:
            names.add(remainder.split(SEPARATOR, 1)[0])
    return names
