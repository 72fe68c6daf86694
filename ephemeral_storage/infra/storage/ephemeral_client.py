"""Ephemeral storage client implementation.

This module adapts the in-memory ``EphemeralStorage`` engine to the
``StorageClient`` protocol. Incoming streams are drained in full before they
are stored, and downloads are served back as chunked streams.

Intended for tests, previews, and local development: nothing is persisted
beyond the lifetime of the engine instance.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Sequence

from ephemeral_storage.common.config import Settings, get_settings
from ephemeral_storage.infra.observability.metrics import LATENCY, OPERATIONS
from ephemeral_storage.infra.storage.client import (
    InvalidKeyError,
    MultipartChunk,
    StorageError,
    UnknownStorageError,
)
from ephemeral_storage.infra.storage.engine import EphemeralStorage
from ephemeral_storage.infra.storage.ranges import ByteRange, extract_range
from ephemeral_storage.infra.storage.sequence import StorageSequence

logger = logging.getLogger("ephemeral_storage.client")


class EphemeralStorageClient:
    """In-memory object storage client.

    Every client owns an isolated engine unless one is injected, which lets
    several clients share the same namespace.
    """

    def __init__(
        self,
        *,
        storage: EphemeralStorage | None = None,
        settings: Settings | None = None,
    ) -> None:
        self._storage = storage if storage is not None else EphemeralStorage()
        self._settings = settings or get_settings()

    @property
    def storage(self) -> EphemeralStorage:
        return self._storage

    @contextmanager
    def _track(self, operation: str, key: str | None) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        except StorageError as exc:
            self._record(operation, key, type(exc).__name__, start, logging.WARNING)
            raise
        except Exception as exc:
            self._record(
                operation, key, type(exc).__name__, start, logging.ERROR, exc=exc
            )
            raise
        self._record(operation, key, "ok", start, logging.DEBUG)

    def _record(
        self,
        operation: str,
        key: str | None,
        outcome: str,
        start: float,
        level: int,
        *,
        exc: Exception | None = None,
    ) -> None:
        elapsed = time.perf_counter() - start
        if self._settings.ENABLE_METRICS:
            OPERATIONS.labels(operation, outcome).inc()
            LATENCY.labels(operation).observe(elapsed)

        duration_ms = round(elapsed * 1000, 3)
        payload: dict[str, object] = {
            "operation": operation,
            "key": key,
            "outcome": outcome,
            "duration_ms": duration_ms,
        }
        if exc is not None:
            payload["exception"] = repr(exc)
        logger.log(
            level,
            "storage operation=%s key=%s outcome=%s duration_ms=%.3f",
            operation,
            key if key is not None else "-",
            outcome,
            duration_ms,
            exc_info=exc,
            extra={"extra": payload},
        )

    @staticmethod
    async def _read_all(sequence: StorageSequence) -> bytes:
        try:
            return await sequence.collect()
        except StorageError:
            raise
        except Exception as exc:
            raise UnknownStorageError(f"Failed to read input stream: {exc}") from exc

    async def upload(self, *, key: str, sequence: StorageSequence) -> None:
        """Store an object, replacing any previous object at the key."""
        with self._track("upload", key):
            payload = await self._read_all(sequence)
            self._storage.put(key, payload)

    async def download(
        self,
        *,
        key: str,
        byte_range: ByteRange | None = None,
    ) -> StorageSequence:
        """Stream an object, or an inclusive byte range of it."""
        with self._track("download", key):
            payload = self._storage.get(key)
            if payload is None:
                raise InvalidKeyError("Object does not exist", key=key)
            payload = extract_range(payload, byte_range, key=key)
        return StorageSequence.from_bytes(
            payload, chunk_size=self._settings.STORAGE_CHUNK_SIZE_BYTES
        )

    async def exists(self, *, key: str) -> bool:
        with self._track("exists", key):
            return self._storage.exists(key)

    async def size(self, *, key: str) -> int:
        with self._track("size", key):
            return self._storage.size(key)

    async def copy(self, *, source: str, destination: str) -> None:
        with self._track("copy", source):
            self._storage.copy(source, destination)

    async def list(self, *, key: str | None = None) -> list[str]:
        with self._track("list", key):
            return self._storage.list(key)

    async def delete(self, *, key: str) -> None:
        with self._track("delete", key):
            self._storage.remove(key)

    async def create_directory(self, *, key: str) -> None:
        with self._track("create_directory", key):
            self._storage.create_directory(key)

    async def create_multipart_upload(self, *, key: str) -> str:
        with self._track("create_multipart_upload", key):
            return self._storage.create_multipart_upload(key)

    async def upload_part(
        self,
        *,
        upload_id: str,
        key: str,
        number: int,
        sequence: StorageSequence,
    ) -> MultipartChunk:
        """Store one numbered part of a multipart upload."""
        with self._track("upload_part", key):
            payload = await self._read_all(sequence)
            return self._storage.add_multipart_part(upload_id, key, number, payload)

    async def abort_multipart_upload(self, *, upload_id: str, key: str) -> None:
        with self._track("abort_multipart_upload", key):
            self._storage.abort_multipart_upload(upload_id, key)

    async def finish_multipart_upload(
        self,
        *,
        upload_id: str,
        key: str,
        chunks: Sequence[MultipartChunk],
    ) -> None:
        """Assemble the referenced parts into the final object."""
        with self._track("finish_multipart_upload", key):
            self._storage.finish_multipart_upload(upload_id, key, chunks)
