#!/usr/bin/env python3
"""Exercise the ephemeral storage client end to end.

Usage:
  .venv/bin/python scripts/storage_smoke.py
  .venv/bin/python scripts/storage_smoke.py --chunk-size 4 --log-level DEBUG

Runs upload/download, directory, and multipart scenarios against a fresh
in-memory client and prints one line per scenario.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses

from ephemeral_storage.common.config import get_settings
from ephemeral_storage.common.logging import setup_logging
from ephemeral_storage.infra.storage import (
    ByteRange,
    EphemeralStorageClient,
    InvalidBufferError,
    InvalidMultipartIdError,
    StorageClient,
    StorageSequence,
)


async def run_smoke(client: StorageClient) -> list[str]:
    lines: list[str] = []

    await client.upload(
        key="docs/hello.txt",
        sequence=StorageSequence.from_bytes(b"hello-ephemeral"),
    )
    full = await (await client.download(key="docs/hello.txt")).collect()
    ranged = await (
        await client.download(key="docs/hello.txt", byte_range=ByteRange(6, 14))
    ).collect()
    try:
        await client.download(key="docs/hello.txt", byte_range=ByteRange(99, 100))
        out_of_range = "accepted"
    except InvalidBufferError:
        out_of_range = "rejected"
    lines.append(
        f"object: size={await client.size(key='docs/hello.txt')} "
        f"full={full.decode()} range={ranged.decode()} out_of_range={out_of_range}"
    )

    await client.create_directory(key="docs/new")
    await client.upload(key="docs/new/a.txt", sequence=StorageSequence.from_bytes(b"A"))
    await client.upload(key="docs/new/b.txt", sequence=StorageSequence.from_bytes(b"B"))
    listed = await client.list(key="docs/new")
    await client.delete(key="docs/new")
    lines.append(
        f"directory: listed={','.join(listed)} "
        f"after_delete={','.join(await client.list(key='docs/new')) or '-'}"
    )

    key = "docs/multipart.txt"
    upload_id = await client.create_multipart_upload(key=key)
    part2 = await client.upload_part(
        upload_id=upload_id,
        key=key,
        number=2,
        sequence=StorageSequence.from_bytes(b"done"),
    )
    part1 = await client.upload_part(
        upload_id=upload_id,
        key=key,
        number=1,
        sequence=StorageSequence.from_bytes(b"chunk-"),
    )
    await client.finish_multipart_upload(
        upload_id=upload_id, key=key, chunks=[part2, part1]
    )
    assembled = await (await client.download(key=key)).collect()
    lines.append(f"multipart: {assembled.decode()}")

    key = "docs/aborted.txt"
    upload_id = await client.create_multipart_upload(key=key)
    await client.abort_multipart_upload(upload_id=upload_id, key=key)
    try:
        await client.upload_part(
            upload_id=upload_id,
            key=key,
            number=1,
            sequence=StorageSequence.from_bytes(b"x"),
        )
        aborted = "still open"
    except InvalidMultipartIdError:
        aborted = "invalidated"
    lines.append(f"abort: {aborted}")
    return lines


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Run smoke scenarios against the ephemeral storage client."
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        default=None,
        help="Download chunk size in bytes (default: STORAGE_CHUNK_SIZE_BYTES)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level for ephemeral_storage loggers (default: LOG_LEVEL)",
    )
    args = parser.parse_args()

    settings = get_settings()
    overrides: dict[str, object] = {}
    if args.chunk_size is not None:
        overrides["STORAGE_CHUNK_SIZE_BYTES"] = args.chunk_size
    if args.log_level is not None:
        overrides["LOG_LEVEL"] = args.log_level
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    setup_logging(settings)
    client = EphemeralStorageClient(settings=settings)
    for line in asyncio.run(run_smoke(client)):
        print(line)


if __name__ == "__main__":
    main()
