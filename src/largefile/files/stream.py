"""Byte-range streaming.

Reads fixed-size blocks from an offset, optionally bounded by a byte budget,
and decodes them incrementally so a multi-byte character split across two
blocks is emitted whole in the later block. Each block records the offset a
later call should resume from, so a stream cut short never splits a
character.
"""

from __future__ import annotations

import codecs
from collections.abc import Iterator
from pathlib import Path

from largefile.files.metadata import FileMetadataProvider
from largefile.files.models import StreamChunk


def stream_file(
    path: str | Path,
    provider: FileMetadataProvider,
    *,
    chunk_size_bytes: int = 64 * 1024,
    start_offset: int = 0,
    max_bytes: int | None = None,
) -> Iterator[StreamChunk]:
    """Yield decoded blocks of the file from start_offset.

    Args:
        path: File to stream.
        provider: Metadata provider (verification and encoding).
        chunk_size_bytes: Raw bytes read per block.
        start_offset: First byte to read.
        max_bytes: Stop after this many bytes; read to EOF when None.

    The file is verified before the first block is produced; closing the
    generator early closes the file. Bytes of a character left incomplete
    by max_bytes are not decoded; they start the next call at
    resume_offset. Only a character truncated by EOF is replaced.
    """
    provider.verify(path)
    decoder = codecs.getincrementaldecoder(provider.encoding)(errors="replace")
    remaining = max_bytes
    at_eof = False

    with open(path, "rb") as f:
        f.seek(start_offset)
        offset = start_offset
        while remaining is None or remaining > 0:
            want = chunk_size_bytes if remaining is None else min(chunk_size_bytes, remaining)
            block = f.read(want)
            if not block:
                at_eof = True
                break
            if remaining is not None:
                remaining -= len(block)
            text = decoder.decode(block)
            pending, _flag = decoder.getstate()
            offset += len(block)
            yield StreamChunk(
                offset=offset - len(block),
                byte_size=len(block),
                content=text,
                resume_offset=offset - len(pending),
            )

        if at_eof:
            tail = decoder.decode(b"", final=True)
            if tail:
                yield StreamChunk(offset=offset, byte_size=0, content=tail, resume_offset=offset)
