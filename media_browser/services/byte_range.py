from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import AsyncIterator

logger = logging.getLogger(__name__)

_RANGE_RE = re.compile(r'^bytes=(\d*)-(\d*)$')


class RangeNotSatisfiable(ValueError):
    def __init__(self, size: int, message: str = 'Range not satisfiable'):
        super().__init__(message)
        self.size = size


@dataclass(frozen=True)
class ByteRange:
    start: int
    end: int
    size: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self) -> str:
        return f'bytes {self.start}-{self.end}/{self.size}'


def parse_range_header(header: str, size: int) -> ByteRange:
    """Parse a single ``Range: bytes=...`` header against a file of ``size`` bytes.

    Supports ``start-end``, open-ended ``start-`` and suffix ``-count`` forms.
    ``end`` past the last byte is clamped. Anything else, including multi-range
    requests, raises :class:`RangeNotSatisfiable`.
    """
    match = _RANGE_RE.match(header.strip().replace(' ', ''))
    if not match:
        raise RangeNotSatisfiable(size, 'Malformed range header')

    start_raw, end_raw = match.groups()
    if not start_raw and not end_raw:
        raise RangeNotSatisfiable(size, 'Malformed range header')

    if not start_raw:
        suffix = int(end_raw)
        if suffix == 0 or size == 0:
            raise RangeNotSatisfiable(size)
        return ByteRange(start=max(0, size - suffix), end=size - 1, size=size)

    start = int(start_raw)
    end = int(end_raw) if end_raw else size - 1
    if start >= size or start > end:
        raise RangeNotSatisfiable(size)
    return ByteRange(start=start, end=min(end, size - 1), size=size)


async def iter_file_range(path: Path, start: int, end: int, chunk_size: int) -> AsyncIterator[bytes]:
    """Yield bytes ``start..end`` (inclusive) of ``path`` in bounded chunks.

    The file handle is scoped to the generator: finishing, failing, or the
    consumer being cancelled on client disconnect all close it.
    """
    remaining = end - start + 1
    fh = await asyncio.to_thread(path.open, 'rb')
    with fh:
        await asyncio.to_thread(fh.seek, start)
        try:
            while remaining > 0:
                chunk = await asyncio.to_thread(fh.read, min(chunk_size, remaining))
                if not chunk:
                    break
                remaining -= len(chunk)
                yield chunk
        except asyncio.CancelledError:
            logger.debug('Stream of %s cancelled with %d bytes unsent', path, remaining)
            raise
