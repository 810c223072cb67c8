from __future__ import annotations

import asyncio
import logging
import os
import stat
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..schemas import MediaEntry
from .media_types import DEFAULT_MIME_TYPE, classify, format_size, guess_mime_type
from .path_resolver import PathResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileInfo:
    path: Path
    size: int
    mime_type: str


def _modified_date(mtime: float) -> str:
    return datetime.fromtimestamp(mtime, tz=timezone.utc).date().isoformat()


def _sort_key(entry: MediaEntry) -> tuple[bool, str, str]:
    return (entry.kind != 'folder', entry.name.casefold(), entry.name)


class FileOps:
    def __init__(self, root: str, listing_concurrency: int = 32):
        self.resolver = PathResolver(root)
        self.root = self.resolver.root
        self.listing_concurrency = listing_concurrency

    def safe_path(self, rel: str) -> Path:
        return self.resolver.resolve(rel)

    def _describe(self, child: Path, rel_dir: str) -> Optional[MediaEntry]:
        try:
            st = child.stat()
        except FileNotFoundError:
            # vanished since the directory was read, or a dangling symlink
            logger.debug('Skipping unreadable entry %s', child)
            return None

        try:
            child.name.encode('utf-8')
        except UnicodeEncodeError:
            logger.warning('Skipping entry with undecodable name %r', child.name)
            return None

        path = rel_dir.rstrip('/') + '/' + child.name
        if stat.S_ISDIR(st.st_mode):
            return MediaEntry(name=child.name, kind='folder', path=path, size=None, modified=_modified_date(st.st_mtime))
        return MediaEntry(
            name=child.name,
            kind=classify(child.name),
            path=path,
            size=format_size(st.st_size),
            modified=_modified_date(st.st_mtime),
        )

    async def list_dir(self, rel: str) -> list[MediaEntry]:
        target = self.safe_path(rel)
        try:
            st = await asyncio.to_thread(target.stat)
        except NotADirectoryError:
            # a parent component is a regular file
            raise FileNotFoundError('Directory not found')
        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectoryError('Path is not a directory')

        names = await asyncio.to_thread(os.listdir, target)
        rel_dir = self.resolver.relative(target)
        limiter = asyncio.Semaphore(self.listing_concurrency)

        async def _entry(name: str) -> Optional[MediaEntry]:
            async with limiter:
                return await asyncio.to_thread(self._describe, target / name, rel_dir)

        entries = await asyncio.gather(*(_entry(name) for name in names))
        items = [entry for entry in entries if entry is not None]
        items.sort(key=_sort_key)
        return items

    def file_info(self, rel: str) -> FileInfo:
        target = self.safe_path(rel)
        if not target.exists() or not target.is_file():
            raise FileNotFoundError('File not found')
        return FileInfo(
            path=target,
            size=target.stat().st_size,
            mime_type=guess_mime_type(target.name) or DEFAULT_MIME_TYPE,
        )
