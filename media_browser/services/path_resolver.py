from __future__ import annotations

import os
from pathlib import Path


class ForbiddenPath(PermissionError):
    pass


def _root_prefix(base: str) -> str:
    return base if base.endswith(os.sep) else base + os.sep


def validate_path(requested_path: str, root: str) -> Path:
    """Join ``requested_path`` onto ``root`` and refuse anything that lands outside it.

    Pure path algebra: ``.`` and ``..`` segments are collapsed lexically and the
    filesystem is never consulted, so symlinks below the root are served as-is.
    """
    if '\x00' in requested_path:
        raise ValueError('Invalid path')

    base = os.path.normpath(os.path.abspath(root))
    candidate = os.path.normpath(os.path.join(base, requested_path.lstrip('/\\')))
    if candidate != base and not candidate.startswith(_root_prefix(base)):
        raise ForbiddenPath('Path traversal detected')
    return Path(candidate)


class PathResolver:
    def __init__(self, root: str):
        # Canonicalised once; the root is fixed for the life of the process.
        self.root = Path(root).resolve()

    def resolve(self, requested_path: str) -> Path:
        return validate_path(requested_path or '', str(self.root))

    def relative(self, target: Path) -> str:
        rel = os.path.relpath(target, self.root)
        if rel == os.curdir:
            return '/'
        return '/' + Path(rel).as_posix()
