from __future__ import annotations

import mimetypes
import posixpath
from typing import Optional

DEFAULT_MIME_TYPE = 'application/octet-stream'

_EXTENSION_TYPES: dict[str, str] = {
    # video
    '.mp4': 'video/mp4',
    '.m4v': 'video/x-m4v',
    '.mkv': 'video/x-matroska',
    '.webm': 'video/webm',
    '.mov': 'video/quicktime',
    '.avi': 'video/x-msvideo',
    '.wmv': 'video/x-ms-wmv',
    '.flv': 'video/x-flv',
    '.mpeg': 'video/mpeg',
    '.mpg': 'video/mpeg',
    '.3gp': 'video/3gpp',
    '.ogv': 'video/ogg',
    '.ts': 'video/mp2t',
    # audio
    '.mp3': 'audio/mpeg',
    '.m4a': 'audio/mp4',
    '.aac': 'audio/aac',
    '.flac': 'audio/flac',
    '.wav': 'audio/wav',
    '.ogg': 'audio/ogg',
    '.oga': 'audio/ogg',
    '.opus': 'audio/opus',
    '.wma': 'audio/x-ms-wma',
    # image
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.png': 'image/png',
    '.gif': 'image/gif',
    '.webp': 'image/webp',
    '.bmp': 'image/bmp',
    '.svg': 'image/svg+xml',
    '.tif': 'image/tiff',
    '.tiff': 'image/tiff',
    '.heic': 'image/heic',
    '.avif': 'image/avif',
    '.ico': 'image/x-icon',
}

_KINDS = ('video', 'image', 'audio')

_SIZE_UNITS = ('B', 'KB', 'MB', 'GB', 'TB')


def guess_mime_type(name: str) -> Optional[str]:
    ext = posixpath.splitext(name.lower())[1]
    if ext in _EXTENSION_TYPES:
        return _EXTENSION_TYPES[ext]
    mime_type, _ = mimetypes.guess_type(name, strict=False)
    return mime_type


def classify(name: str) -> str:
    mime_type = guess_mime_type(name)
    if mime_type:
        category = mime_type.split('/', 1)[0]
        if category in _KINDS:
            return category
    return 'file'


def format_size(num_bytes: int) -> str:
    if num_bytes <= 0:
        return '0 B'

    value = float(num_bytes)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1

    if unit == 0:
        return f'{num_bytes} B'
    # 1023.96 KB would print as "1024.0 KB"
    if round(value, 1) >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f'{value:.1f} {_SIZE_UNITS[unit]}'
