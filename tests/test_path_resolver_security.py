from __future__ import annotations

import pytest

from media_browser.services import path_resolver
from media_browser.services.path_resolver import ForbiddenPath, PathResolver


def test_validate_path_blocks_traversal(tmp_path):
    with pytest.raises(PermissionError):
        path_resolver.validate_path('../../etc/passwd', str(tmp_path))


@pytest.mark.parametrize(
    'requested',
    [
        '..',
        '../',
        '/../..',
        'a/../../b',
        'a/b/../../../etc/passwd',
        '//etc/passwd',
        '/etc/passwd',
        './../media-evil',
        '....//....//etc',
        'movies/%2e%2e/secret',
        '..\\..\\windows',
        '',
        '/',
    ],
)
def test_resolve_never_escapes_root(tmp_path, requested):
    root = tmp_path / 'media'
    root.mkdir()
    resolver = PathResolver(str(root))

    try:
        resolved = resolver.resolve(requested)
    except ForbiddenPath:
        return

    assert resolved == resolver.root or resolver.root in resolved.parents


def test_sibling_directory_sharing_root_prefix_is_rejected(tmp_path):
    root = tmp_path / 'media'
    root.mkdir()
    (tmp_path / 'media-evil').mkdir()

    with pytest.raises(ForbiddenPath):
        PathResolver(str(root)).resolve('../media-evil/loot.mp4')


def test_absolute_path_is_kept_under_root(tmp_path):
    resolver = PathResolver(str(tmp_path))

    assert resolver.resolve('/etc/passwd') == resolver.root / 'etc' / 'passwd'


@pytest.mark.parametrize('requested', ['', '/', '.', 'movies/..'])
def test_root_requests_yield_root(tmp_path, requested):
    resolver = PathResolver(str(tmp_path))

    assert resolver.resolve(requested) == resolver.root


def test_resolve_collapses_dot_segments_inside_root(tmp_path):
    resolver = PathResolver(str(tmp_path))

    assert resolver.resolve('movies/./2023/../clip.mp4') == resolver.root / 'movies' / 'clip.mp4'


def test_resolve_rejects_nul_bytes(tmp_path):
    with pytest.raises(ValueError):
        PathResolver(str(tmp_path)).resolve('movie\x00.mp4')


def test_resolve_does_not_touch_filesystem(tmp_path):
    resolver = PathResolver(str(tmp_path))

    resolved = resolver.resolve('does/not/exist.mkv')

    assert resolved == resolver.root / 'does' / 'not' / 'exist.mkv'
    assert not resolved.exists()


def test_relative_is_posix_and_rooted(tmp_path):
    resolver = PathResolver(str(tmp_path))

    assert resolver.relative(resolver.root) == '/'
    assert resolver.relative(resolver.root / 'Movies' / 'a.mp4') == '/Movies/a.mp4'
