from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException
from fastapi.responses import FileResponse, StreamingResponse

from ..config import Settings
from ..deps import get_file_ops, get_settings
from ..schemas import DirectoryListing, ErrorResponse
from ..services.byte_range import RangeNotSatisfiable, iter_file_range, parse_range_header
from ..services.file_ops import FileInfo, FileOps
from ..services.path_resolver import ForbiddenPath

logger = logging.getLogger(__name__)

router = APIRouter(prefix='/api', tags=['media'])

_FILE_ERRORS = {403: {'model': ErrorResponse}, 404: {'model': ErrorResponse}}


def _forbidden(path: str) -> HTTPException:
    logger.warning('Rejected path outside media root: %r', path)
    return HTTPException(status_code=403, detail='Access denied')


async def _file_info(ops: FileOps, path: str) -> FileInfo:
    try:
        return await asyncio.to_thread(ops.file_info, path)
    except ForbiddenPath:
        raise _forbidden(path)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail='File not found')
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except OSError:
        logger.exception('Failed to stat %r', path)
        raise HTTPException(status_code=500, detail='Server error')


@router.get(
    '/browse/{path:path}',
    response_model=DirectoryListing,
    responses={**_FILE_ERRORS, 400: {'model': ErrorResponse}, 500: {'model': ErrorResponse}},
)
async def browse(path: str, ops: FileOps = Depends(get_file_ops)):
    try:
        items = await ops.list_dir(path)
    except ForbiddenPath:
        raise _forbidden(path)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail='Directory not found')
    except NotADirectoryError:
        raise HTTPException(status_code=400, detail='Path is not a directory')
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except OSError:
        logger.exception('Failed to list %r', path)
        raise HTTPException(status_code=500, detail='Server error')

    return DirectoryListing(current_path=path or '/', items=items)


@router.get('/stream/{path:path}', responses={**_FILE_ERRORS, 416: {'model': ErrorResponse}})
async def stream(
    path: str,
    range_header: Optional[str] = Header(default=None, alias='Range'),
    ops: FileOps = Depends(get_file_ops),
    settings: Settings = Depends(get_settings),
):
    info = await _file_info(ops, path)
    headers = {'Accept-Ranges': 'bytes'}

    if not range_header:
        headers['Content-Length'] = str(info.size)
        return StreamingResponse(
            iter_file_range(info.path, 0, info.size - 1, settings.stream_chunk_size),
            status_code=200,
            headers=headers,
            media_type=info.mime_type,
        )

    try:
        byte_range = parse_range_header(range_header, info.size)
    except RangeNotSatisfiable as exc:
        raise HTTPException(
            status_code=416,
            detail=str(exc),
            headers={'Content-Range': f'bytes */{exc.size}', 'Accept-Ranges': 'bytes'},
        )

    headers['Content-Range'] = byte_range.content_range()
    headers['Content-Length'] = str(byte_range.length)
    return StreamingResponse(
        iter_file_range(info.path, byte_range.start, byte_range.end, settings.stream_chunk_size),
        status_code=206,
        headers=headers,
        media_type=info.mime_type,
    )


@router.get('/download/{path:path}', responses=_FILE_ERRORS)
async def download(path: str, ops: FileOps = Depends(get_file_ops)):
    info = await _file_info(ops, path)
    return FileResponse(info.path, filename=info.path.name, media_type=info.mime_type)
