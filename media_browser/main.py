from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, settings
from .deps import get_settings
from .routers import media
from .schemas import HealthResponse
from .services.file_ops import FileOps

logger = logging.getLogger(__name__)

_SECURITY_HEADERS = {
    'X-Content-Type-Options': 'nosniff',
    'Referrer-Policy': 'same-origin',
}


def _apply_security_headers(response):
    for key, value in _SECURITY_HEADERS.items():
        response.headers[key] = value
    return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    root = Path(app.state.settings.media_root)
    if root.exists() and not root.is_dir():
        raise RuntimeError(f'Refusing to start: media root {root} is not a directory. Set MEDIA_ROOT in .env')

    root.mkdir(parents=True, exist_ok=True)
    logger.info('Media root: %s', root.resolve())
    yield


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse({'error': exc.detail}, status_code=exc.status_code, headers=exc.headers)


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception('Unhandled error on %s %s', request.method, request.url.path)
    return _apply_security_headers(JSONResponse({'error': 'Internal server error'}, status_code=500))


def healthz(config: Settings = Depends(get_settings)) -> HealthResponse:
    now = datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
    return HealthResponse(media_root=config.media_root, timestamp=now)


def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or settings
    app = FastAPI(title=config.app_name, lifespan=lifespan)
    app.state.settings = config
    app.state.file_ops = FileOps(config.media_root, listing_concurrency=config.listing_concurrency)

    @app.middleware('http')
    async def security_middleware(request: Request, call_next):
        response = await call_next(request)
        return _apply_security_headers(response)

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_api_route('/api/health', healthz, methods=['GET'], response_model=HealthResponse, tags=['system'])
    app.include_router(media.router)
    return app


app = create_app()


def run():
    import uvicorn

    logging.basicConfig(
        level=settings.log_level.upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())
