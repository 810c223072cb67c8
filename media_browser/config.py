from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8')

    app_name: str = 'Media Browser'
    media_root: str = './media'
    host: str = '0.0.0.0'
    port: int = 3000
    log_level: str = 'info'
    stream_chunk_size: int = Field(default=1024 * 1024, ge=4096, le=16 * 1024 * 1024)
    listing_concurrency: int = Field(default=32, ge=1, le=256)


settings = Settings()
