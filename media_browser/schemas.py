from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

MediaKind = Literal['folder', 'video', 'image', 'audio', 'file']


class MediaEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    kind: MediaKind = Field(alias='type')
    path: str
    size: Optional[str] = None
    modified: str


class DirectoryListing(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_path: str = Field(alias='currentPath')
    items: list[MediaEntry]


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str = 'OK'
    media_root: str = Field(alias='mediaRoot')
    timestamp: str


class ErrorResponse(BaseModel):
    error: str
