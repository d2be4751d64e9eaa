"""Photo request/response DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from .dto import DTO, OptionalText, OptionalUrl, UrlStr, UuidStr

PhotoStatus = Literal["draft", "published", "archived"]


class CreatePhoto(DTO):
    album_id: UuidStr
    title: str = Field(min_length=1)
    description: OptionalText = None
    url: UrlStr
    thumbnail_url: OptionalUrl = None
    status: PhotoStatus = "draft"


class CreateAlbumPhoto(DTO):
    """Photo payload when the album comes from the URL."""

    title: str = Field(min_length=1)
    description: OptionalText = None
    url: UrlStr
    thumbnail_url: OptionalUrl = None
    status: PhotoStatus = "draft"


class UpdatePhoto(DTO):
    title: str = Field(default=None, min_length=1)
    description: OptionalText = None
    url: UrlStr = None
    thumbnail_url: OptionalUrl = None
    status: PhotoStatus = None


class ListPhotosQuery(DTO):
    page: int | None = Field(default=None, gt=0)
    limit: int | None = Field(default=None, gt=0, le=100)
    sort_by: Literal["title", "createdAt", "updatedAt", "status"] | None = None
    sort_direction: Literal["asc", "desc"] | None = None
    search: str | None = None
    album_id: UuidStr | None = None
    status: PhotoStatus | None = None
    include_deleted: bool = False


class PhotoIdParams(DTO):
    id: UuidStr = Field(description="Photo ID")


class AlbumPhotosParams(DTO):
    album_id: UuidStr = Field(description="Album ID")


class PhotoResponse(DTO):
    id: str
    tenant_id: str
    album_id: str
    title: str
    description: str | None
    url: str
    thumbnail_url: str | None
    status: str
    created_by_user_id: str
    is_deleted: bool
    deleted_at: datetime | None
    deleted_by_user_id: str | None
    created_at: datetime
    updated_at: datetime


__all__ = [
    "PhotoStatus",
    "CreatePhoto",
    "CreateAlbumPhoto",
    "UpdatePhoto",
    "ListPhotosQuery",
    "PhotoIdParams",
    "AlbumPhotosParams",
    "PhotoResponse",
]
