"""Album request/response DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from .dto import DTO, OptionalText, OptionalUrl, UuidStr
from .photo_schemas import PhotoResponse

AlbumStatus = Literal["draft", "published", "archived"]


class CreateAlbum(DTO):
    name: str = Field(min_length=1)
    description: OptionalText = None
    cover_photo_url: OptionalUrl = None
    status: AlbumStatus = "draft"


class UpdateAlbum(DTO):
    """Partial update; only fields present in the payload are applied."""

    name: str = Field(default=None, min_length=1)
    description: OptionalText = None
    cover_photo_url: OptionalUrl = None
    status: AlbumStatus = None


class ListAlbumsQuery(DTO):
    page: int | None = Field(default=None, gt=0)
    limit: int | None = Field(default=None, gt=0, le=100)
    sort_by: Literal["name", "createdAt", "updatedAt", "status"] | None = None
    sort_direction: Literal["asc", "desc"] | None = None
    search: str | None = None
    status: AlbumStatus | None = None
    include_deleted: bool = False


class AlbumIdParams(DTO):
    id: UuidStr = Field(description="Album ID")


class AlbumResponse(DTO):
    id: str
    tenant_id: str
    name: str
    description: str | None
    cover_photo_url: str | None
    status: str
    created_by_user_id: str
    is_deleted: bool
    deleted_at: datetime | None
    deleted_by_user_id: str | None
    created_at: datetime
    updated_at: datetime


class AlbumWithPhotos(AlbumResponse):
    photos: list[PhotoResponse]


class AlbumWithCreator(AlbumResponse):
    creator_email: str | None = None


__all__ = [
    "AlbumStatus",
    "CreateAlbum",
    "UpdateAlbum",
    "ListAlbumsQuery",
    "AlbumIdParams",
    "AlbumResponse",
    "AlbumWithPhotos",
    "AlbumWithCreator",
]
