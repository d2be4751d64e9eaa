"""REST endpoints for albums, scoped to the request's tenant."""

from __future__ import annotations

from .album_schemas import (
    AlbumIdParams,
    AlbumResponse,
    AlbumWithPhotos,
    CreateAlbum,
    ListAlbumsQuery,
    UpdateAlbum,
)
from .albums_service import AlbumsService, list_params
from .auth_middleware import require_api_auth
from .http import controller, delete, get, post, put
from .photos_service import PhotosService
from .tenant_scope import current_scope


def _albums() -> AlbumsService:
    return AlbumsService(current_scope("albums"))


def list_albums(inputs, ctx):
    return _albums().get_all_albums(list_params(inputs.query))


def get_album(inputs, ctx):
    scope = current_scope("albums")
    album = AlbumsService(scope).get_album_by_id(inputs.params.id)
    photos = PhotosService(scope).get_photos_by_album_id(inputs.params.id)
    return AlbumWithPhotos(**album.model_dump(), photos=photos)


def create_album(inputs, ctx):
    return _albums().create_album(inputs.body.to_fields(), created_by_user_id=ctx.user_id or "system")


def update_album(inputs, ctx):
    return _albums().update_album(inputs.params.id, inputs.body.to_fields(exclude_unset=True))


def delete_album(inputs, ctx):
    _albums().soft_delete_album(inputs.params.id, deleted_by_user_id=ctx.user_id or "system")


def restore_album(inputs, ctx):
    return _albums().restore_album(inputs.params.id)


albums_controller = (
    controller("/api/albums")
    .description("Album management endpoints")
    .tag("Albums")
    .middleware(require_api_auth)
    .endpoints(
        [
            get("/", "listAlbums")
            .description("List all albums for the current tenant with pagination and filtering")
            .input(query=ListAlbumsQuery)
            .response(list[AlbumResponse])
            .envelope()
            .handler(list_albums),
            get("/:id", "getAlbum")
            .description("Get a single album for the current tenant with photos")
            .input(params=AlbumIdParams)
            .response(AlbumWithPhotos)
            .envelope()
            .handler(get_album),
            post("/", "createAlbum")
            .description("Create a new album for the current tenant")
            .input(body=CreateAlbum)
            .response(AlbumResponse)
            .envelope()
            .handler(create_album),
            put("/:id", "updateAlbum")
            .description("Update an album for the current tenant")
            .input(params=AlbumIdParams, body=UpdateAlbum)
            .response(AlbumResponse)
            .envelope()
            .handler(update_album),
            delete("/:id", "deleteAlbum")
            .description("Soft delete an album for the current tenant")
            .input(params=AlbumIdParams)
            .status(204)
            .handler(delete_album),
            post("/:id/restore", "restoreAlbum")
            .description("Restore a soft-deleted album for the current tenant")
            .input(params=AlbumIdParams)
            .response(AlbumResponse)
            .envelope()
            .handler(restore_album),
        ]
    )
)


__all__ = ["albums_controller"]
