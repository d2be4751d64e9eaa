"""REST endpoints for photos, plus the nested album photos collection."""

from __future__ import annotations

from .auth_middleware import require_api_auth
from .http import controller, delete, get, post, put
from .photo_schemas import (
    AlbumPhotosParams,
    CreateAlbumPhoto,
    CreatePhoto,
    ListPhotosQuery,
    PhotoIdParams,
    PhotoResponse,
    UpdatePhoto,
)
from .photos_service import PhotosService, list_params
from .tenant_scope import current_scope


def _photos() -> PhotosService:
    return PhotosService(current_scope("photos"))


def list_photos(inputs, ctx):
    return _photos().get_all_photos(list_params(inputs.query))


def get_photo(inputs, ctx):
    return _photos().get_photo_by_id(inputs.params.id)


def create_photo(inputs, ctx):
    return _photos().create_photo(inputs.body.to_fields(), created_by_user_id=ctx.user_id or "system")


def update_photo(inputs, ctx):
    return _photos().update_photo(inputs.params.id, inputs.body.to_fields(exclude_unset=True))


def delete_photo(inputs, ctx):
    _photos().soft_delete_photo(inputs.params.id, deleted_by_user_id=ctx.user_id or "system")


def restore_photo(inputs, ctx):
    return _photos().restore_photo(inputs.params.id)


def list_album_photos(inputs, ctx):
    params = list_params(inputs.query)
    params.filters.pop("album_id", None)
    return _photos().get_photos_by_album_id(inputs.params.album_id, params)


def create_album_photo(inputs, ctx):
    data = {**inputs.body.to_fields(), "album_id": inputs.params.album_id}
    return _photos().create_photo(data, created_by_user_id=ctx.user_id or "system")


photos_controller = (
    controller("/api/photos")
    .description("Photo management endpoints")
    .tag("Photos")
    .middleware(require_api_auth)
    .endpoints(
        [
            get("/", "listPhotos")
            .description("List all photos for the current tenant with pagination and filtering")
            .input(query=ListPhotosQuery)
            .response(list[PhotoResponse])
            .envelope()
            .handler(list_photos),
            get("/:id", "getPhoto")
            .description("Get a single photo for the current tenant")
            .input(params=PhotoIdParams)
            .response(PhotoResponse)
            .envelope()
            .handler(get_photo),
            post("/", "createPhoto")
            .description("Create a new photo in an album of the current tenant")
            .input(body=CreatePhoto)
            .response(PhotoResponse)
            .envelope()
            .handler(create_photo),
            put("/:id", "updatePhoto")
            .description("Update a photo for the current tenant")
            .input(params=PhotoIdParams, body=UpdatePhoto)
            .response(PhotoResponse)
            .envelope()
            .handler(update_photo),
            delete("/:id", "deletePhoto")
            .description("Soft delete a photo for the current tenant")
            .input(params=PhotoIdParams)
            .status(204)
            .handler(delete_photo),
            post("/:id/restore", "restorePhoto")
            .description("Restore a soft-deleted photo for the current tenant")
            .input(params=PhotoIdParams)
            .response(PhotoResponse)
            .envelope()
            .handler(restore_photo),
        ]
    )
)

album_photos_controller = (
    controller("/api/albums/:albumId/photos")
    .description("Photos within a specific album")
    .tag("Photos")
    .middleware(require_api_auth)
    .endpoints(
        [
            get("/", "listAlbumPhotos")
            .description("List photos of an album")
            .input(params=AlbumPhotosParams, query=ListPhotosQuery)
            .response(list[PhotoResponse])
            .envelope()
            .handler(list_album_photos),
            post("/", "createAlbumPhoto")
            .description("Add a photo to an album")
            .input(params=AlbumPhotosParams, body=CreateAlbumPhoto)
            .response(PhotoResponse)
            .envelope()
            .handler(create_album_photo),
        ]
    )
)


__all__ = ["photos_controller", "album_photos_controller"]
