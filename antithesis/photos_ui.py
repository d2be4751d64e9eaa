"""Server-rendered photo forms; every post redirects back to the album page."""

from __future__ import annotations

from flask import session

from .app_sessions import CURRENT_TENANT_ID
from .auth_middleware import require_auth
from .dto import DTO, UuidStr
from .http import controller, get, post
from .photo_schemas import CreatePhoto, PhotoIdParams, UpdatePhoto
from .photos_service import PhotosService
from .tenant_scope import current_scope


class NewPhotoQuery(DTO):
    album_id: UuidStr | None = None


def _photos() -> PhotosService:
    return PhotosService(current_scope("photosWeb"))


def create_photo_page(inputs, ctx):
    return {
        "title": "Add Photo",
        "photo": None,
        "album_id": inputs.query.album_id,
        "current_tenant_id": session.get(CURRENT_TENANT_ID),
    }


def edit_photo_page(inputs, ctx):
    photo = _photos().get_photo_by_id(inputs.params.id)
    return {
        "title": f"Edit {photo.title}",
        "photo": photo,
        "album_id": photo.album_id,
        "current_tenant_id": session.get(CURRENT_TENANT_ID),
    }


def handle_create_photo(inputs, ctx):
    photo = _photos().create_photo(inputs.body.to_fields(), created_by_user_id=ctx.user_id or "system")
    return ctx.response.redirect(f"/albums/{photo.album_id}")


def handle_update_photo(inputs, ctx):
    photo = _photos().update_photo(inputs.params.id, inputs.body.to_fields(exclude_unset=True))
    return ctx.response.redirect(f"/albums/{photo.album_id}")


def handle_delete_photo(inputs, ctx):
    photo = _photos().soft_delete_photo(inputs.params.id, deleted_by_user_id=ctx.user_id or "system")
    return ctx.response.redirect(f"/albums/{photo.album_id}")


photos_web_controller = (
    controller("/photos")
    .description("Photo management pages")
    .middleware(require_auth)
    .endpoints(
        [
            get("/new", "createPhotoPage")
            .input(query=NewPhotoQuery)
            .hide_from_openapi()
            .render_view("pages/photos/form", create_photo_page),
            get("/:id/edit", "editPhotoPage")
            .input(params=PhotoIdParams)
            .hide_from_openapi()
            .render_view("pages/photos/form", edit_photo_page),
            post("/", "handleCreatePhoto").input(body=CreatePhoto).hide_from_openapi().handler(handle_create_photo),
            post("/:id", "handleUpdatePhoto")
            .input(params=PhotoIdParams, body=UpdatePhoto)
            .hide_from_openapi()
            .handler(handle_update_photo),
            post("/:id/delete", "handleDeletePhoto")
            .input(params=PhotoIdParams)
            .hide_from_openapi()
            .handler(handle_delete_photo),
        ]
    )
)


__all__ = ["photos_web_controller", "NewPhotoQuery"]
