"""Server-rendered album pages and their form posts."""

from __future__ import annotations

from flask import session

from .album_schemas import AlbumIdParams, CreateAlbum, ListAlbumsQuery, UpdateAlbum
from .albums_service import AlbumsService, list_params
from .app_sessions import CURRENT_TENANT_ID
from .auth_middleware import require_auth
from .http import controller, get, post
from .photos_service import PhotosService
from .photos_service import list_params as photo_list_params
from .tenant_scope import current_scope

PAGE_LIMIT = 100


def _albums() -> AlbumsService:
    return AlbumsService(current_scope("albumsWeb"))


def albums_list_page(inputs, ctx):
    q = inputs.query
    return {
        "title": "Albums",
        "albums": _albums().get_all_albums(list_params(q, default_limit=PAGE_LIMIT)),
        "current_tenant_id": session.get(CURRENT_TENANT_ID),
        "filters": {"status": q.status, "include_deleted": q.include_deleted},
    }


def create_album_page(inputs, ctx):
    return {"title": "Create Album", "album": None, "current_tenant_id": session.get(CURRENT_TENANT_ID)}


def edit_album_page(inputs, ctx):
    album = _albums().get_album_by_id(inputs.params.id)
    return {"title": f"Edit {album.name}", "album": album, "current_tenant_id": session.get(CURRENT_TENANT_ID)}


def album_detail_page(inputs, ctx):
    scope = current_scope("albumsWeb")
    album = AlbumsService(scope).get_album_by_id_with_creator(inputs.params.id)
    photos = PhotosService(scope).get_photos_by_album_id(inputs.params.id, photo_list_params(None, default_limit=PAGE_LIMIT))
    return {
        "title": album.name,
        "album": album,
        "photos": photos,
        "current_tenant_id": session.get(CURRENT_TENANT_ID),
    }


def handle_create_album(inputs, ctx):
    album = _albums().create_album(inputs.body.to_fields(), created_by_user_id=ctx.user_id or "system")
    return ctx.response.redirect(f"/albums/{album.id}")


def handle_update_album(inputs, ctx):
    _albums().update_album(inputs.params.id, inputs.body.to_fields(exclude_unset=True))
    return ctx.response.redirect(f"/albums/{inputs.params.id}")


def handle_delete_album(inputs, ctx):
    _albums().soft_delete_album(inputs.params.id, deleted_by_user_id=ctx.user_id or "system")
    return ctx.response.redirect("/albums")


albums_web_controller = (
    controller("/albums")
    .description("Album management pages")
    .middleware(require_auth)
    .endpoints(
        [
            get("/", "albumsListPage")
            .input(query=ListAlbumsQuery)
            .hide_from_openapi()
            .render_view("pages/albums/list", albums_list_page),
            get("/new", "createAlbumPage").hide_from_openapi().render_view("pages/albums/form", create_album_page),
            get("/:id/edit", "editAlbumPage")
            .input(params=AlbumIdParams)
            .hide_from_openapi()
            .render_view("pages/albums/form", edit_album_page),
            get("/:id", "albumDetailPage")
            .input(params=AlbumIdParams)
            .hide_from_openapi()
            .render_view("pages/albums/detail", album_detail_page),
            post("/", "handleCreateAlbum").input(body=CreateAlbum).hide_from_openapi().handler(handle_create_album),
            post("/:id", "handleUpdateAlbum")
            .input(params=AlbumIdParams, body=UpdateAlbum)
            .hide_from_openapi()
            .handler(handle_update_album),
            post("/:id/delete", "handleDeleteAlbum")
            .input(params=AlbumIdParams)
            .hide_from_openapi()
            .handler(handle_delete_album),
        ]
    )
)


__all__ = ["albums_web_controller"]
