from __future__ import annotations

from .albums_service import AlbumsService
from .albums_service import list_params as album_list_params
from .auth_middleware import require_auth
from .http import controller, get
from .photos_service import PhotosService
from .photos_service import list_params as photo_list_params
from .tenant_scope import current_scope

RECENT_ALBUMS = 5


def root_redirect(inputs, ctx):
    return ctx.response.redirect("/dashboard")


def dashboard_page(inputs, ctx):
    scope = current_scope("dashboard")
    albums = AlbumsService(scope)
    album_params = album_list_params(None, default_limit=RECENT_ALBUMS)
    return {
        "title": "Dashboard",
        "stats": {
            "albums": albums.count_albums(album_params),
            "photos": PhotosService(scope).count_photos(photo_list_params(None)),
        },
        "recent_albums": albums.get_all_albums(album_params),
    }


def components_page(inputs, ctx):
    return {"title": "Components Demo"}


dashboard_controller = (
    controller("/")
    .description("Landing pages")
    .endpoints(
        [
            get("/", "rootRedirect").hide_from_openapi().handler(root_redirect),
            get("/dashboard", "getDashboard")
            .description("Tenant overview for the signed-in user")
            .middleware(require_auth)
            .hide_from_openapi()
            .render_view("pages/dashboard", dashboard_page),
            get("/components", "getComponentsDemo")
            .description("UI components demonstration page")
            .hide_from_openapi()
            .render_view("pages/components", components_page),
        ]
    )
)


__all__ = ["dashboard_controller"]
