"""Photo use cases; every write checks the parent album belongs to the tenant."""

from __future__ import annotations

from typing import Any

from .album_repo import AlbumsRepo
from .errors import NotFoundError
from .photo_repo import PhotosRepo
from .photo_schemas import ListPhotosQuery, PhotoResponse
from .query_builder import QueryParams
from .tenant_scope import TenantScope


def list_params(query: ListPhotosQuery | None, *, default_limit: int = 50) -> QueryParams:
    q = query or ListPhotosQuery()
    filters: dict[str, Any] = {}
    if q.status:
        filters["status"] = q.status
    if q.album_id:
        filters["album_id"] = q.album_id
    if not q.include_deleted:
        filters["is_deleted"] = False
    return QueryParams(
        filters=filters,
        search={"title": q.search} if q.search else {},
        page=q.page or 1,
        limit=q.limit or default_limit,
        sort_by=q.sort_by or "createdAt",
        sort_direction=q.sort_direction or "desc",
    )


class PhotosService:
    def __init__(self, scope: TenantScope, repo: PhotosRepo | None = None, albums: AlbumsRepo | None = None):
        self.scope = scope
        self.repo = repo or PhotosRepo(scope)
        self.albums = albums or AlbumsRepo(scope)

    def _verify_album_ownership(self, album_id: str) -> None:
        if self.albums.find_by_id(album_id) is None:
            raise NotFoundError("Album not found")

    def get_all_photos(self, params: QueryParams | None = None) -> list[PhotoResponse]:
        return [PhotoResponse.model_validate(p) for p in self.repo.find_all(params)]

    def get_photos_by_album_id(self, album_id: str, params: QueryParams | None = None) -> list[PhotoResponse]:
        self._verify_album_ownership(album_id)
        return [PhotoResponse.model_validate(p) for p in self.repo.find_by_album_id(album_id, params)]

    def get_photo_by_id(self, id: str) -> PhotoResponse:
        photo = self.repo.find_by_id(id)
        if photo is None:
            raise NotFoundError("Photo not found")
        return PhotoResponse.model_validate(photo)

    def create_photo(self, data: dict[str, Any], created_by_user_id: str) -> PhotoResponse:
        self._verify_album_ownership(data["album_id"])
        photo = self.repo.create({**data, "created_by_user_id": created_by_user_id})
        self.scope.log.info("Photo created", meta={"photoId": photo.id, "albumId": photo.album_id})
        return PhotoResponse.model_validate(photo)

    def update_photo(self, id: str, data: dict[str, Any]) -> PhotoResponse:
        photo = self.repo.update(id, data)
        if photo is None:
            raise NotFoundError("Photo not found")
        return PhotoResponse.model_validate(photo)

    def soft_delete_photo(self, id: str, deleted_by_user_id: str) -> PhotoResponse:
        photo = self.repo.soft_delete(id, deleted_by_user_id)
        if photo is None:
            raise NotFoundError("Photo not found")
        return PhotoResponse.model_validate(photo)

    def restore_photo(self, id: str) -> PhotoResponse:
        photo = self.repo.restore(id)
        if photo is None:
            raise NotFoundError("Photo not found")
        return PhotoResponse.model_validate(photo)

    def delete_photo(self, id: str) -> None:
        if not self.repo.delete(id):
            raise NotFoundError("Photo not found")

    def count_photos(self, params: QueryParams | None = None) -> int:
        return self.repo.count(params)


__all__ = ["PhotosService", "list_params"]
