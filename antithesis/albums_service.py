"""Album use cases for the current tenant."""

from __future__ import annotations

from typing import Any

from .album_repo import AlbumsRepo
from .album_schemas import AlbumResponse, AlbumWithCreator, ListAlbumsQuery
from .errors import NotFoundError
from .query_builder import QueryParams
from .tenant_scope import TenantScope


def list_params(query: ListAlbumsQuery | None, *, default_limit: int = 20) -> QueryParams:
    q = query or ListAlbumsQuery()
    filters: dict[str, Any] = {}
    if q.status:
        filters["status"] = q.status
    if not q.include_deleted:
        filters["is_deleted"] = False
    return QueryParams(
        filters=filters,
        search={"name": q.search} if q.search else {},
        page=q.page or 1,
        limit=q.limit or default_limit,
        sort_by=q.sort_by or "createdAt",
        sort_direction=q.sort_direction or "desc",
    )


class AlbumsService:
    def __init__(self, scope: TenantScope, repo: AlbumsRepo | None = None):
        self.scope = scope
        self.repo = repo or AlbumsRepo(scope)

    def get_all_albums(self, params: QueryParams | None = None) -> list[AlbumResponse]:
        return [AlbumResponse.model_validate(a) for a in self.repo.find_all(params)]

    def get_album_by_id(self, id: str) -> AlbumResponse:
        album = self.repo.find_by_id(id)
        if album is None:
            raise NotFoundError("Album not found")
        return AlbumResponse.model_validate(album)

    def get_album_by_id_with_creator(self, id: str) -> AlbumWithCreator:
        found = self.repo.find_by_id_with_creator(id)
        if found is None:
            raise NotFoundError("Album not found")
        album, email = found
        base = AlbumResponse.model_validate(album).model_dump()
        return AlbumWithCreator(**base, creator_email=email)

    def create_album(self, data: dict[str, Any], created_by_user_id: str) -> AlbumResponse:
        album = self.repo.create({**data, "created_by_user_id": created_by_user_id})
        self.scope.log.info("Album created", meta={"albumId": album.id})
        return AlbumResponse.model_validate(album)

    def update_album(self, id: str, data: dict[str, Any]) -> AlbumResponse:
        album = self.repo.update(id, data)
        if album is None:
            raise NotFoundError("Album not found")
        return AlbumResponse.model_validate(album)

    def soft_delete_album(self, id: str, deleted_by_user_id: str) -> AlbumResponse:
        album = self.repo.soft_delete(id, deleted_by_user_id)
        if album is None:
            raise NotFoundError("Album not found")
        self.scope.log.info("Album soft-deleted", meta={"albumId": id})
        return AlbumResponse.model_validate(album)

    def restore_album(self, id: str) -> AlbumResponse:
        album = self.repo.restore(id)
        if album is None:
            raise NotFoundError("Album not found")
        return AlbumResponse.model_validate(album)

    def delete_album(self, id: str) -> None:
        if not self.repo.delete(id):
            raise NotFoundError("Album not found")

    def count_albums(self, params: QueryParams | None = None) -> int:
        return self.repo.count(params)


__all__ = ["AlbumsService", "list_params"]
