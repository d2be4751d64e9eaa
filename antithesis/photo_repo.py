from __future__ import annotations

from .db import get_session
from .models import Photo
from .query_builder import QueryParams, build_query
from .scoped_repo import ScopedRepo


class PhotosRepo(ScopedRepo[Photo]):
    model = Photo

    def find_by_album_id(self, album_id: str, params: QueryParams | None = None) -> list[Photo]:
        db = get_session()
        try:
            stmt = self._base().where(Photo.album_id == album_id)
            return list(db.scalars(build_query(stmt, Photo, params)).all())
        finally:
            db.close()


__all__ = ["PhotosRepo"]
