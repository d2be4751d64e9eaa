from __future__ import annotations

from typing import Any

from sqlalchemy import select

from .db import get_session
from .models import Album, User
from .scoped_repo import ScopedRepo


class AlbumsRepo(ScopedRepo[Album]):
    model = Album

    def find_by_id_with_creator(self, id: str) -> tuple[Album, str | None] | None:
        """Album plus the creator's email (``None`` when the user row is gone)."""
        db = get_session()
        try:
            stmt = (
                select(Album, User.email)
                .outerjoin(User, User.id == Album.created_by_user_id)
                .where(Album.tenant_id == self.tenant_id, Album.id == id)
            )
            row: Any = db.execute(stmt).first()
            if row is None:
                return None
            return row[0], row[1]
        finally:
            db.close()


__all__ = ["AlbumsRepo"]
