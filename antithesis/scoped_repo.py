"""Tenant-filtered CRUD shared by the album and photo repositories.

Every statement carries ``tenant_id == scope.tenant_id``; rows of other
tenants are indistinguishable from missing rows.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from sqlalchemy import func, select

from .db import get_session
from .query_builder import QueryParams, apply_filters, build_query
from .tenant_scope import TenantScope

T = TypeVar("T")


class ScopedRepo(Generic[T]):
    model: type[T]

    def __init__(self, scope: TenantScope):
        self.scope = scope

    @property
    def tenant_id(self) -> str:
        return self.scope.tenant_id

    def _base(self):
        return select(self.model).where(self.model.tenant_id == self.tenant_id)

    def find_all(self, params: QueryParams | None = None) -> list[T]:
        db = get_session()
        try:
            return list(db.scalars(build_query(self._base(), self.model, params)).all())
        finally:
            db.close()

    def find_by_id(self, id: str) -> T | None:
        db = get_session()
        try:
            return db.scalars(self._base().where(self.model.id == id)).first()
        finally:
            db.close()

    def create(self, data: dict[str, Any]) -> T:
        db = get_session()
        try:
            row = self.model(**{**data, "tenant_id": self.tenant_id})
            db.add(row)
            db.commit()
            db.refresh(row)
            self.scope.log.debug("Created %s %s", self.model.__tablename__, row.id)
            return row
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def _mutate(self, id: str, changes: dict[str, Any]) -> T | None:
        db = get_session()
        try:
            row = db.scalars(self._base().where(self.model.id == id)).first()
            if row is None:
                return None
            for key, value in changes.items():
                setattr(row, key, value)
            row.updated_at = datetime.now(UTC)
            db.commit()
            db.refresh(row)
            return row
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update(self, id: str, data: dict[str, Any]) -> T | None:
        return self._mutate(id, data)

    def soft_delete(self, id: str, deleted_by_user_id: str) -> T | None:
        return self._mutate(
            id,
            {"is_deleted": True, "deleted_at": datetime.now(UTC), "deleted_by_user_id": deleted_by_user_id},
        )

    def restore(self, id: str) -> T | None:
        return self._mutate(id, {"is_deleted": False, "deleted_at": None, "deleted_by_user_id": None})

    def delete(self, id: str) -> bool:
        db = get_session()
        try:
            row = db.scalars(self._base().where(self.model.id == id)).first()
            if row is None:
                return False
            db.delete(row)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def count(self, params: QueryParams | None = None) -> int:
        db = get_session()
        try:
            stmt = select(func.count(self.model.id)).where(self.model.tenant_id == self.tenant_id)
            # filters only; paging and sorting do not apply to a count
            if params is not None:
                stmt = apply_filters(stmt, self.model, QueryParams(filters=params.filters, search=params.search))
            return int(db.scalar(stmt) or 0)
        finally:
            db.close()


__all__ = ["ScopedRepo"]
