from __future__ import annotations

from typing import Any

from sqlalchemy import select

from .db import get_session
from .models import Tenant
from .query_builder import QueryParams, build_query


class TenantRepo:
    def find_all(self, params: QueryParams | None = None) -> list[Tenant]:
        db = get_session()
        try:
            return list(db.scalars(build_query(select(Tenant), Tenant, params)).all())
        finally:
            db.close()

    def find_by_id(self, id: str) -> Tenant | None:
        db = get_session()
        try:
            return db.get(Tenant, id)
        finally:
            db.close()

    def find_by_slug(self, slug: str) -> Tenant | None:
        db = get_session()
        try:
            return db.scalars(select(Tenant).where(Tenant.slug == slug)).first()
        finally:
            db.close()

    def create(self, data: dict[str, Any]) -> Tenant:
        db = get_session()
        try:
            tenant = Tenant(**data)
            db.add(tenant)
            db.commit()
            db.refresh(tenant)
            return tenant
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update(self, id: str, data: dict[str, Any]) -> Tenant | None:
        db = get_session()
        try:
            tenant = db.get(Tenant, id)
            if tenant is None:
                return None
            for key, value in data.items():
                setattr(tenant, key, value)
            db.commit()
            db.refresh(tenant)
            return tenant
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete(self, id: str) -> bool:
        db = get_session()
        try:
            tenant = db.get(Tenant, id)
            if tenant is None:
                return False
            db.delete(tenant)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

__all__ = ["TenantRepo"]
