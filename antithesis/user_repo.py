"""Users and user<->tenant membership (global tables, not tenant scoped)."""

from __future__ import annotations

from typing import Any

from sqlalchemy import delete, select

from .db import get_session
from .errors import ConflictError
from .models import User, UserTenant


class UserRepo:
    def find_by_id(self, id: str) -> User | None:
        db = get_session()
        try:
            return db.get(User, id)
        finally:
            db.close()

    def find_by_email(self, email: str) -> User | None:
        db = get_session()
        try:
            return db.scalars(select(User).where(User.email == email)).first()
        finally:
            db.close()

    def find_by_keycloak_user_id(self, keycloak_user_id: str) -> User | None:
        db = get_session()
        try:
            return db.scalars(select(User).where(User.keycloak_user_id == keycloak_user_id)).first()
        finally:
            db.close()

    def create(self, data: dict[str, Any]) -> User:
        db = get_session()
        try:
            user = User(**data)
            db.add(user)
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update(self, id: str, data: dict[str, Any]) -> User | None:
        db = get_session()
        try:
            user = db.get(User, id)
            if user is None:
                return None
            for key, value in data.items():
                setattr(user, key, value)
            db.commit()
            db.refresh(user)
            return user
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def upsert_by_keycloak_id(self, email: str, keycloak_user_id: str) -> User:
        """Update the user linked to ``keycloak_user_id`` or insert a new one.

        An email already owned by a different identity is a conflict.
        """
        existing = self.find_by_keycloak_user_id(keycloak_user_id)
        if existing is not None:
            updated = self.update(existing.id, {"email": email})
            assert updated is not None
            return updated
        by_email = self.find_by_email(email)
        if by_email is not None:
            raise ConflictError(f"Email {email} already exists for a different identity")
        return self.create({"email": email, "keycloak_user_id": keycloak_user_id})


class UserTenantRepo:
    def find_tenants_for_user(self, user_id: str) -> list[str]:
        db = get_session()
        try:
            stmt = select(UserTenant.tenant_id).where(UserTenant.user_id == user_id).order_by(UserTenant.created_at)
            return list(db.scalars(stmt).all())
        finally:
            db.close()

    def find_users_for_tenant(self, tenant_id: str) -> list[str]:
        db = get_session()
        try:
            return list(db.scalars(select(UserTenant.user_id).where(UserTenant.tenant_id == tenant_id)).all())
        finally:
            db.close()

    def has_access(self, user_id: str, tenant_id: str) -> bool:
        db = get_session()
        try:
            return db.get(UserTenant, (user_id, tenant_id)) is not None
        finally:
            db.close()

    def add_relationship(self, user_id: str, tenant_id: str) -> UserTenant:
        db = get_session()
        try:
            link = UserTenant(user_id=user_id, tenant_id=tenant_id)
            db.add(link)
            db.commit()
            return link
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def remove_relationship(self, user_id: str, tenant_id: str) -> bool:
        db = get_session()
        try:
            result = db.execute(
                delete(UserTenant).where(UserTenant.user_id == user_id, UserTenant.tenant_id == tenant_id)
            )
            db.commit()
            return result.rowcount > 0
        finally:
            db.close()

    def sync_tenants(self, user_id: str, tenant_ids: list[str]) -> None:
        current = self.find_tenants_for_user(user_id)
        for tid in tenant_ids:
            if tid not in current:
                self.add_relationship(user_id, tid)
        for tid in current:
            if tid not in tenant_ids:
                self.remove_relationship(user_id, tid)


__all__ = ["UserRepo", "UserTenantRepo"]
