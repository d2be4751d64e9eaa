from __future__ import annotations

import time
from dataclasses import dataclass

from .logging_setup import get_logger
from .models import User
from .tenant_repo import TenantRepo
from .user_repo import UserRepo, UserTenantRepo

log = get_logger("userService")


@dataclass(frozen=True)
class UserClaims:
    keycloak_user_id: str  # sub
    email: str


class UserService:
    def __init__(
        self,
        users: UserRepo | None = None,
        memberships: UserTenantRepo | None = None,
        tenants: TenantRepo | None = None,
    ):
        self.users = users or UserRepo()
        self.memberships = memberships or UserTenantRepo()
        self.tenants = tenants or TenantRepo()

    def sync_user_from_identity(self, claims: UserClaims) -> User:
        return self.users.upsert_by_keycloak_id(email=claims.email, keycloak_user_id=claims.keycloak_user_id)

    def determine_current_tenant(self, user_id: str) -> str | None:
        """Last used tenant when still accessible, else the first membership."""
        user = self.users.find_by_id(user_id)
        if user is None:
            raise LookupError(f"User not found: {user_id}")
        tenant_ids = self.memberships.find_tenants_for_user(user_id)
        if not tenant_ids:
            return None
        if user.last_tenant_id and user.last_tenant_id in tenant_ids:
            return user.last_tenant_id
        return tenant_ids[0]

    def update_last_tenant(self, user_id: str, tenant_id: str) -> None:
        self.users.update(user_id, {"last_tenant_id": tenant_id})

    def provision_personal_tenant(self, user: User) -> str:
        """Create ``"<email>'s Organization"`` for a user without memberships."""
        local = user.email.split("@")[0].lower()
        slug = f"{''.join(c if c.isalnum() else '-' for c in local).strip('-') or 'user'}-{int(time.time() * 1000)}"
        tenant = self.tenants.create({"name": f"{user.email}'s Organization", "slug": slug})
        self.memberships.add_relationship(user.id, tenant.id)
        self.update_last_tenant(user.id, tenant.id)
        log.info("Provisioned personal tenant", meta={"userId": user.id, "tenantId": tenant.id})
        return tenant.id


__all__ = ["UserClaims", "UserService"]
