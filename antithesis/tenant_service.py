from __future__ import annotations

from typing import Any

from .errors import ConflictError, NotFoundError
from .query_builder import QueryParams
from .tenant_repo import TenantRepo
from .tenant_schemas import ListTenantsQuery, TenantResponse


def list_params(query: ListTenantsQuery | None) -> QueryParams:
    q = query or ListTenantsQuery()
    return QueryParams(
        search={"name": q.search} if q.search else {},
        page=q.page or 1,
        limit=q.limit or 20,
        sort_by=q.sort_by or "createdAt",
        sort_direction=q.sort_direction or "desc",
    )


class TenantService:
    def __init__(self, repo: TenantRepo | None = None):
        self.repo = repo or TenantRepo()

    def get_all_tenants(self, params: QueryParams | None = None) -> list[TenantResponse]:
        return [TenantResponse.model_validate(t) for t in self.repo.find_all(params)]

    def get_tenant_by_id(self, id: str) -> TenantResponse:
        tenant = self.repo.find_by_id(id)
        if tenant is None:
            raise NotFoundError("Tenant not found")
        return TenantResponse.model_validate(tenant)

    def create_tenant(self, data: dict[str, Any]) -> TenantResponse:
        if self.repo.find_by_slug(data["slug"]) is not None:
            raise ConflictError("Tenant with this slug already exists")
        return TenantResponse.model_validate(self.repo.create(data))

    def update_tenant(self, id: str, data: dict[str, Any]) -> TenantResponse:
        existing = self.repo.find_by_id(id)
        if existing is None:
            raise NotFoundError("Tenant not found")
        slug = data.get("slug")
        if slug and slug != existing.slug and self.repo.find_by_slug(slug) is not None:
            raise ConflictError("Tenant with this slug already exists")
        updated = self.repo.update(id, data)
        if updated is None:
            raise NotFoundError("Tenant not found")
        return TenantResponse.model_validate(updated)

    def delete_tenant(self, id: str) -> None:
        if not self.repo.delete(id):
            raise NotFoundError("Tenant not found")


__all__ = ["TenantService", "list_params"]
