from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from .dto import DTO, UuidStr

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"


class CreateTenant(DTO):
    name: str = Field(min_length=1)
    slug: str = Field(min_length=1, pattern=SLUG_PATTERN)
    external_reference_id: str | None = None


class UpdateTenant(DTO):
    name: str = Field(default=None, min_length=1)
    slug: str = Field(default=None, min_length=1, pattern=SLUG_PATTERN)
    external_reference_id: str | None = None


class ListTenantsQuery(DTO):
    page: int | None = Field(default=None, gt=0)
    limit: int | None = Field(default=None, gt=0, le=100)
    sort_by: Literal["name", "slug", "createdAt", "updatedAt"] | None = None
    sort_direction: Literal["asc", "desc"] | None = None
    search: str | None = None


class TenantIdParams(DTO):
    id: UuidStr = Field(description="Tenant ID")


class TenantResponse(DTO):
    id: str
    name: str
    slug: str
    external_reference_id: str | None
    created_at: datetime
    updated_at: datetime


class SwitchTenant(DTO):
    tenant_id: UuidStr


class CurrentTenant(DTO):
    current_tenant_id: str


__all__ = [
    "CreateTenant",
    "UpdateTenant",
    "ListTenantsQuery",
    "TenantIdParams",
    "TenantResponse",
    "SwitchTenant",
    "CurrentTenant",
    "SLUG_PATTERN",
]
