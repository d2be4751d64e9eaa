from __future__ import annotations

from .auth_middleware import require_api_auth
from .dto import DTO
from .http import controller, delete, get, post, put
from .tenant_schemas import CreateTenant, ListTenantsQuery, TenantIdParams, TenantResponse, UpdateTenant
from .tenant_service import TenantService, list_params


class TenantDeleted(DTO):
    deleted: bool


def list_tenants(inputs, ctx):
    return TenantService().get_all_tenants(list_params(inputs.query))


def get_tenant(inputs, ctx):
    return TenantService().get_tenant_by_id(inputs.params.id)


def create_tenant(inputs, ctx):
    return TenantService().create_tenant(inputs.body.to_fields())


def update_tenant(inputs, ctx):
    return TenantService().update_tenant(inputs.params.id, inputs.body.to_fields(exclude_unset=True))


def delete_tenant(inputs, ctx):
    TenantService().delete_tenant(inputs.params.id)
    return TenantDeleted(deleted=True)


tenants_controller = (
    controller("/api/tenants")
    .description("Tenant management endpoints")
    .tag("Tenants")
    .middleware(require_api_auth)
    .endpoints(
        [
            get("/", "listTenants")
            .description("List all tenants with pagination and filtering")
            .input(query=ListTenantsQuery)
            .response(list[TenantResponse])
            .envelope()
            .handler(list_tenants),
            get("/:id", "getTenant")
            .description("Get a tenant by ID")
            .input(params=TenantIdParams)
            .response(TenantResponse)
            .envelope()
            .handler(get_tenant),
            post("/", "createTenant")
            .description("Create a new tenant")
            .input(body=CreateTenant)
            .response(TenantResponse)
            .envelope()
            .handler(create_tenant),
            put("/:id", "updateTenant")
            .description("Update a tenant")
            .input(params=TenantIdParams, body=UpdateTenant)
            .response(TenantResponse)
            .envelope()
            .handler(update_tenant),
            delete("/:id", "deleteTenant")
            .description("Delete a tenant")
            .input(params=TenantIdParams)
            .response(TenantDeleted)
            .envelope()
            .handler(delete_tenant),
        ]
    )
)


__all__ = ["tenants_controller", "TenantDeleted"]
