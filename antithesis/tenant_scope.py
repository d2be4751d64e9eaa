"""Explicit tenant scoping for services and repositories."""

from __future__ import annotations

from dataclasses import dataclass

from flask import g, has_request_context

from .errors import BadRequestError
from .logging_setup import AppLogger, get_logger


@dataclass(frozen=True)
class TenantScope:
    tenant_id: str
    log: AppLogger

    @classmethod
    def for_tenant(cls, tenant_id: str | None, namespace: str = "tenant") -> TenantScope:
        if not tenant_id:
            raise BadRequestError("Tenant context required for this operation")
        return cls(tenant_id=tenant_id, log=get_logger(namespace, tenantId=tenant_id))


def current_tenant_id() -> str | None:
    if not has_request_context():
        return None
    return getattr(g, "tenant_id", None)


def current_scope(namespace: str = "tenant") -> TenantScope:
    """Scope for the tenant resolved on this request (``g.tenant_id``)."""
    return TenantScope.for_tenant(current_tenant_id(), namespace)


__all__ = ["TenantScope", "current_scope", "current_tenant_id"]
