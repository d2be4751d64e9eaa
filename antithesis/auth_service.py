"""OIDC (Keycloak) authorization-code flow over ``requests``.

Discovery is lazy and cached per service instance. Claims are read from the
ID token returned by the token endpoint; that response comes straight from
the issuer over the back channel, so no signature check is done here.
"""

from __future__ import annotations

import base64
import json
from typing import Any
from urllib.parse import urlencode

import requests

from .config import Config
from .errors import UnauthorizedError
from .logging_setup import get_logger
from .user_service import UserClaims

log = get_logger("authService")

SCOPE = "openid email profile"


class OIDCError(RuntimeError):
    pass


def _b64url_decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + pad)


def unverified_claims(token: str) -> dict[str, Any]:
    """Payload of a compact JWT without verifying it. Raises ValueError on garbage."""
    parts = token.split(".")
    if len(parts) < 2:
        raise ValueError("not a JWT")
    payload = json.loads(_b64url_decode(parts[1]))
    if not isinstance(payload, dict):
        raise ValueError("JWT payload is not an object")
    return payload


def extract_organizations(userinfo: dict[str, Any] | None) -> list[str]:
    """Organization ids from an identity payload.

    ``organizations`` / ``organization_ids`` are returned verbatim; ``groups``
    entries keep only those starting with ``org-``, with that prefix removed.
    """
    if not userinfo:
        return []
    orgs = userinfo.get("organizations")
    if isinstance(orgs, list):
        return [str(o) for o in orgs]
    org_ids = userinfo.get("organization_ids")
    if isinstance(org_ids, list):
        return [str(o) for o in org_ids]
    groups = userinfo.get("groups")
    if isinstance(groups, list):
        return [g[len("org-"):] for g in groups if isinstance(g, str) and g.startswith("org-")]
    return []


class AuthService:
    def __init__(self, cfg: Config, http: requests.Session | None = None, timeout: float = 10.0):
        self.cfg = cfg
        self.issuer_url = cfg.oidc_issuer
        self.http = http or requests.Session()
        self.timeout = timeout
        self._metadata: dict[str, Any] | None = None

    @property
    def redirect_uri(self) -> str:
        return f"{self.cfg.public_api_url.rstrip('/')}/auth/callback"

    def discover(self) -> dict[str, Any]:
        if self._metadata is not None:
            return self._metadata
        if self.issuer_url.startswith("http://") and not self.cfg.keycloak_allow_http:
            raise OIDCError(f"Refusing plain-HTTP issuer {self.issuer_url}; set KEYCLOAK_ALLOW_HTTP=true for development")
        url = f"{self.issuer_url}/.well-known/openid-configuration"
        try:
            resp = self.http.get(url, timeout=self.timeout)
            resp.raise_for_status()
            self._metadata = resp.json()
        except requests.RequestException as ex:
            raise OIDCError(
                f"Failed to connect to Keycloak at {self.issuer_url}. "
                f"Please verify KEYCLOAK_URL and KEYCLOAK_REALM are configured correctly. Original error: {ex}"
            ) from ex
        return self._metadata

    def generate_auth_url(self, state: str) -> str:
        meta = self.discover()
        query = urlencode(
            {
                "client_id": self.cfg.keycloak_client_id,
                "response_type": "code",
                "scope": SCOPE,
                "redirect_uri": self.redirect_uri,
                "state": state,
            }
        )
        return f"{meta['authorization_endpoint']}?{query}"

    def handle_callback(self, code: str) -> UserClaims:
        """Exchange the authorization code and return the identity claims."""
        meta = self.discover()
        try:
            resp = self.http.post(
                meta["token_endpoint"],
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self.redirect_uri,
                    "client_id": self.cfg.keycloak_client_id,
                    "client_secret": self.cfg.keycloak_client_secret,
                },
                timeout=self.timeout,
            )
            resp.raise_for_status()
            tokens = resp.json()
        except requests.RequestException as ex:
            log.warning("Token exchange failed", meta={"error": str(ex)})
            raise UnauthorizedError("Authentication failed") from ex
        id_token = tokens.get("id_token")
        if not id_token:
            raise UnauthorizedError("Authentication failed", {"reason": "ID token missing"})
        try:
            claims = unverified_claims(id_token)
        except ValueError as ex:
            raise UnauthorizedError("Authentication failed", {"reason": "ID token malformed"}) from ex
        if not claims.get("sub"):
            raise UnauthorizedError("Authentication failed", {"reason": "ID token missing sub claim"})
        if not claims.get("email"):
            raise UnauthorizedError("Authentication failed", {"reason": "ID token missing email claim"})
        return UserClaims(keycloak_user_id=str(claims["sub"]), email=str(claims["email"]))

    def get_logout_url(self, redirect_uri: str) -> str:
        return f"{self.issuer_url}/protocol/openid-connect/logout?{urlencode({'redirect_uri': redirect_uri})}"


__all__ = ["AuthService", "OIDCError", "extract_organizations", "unverified_claims", "SCOPE"]
