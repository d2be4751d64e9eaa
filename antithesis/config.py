from __future__ import annotations

import os
from dataclasses import dataclass, field

LOG_LEVELS = ("error", "warn", "info", "debug", "none")
LOG_FORMATS = ("human", "json")


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _csv(name: str) -> list[str]:
    raw = os.getenv(name, "")
    return [v for v in [c.strip() for c in raw.split(",")] if v]


@dataclass
class Config:
    app_name: str = "antithesis"
    app_env: str = "development"
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "info"
    log_format: str = "human"
    secret_key: str = "change-me"
    database_url: str = "sqlite:///antithesis.db"
    db_pool_size: int = 10
    dto_auto_validate: bool = True
    public_api_url: str = "http://localhost:3000"
    keycloak_url: str = "http://localhost:8080"
    keycloak_realm: str = "antithesis"
    keycloak_client_id: str = "antithesis-app"
    keycloak_client_secret: str = ""
    keycloak_allow_http: bool = True
    cors_allowed_origins: list[str] = field(default_factory=list)
    bypass_allowed_origins: bool = False
    rapidoc_js_path: str = "static/rapidoc-min.js"
    expose_error_details: bool = True
    auto_provision_tenants: bool = True

    @classmethod
    def from_env(cls) -> Config:
        app_env = os.getenv("APP_ENV", "development")
        production = app_env == "production"
        cfg = cls(
            app_name=os.getenv("APP_NAME", "antithesis"),
            app_env=app_env,
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "info"),
            log_format=os.getenv("LOG_FORMAT", "json" if production else "human"),
            secret_key=os.getenv("SECRET_KEY", "change-me"),
            database_url=os.getenv("DATABASE_URL", "sqlite:///antithesis.db"),
            db_pool_size=int(os.getenv("DB_POOL_SIZE", "10")),
            dto_auto_validate=_flag("DTO_AUTO_VALIDATE", "true"),
            public_api_url=os.getenv("PUBLIC_API_URL", "http://localhost:3000"),
            keycloak_url=os.getenv("KEYCLOAK_URL", "http://localhost:8080"),
            keycloak_realm=os.getenv("KEYCLOAK_REALM", "antithesis"),
            keycloak_client_id=os.getenv("KEYCLOAK_CLIENT_ID", "antithesis-app"),
            keycloak_client_secret=os.getenv("KEYCLOAK_CLIENT_SECRET", ""),
            keycloak_allow_http=_flag("KEYCLOAK_ALLOW_HTTP", "false" if production else "true"),
            cors_allowed_origins=_csv("CORS_ALLOW_ORIGINS"),
            bypass_allowed_origins=_flag("CORS_BYPASS_ALLOWED_ORIGINS", "false"),
            rapidoc_js_path=os.getenv("RAPIDOC_JS_PATH", "static/rapidoc-min.js"),
            # Internal error messages never leave the process in production
            expose_error_details=_flag("EXPOSE_ERROR_DETAILS", "false" if production else "true"),
            auto_provision_tenants=_flag("AUTO_PROVISION_TENANTS", "true"),
        )
        cfg.validate()
        return cfg

    def validate(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)} (got {self.log_level!r})")
        if self.log_format not in LOG_FORMATS:
            raise ValueError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)} (got {self.log_format!r})")
        if self.port < 0 or self.port > 65535:
            raise ValueError(f"PORT out of range: {self.port}")

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def oidc_issuer(self) -> str:
        return f"{self.keycloak_url.rstrip('/')}/realms/{self.keycloak_realm}"

    def override(self, d: dict):
        for k, v in d.items():
            if hasattr(self, k):
                setattr(self, k, v)
        self.validate()

    def to_flask_dict(self):
        return {
            "SECRET_KEY": self.secret_key,
            "APP_NAME": self.app_name,
            "APP_ENV": self.app_env,
            "DTO_AUTO_VALIDATE": self.dto_auto_validate,
            "CORS_ALLOWED_ORIGINS": self.cors_allowed_origins,
            "CORS_BYPASS_ALLOWED_ORIGINS": self.bypass_allowed_origins,
            "RAPIDOC_JS_PATH": self.rapidoc_js_path,
            "EXPOSE_ERROR_DETAILS": self.expose_error_details,
            "PUBLIC_API_URL": self.public_api_url,
            "AUTO_PROVISION_TENANTS": self.auto_provision_tenants,
            # Harden session cookie defaults (still allow override in tests)
            "SESSION_COOKIE_HTTPONLY": True,
            "SESSION_COOKIE_SAMESITE": "Lax",
            "SESSION_COOKIE_SECURE": self.is_production,
        }


__all__ = ["Config", "LOG_LEVELS", "LOG_FORMATS"]
