from __future__ import annotations

from .health import health
from .http import controller, get


async def check_health(inputs, ctx):
    healthy = await health.check_health()
    ctx.response.status = 200 if healthy else 503
    return {"healthy": healthy}


async def check_readiness(inputs, ctx):
    ready = await health.check_readiness()
    ctx.response.status = 200 if ready else 503
    return {"ready": ready}


health_controller = (
    controller("/")
    .description("Health check endpoints for monitoring")
    .tag("Health")
    .endpoints(
        [
            # Liveness: 503 when any health hook fails
            get("/healthz", "checkHealth")
            .description("Liveness probe - checks if application is alive")
            .hide_from_openapi()
            .envelope()
            .handler(check_health),
            # Readiness: health hooks and readiness hooks together
            get("/readyz", "checkReadiness")
            .description("Readiness probe - checks if application can serve traffic")
            .hide_from_openapi()
            .envelope()
            .handler(check_readiness),
        ]
    )
)


__all__ = ["health_controller"]
