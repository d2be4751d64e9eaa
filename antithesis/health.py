"""Health / readiness hook registry.

One process-scoped instance (``health``) backs ``/healthz`` and ``/readyz``.
Components that own a check register it on startup and unregister it on
shutdown; the registry never assumes a stable order between hooks.
"""

from __future__ import annotations

import asyncio
import inspect
import threading
from collections.abc import Awaitable, Callable

from .logging_setup import get_logger

HealthHook = Callable[[], bool | Awaitable[bool]]

log = get_logger("health")


class HealthRegistry:
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._health: dict[str, HealthHook] = {}
        self._readiness: dict[str, HealthHook] = {}

    def register_health_hook(self, name: str, fn: HealthHook) -> None:
        with self._lock:
            self._health[name] = fn

    def unregister_health_hook(self, name: str) -> None:
        with self._lock:
            self._health.pop(name, None)

    def register_readiness_hook(self, name: str, fn: HealthHook) -> None:
        with self._lock:
            self._readiness[name] = fn

    def unregister_readiness_hook(self, name: str) -> None:
        with self._lock:
            self._readiness.pop(name, None)

    def clear(self) -> None:
        with self._lock:
            self._health.clear()
            self._readiness.clear()

    async def _run(self, name: str, fn: HealthHook) -> bool:
        try:
            result = fn()
            if inspect.isawaitable(result):
                result = await result
            return bool(result)
        except Exception as ex:
            # A raising check is a failing check
            log.warning("Health hook %s raised", name, meta={"error": str(ex)})
            return False

    async def _all(self, hooks: dict[str, HealthHook]) -> bool:
        results = await asyncio.gather(*(self._run(n, fn) for n, fn in hooks.items()))
        return all(results)

    async def check_health(self) -> bool:
        with self._lock:
            hooks = dict(self._health)
        return await self._all(hooks)

    async def check_readiness(self) -> bool:
        with self._lock:
            hooks = {**{f"health:{k}": v for k, v in self._health.items()}, **self._readiness}
        return await self._all(hooks)


health = HealthRegistry()

__all__ = ["HealthHook", "HealthRegistry", "health"]
