from __future__ import annotations

import re

_SLASHES = re.compile(r"/+")
_COLON_PARAM = re.compile(r":(\w+)")


def join_paths(base_path: str, endpoint_path: str) -> str:
    """Join a controller base path with an endpoint path.

    ``/`` (or an empty base) adds no prefix. The result always has a single
    leading slash, no repeated slashes and no trailing slash except for ``/``.
    """
    if base_path in ("/", ""):
        joined = "/" + endpoint_path
    else:
        joined = "/" + base_path + "/" + endpoint_path
    joined = _SLASHES.sub("/", joined)
    if len(joined) > 1 and joined.endswith("/"):
        joined = joined[:-1]
    return joined


def to_flask_rule(path: str) -> str:
    """``/albums/:id`` -> ``/albums/<id>``"""
    return _COLON_PARAM.sub(r"<\1>", path)


def to_openapi_path(path: str) -> str:
    """``/albums/:id`` -> ``/albums/{id}``"""
    return _COLON_PARAM.sub(r"{\1}", path)


def route_signature(path: str) -> str:
    # Parameter names do not change what a route matches
    return _COLON_PARAM.sub(":", path)


def path_params(path: str) -> list[str]:
    return _COLON_PARAM.findall(path)


def path_to_title(path: str) -> str:
    """``/:id/restore`` -> ``IdRestore`` (operation id fallback)."""
    return "".join(w[:1].upper() + w[1:].lower() for w in re.split(r"[^a-zA-Z0-9]", path))


__all__ = ["join_paths", "to_flask_rule", "to_openapi_path", "route_signature", "path_params", "path_to_title"]
