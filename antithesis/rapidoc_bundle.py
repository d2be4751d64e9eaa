"""Download the RapiDoc bundle served at ``/rapidoc.js``.

Usage:
  antithesis-fetch-rapidoc [--url URL] [--output PATH]

Without ``--output`` the file lands at ``RAPIDOC_JS_PATH`` (relative paths
resolve against the package directory, same as the endpoint does).
"""

from __future__ import annotations

import argparse
import os
import sys

import requests

from .config import Config
from .logging_setup import get_logger

RAPIDOC_URL = "https://unpkg.com/rapidoc@9/dist/rapidoc-min.js"
PACKAGE_ROOT = os.path.dirname(os.path.abspath(__file__))

log = get_logger("rapidoc")


def bundle_path(configured: str) -> str:
    if os.path.isabs(configured):
        return configured
    return os.path.join(PACKAGE_ROOT, configured)


def fetch_rapidoc(dest: str, url: str = RAPIDOC_URL, timeout: float = 30.0, http=requests) -> str:
    resp = http.get(url, timeout=timeout)
    resp.raise_for_status()
    os.makedirs(os.path.dirname(dest) or ".", exist_ok=True)
    with open(dest, "wb") as fh:
        fh.write(resp.content)
    log.info("RapiDoc bundle saved", meta={"path": dest, "bytes": len(resp.content)})
    return dest


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(description="Fetch the RapiDoc bundle for /api.html")
    p.add_argument("--url", default=RAPIDOC_URL)
    p.add_argument("--output", default=None, help="Target file (default: RAPIDOC_JS_PATH)")
    p.add_argument("--timeout", type=float, default=30.0)
    args = p.parse_args(argv)

    dest = args.output or bundle_path(Config.from_env().rapidoc_js_path)
    try:
        fetch_rapidoc(dest, args.url, args.timeout)
    except requests.RequestException as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    print(dest)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
