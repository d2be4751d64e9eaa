"""API metadata and documentation endpoints (OpenAPI JSON + RapiDoc page)."""

from __future__ import annotations

import os

from flask import current_app, send_file

from .errors import NotFoundError
from .http import controller, get, get_server_context
from .rapidoc_bundle import bundle_path

HTML = """<!doctype html>
<html>
  <head>
    <meta charset="utf-8">
    <title>API Docs</title>
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <script type="module" src="/rapidoc.js"></script>
  </head>
  <body>
    <rapi-doc
      spec-url="/openapi.json"
      render-style="read"
      fill-request-fields-with-example="false"
      persist-auth="true"
      sort-tags="true"
      sort-endpoints-by="method"
      show-method-in-nav-bar="as-colored-block"
      show-header="false"
      allow-authentication="true"
      allow-server-selection="false"
      use-path-in-nav-bar="true"
      schema-style="table"
      schema-expand-level="1"
      default-schema-tab="schema"
      primary-color="#3b82f6"
      bg-color="#151515"
      text-color="#c2c2c2"
      header-color="#353535"
    ></rapi-doc>
  </body>
</html>"""


def get_openapi_spec(inputs, ctx):
    return get_server_context().openapi


def get_rapidoc_script(inputs, ctx):
    path = bundle_path(current_app.config.get("RAPIDOC_JS_PATH") or "")
    if not os.path.isfile(path):
        raise NotFoundError("RapiDoc bundle not found; run antithesis-fetch-rapidoc")
    return send_file(path, mimetype="application/javascript")


def get_openapi_html(inputs, ctx):
    return HTML


meta_controller = (
    controller("/")
    .description("API metadata and documentation endpoints")
    .tag("Meta")
    .endpoints(
        [
            get("/openapi.json", "getOpenAPISpec")
            .description("Get the OpenAPI specification in JSON format")
            .response_content_type("application/json")
            .handler(get_openapi_spec),
            get("/rapidoc.js", "getRapidocScript")
            .description("Serve RapiDoc JavaScript library locally")
            .response_content_type("application/javascript")
            .hide_from_openapi()
            .handler(get_rapidoc_script),
            get("/api.html", "getOpenAPIHtml")
            .description("Interactive API documentation using RapiDoc")
            .response_content_type("text/html")
            .handler(get_openapi_html),
        ]
    )
)


__all__ = ["meta_controller", "HTML"]
