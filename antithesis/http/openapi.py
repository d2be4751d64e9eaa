"""OpenAPI 3.1 document generated from controller descriptors.

Pydantic emits JSON Schema 2020-12, which is what OpenAPI 3.1 embeds, so
component schemas are taken from pydantic as-is; nested ``$defs`` are hoisted
into ``components.schemas``.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, TypeAdapter

from .api_response import api_output
from .controller import ControllerDescriptor
from .endpoint import EndpointDescriptor
from .paths import join_paths, path_params, to_openapi_path

REF_TEMPLATE = "#/components/schemas/{model}"
UNTYPED = "UntypedResponse"

_COMPONENT_NAME = re.compile(r"[^A-Za-z0-9._-]")


def normalize_tag(base_path: str | None) -> str | None:
    """``/albums`` and ``albums/:albumId/photos`` -> ``Albums``; ``/`` stays ``/``."""
    if not base_path:
        return None
    if base_path == "/":
        return "/"
    first = base_path.lstrip("/").split("/")[0]
    return first[:1].upper() + first[1:]


def component_name(model: type) -> str:
    return _COMPONENT_NAME.sub("_", model.__name__)


class OpenAPIDocument:
    def __init__(self, title: str = "API", version: str = "1.0.0", description: str | None = None):
        self.info: dict[str, Any] = {"title": title, "version": version}
        if description:
            self.info["description"] = description
        self._paths: dict[str, dict[str, Any]] = {}
        self._schemas: dict[str, Any] = {UNTYPED: {}}
        self._tags: list[dict[str, str]] = []

    # -- schema helpers ------------------------------------------------------

    def _hoist(self, schema: dict[str, Any]) -> dict[str, Any]:
        for name, definition in schema.pop("$defs", {}).items():
            self._schemas.setdefault(name, definition)
        return schema

    def schema_for(self, schema: Any, mode: str = "validation") -> dict[str, Any]:
        if isinstance(schema, type) and issubclass(schema, BaseModel):
            name = component_name(schema)
            if name not in self._schemas:
                js = schema.model_json_schema(by_alias=True, ref_template=REF_TEMPLATE, mode=mode)
                self._schemas[name] = self._hoist(js)
            return {"$ref": REF_TEMPLATE.format(model=name)}
        js = TypeAdapter(schema).json_schema(by_alias=True, ref_template=REF_TEMPLATE, mode=mode)
        return self._hoist(js)

    def _parameters(self, model: type[BaseModel] | None, location: str) -> list[dict[str, Any]]:
        if model is None:
            return []
        js = self._hoist(model.model_json_schema(by_alias=True, ref_template=REF_TEMPLATE))
        props = js.get("properties", {})
        params = []
        for fname, finfo in model.model_fields.items():
            key = finfo.alias or fname
            prop = dict(props.get(key, {}))
            prop.pop("title", None)
            param: dict[str, Any] = {
                "name": key,
                "in": location,
                "required": True if location == "path" else finfo.is_required(),
                "schema": prop,
            }
            if finfo.description:
                param["description"] = finfo.description
            params.append(param)
        return params

    # -- assembly ------------------------------------------------------------

    def _add_tag(self, name: str, description: str | None) -> None:
        for tag in self._tags:
            if tag["name"] == name:
                # Keep the more detailed description
                if description and len(description) > len(tag.get("description", "")):
                    tag["description"] = description
                return
        entry = {"name": name}
        if description:
            entry["description"] = description
        self._tags.append(entry)

    def _response(self, ep: EndpointDescriptor) -> dict[str, Any]:
        if ep.status == 204:
            return {"description": "No content"}
        if ep.response_content_type.startswith("text/"):
            schema: dict[str, Any] = {"type": "string"}
        elif ep.envelope:
            schema = self.schema_for(api_output(ep.response_schema if ep.response_schema is not None else Any), "serialization")
        elif ep.response_schema is not None:
            schema = self.schema_for(ep.response_schema, "serialization")
        else:
            schema = {"$ref": REF_TEMPLATE.format(model=UNTYPED)}
        return {"description": "Response body", "content": {ep.response_content_type: {"schema": schema}}}

    def add_endpoint(self, ctrl: ControllerDescriptor, ep: EndpointDescriptor, tag: str | None) -> None:
        from .dispatch import operation_name

        full = join_paths(ctrl.base_path, ep.path)
        op: dict[str, Any] = {"operationId": f"{ctrl.base_path}.{operation_name(ep)}"}
        if ep.name:
            op["summary"] = ep.name
        if ep.description:
            op["description"] = ep.description
        if tag:
            op["tags"] = [tag]
        params = self._parameters(ep.params_schema, "path") + self._parameters(ep.query_schema, "query")
        declared = {p["name"] for p in params if p["in"] == "path"}
        for name in path_params(full):
            if name not in declared:
                params.append({"name": name, "in": "path", "required": True, "schema": {"type": "string"}})
        if params:
            op["parameters"] = params
        if ep.body_schema is not None:
            op["requestBody"] = {
                "required": True,
                "content": {"application/json": {"schema": self.schema_for(ep.body_schema)}},
            }
        op["responses"] = {str(ep.status): self._response(ep)}
        op.update(ep.oas_extra)
        self._paths.setdefault(to_openapi_path(full), {})[ep.method.lower()] = op

    def add_controller(self, ctrl: ControllerDescriptor) -> None:
        tag = ctrl.tag or normalize_tag(ctrl.base_path)
        visible = [ep for ep in ctrl.endpoints if not ep.hidden]
        for ep in visible:
            self.add_endpoint(ctrl, ep, tag)
        if tag and visible:
            self._add_tag(tag, ctrl.description)

    def to_dict(self) -> dict[str, Any]:
        return {
            "openapi": "3.1.0",
            "info": dict(self.info),
            "servers": [{"url": "/"}],
            "tags": [dict(t) for t in self._tags],
            "paths": {p: dict(ops) for p, ops in self._paths.items()},
            "components": {"schemas": dict(self._schemas)},
        }


def build_openapi(controllers: list[ControllerDescriptor], **info: Any) -> dict[str, Any]:
    doc = OpenAPIDocument(**info)
    for ctrl in controllers:
        doc.add_controller(ctrl)
    return doc.to_dict()


__all__ = ["OpenAPIDocument", "build_openapi", "component_name", "normalize_tag"]
