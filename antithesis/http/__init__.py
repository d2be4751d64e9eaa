"""Declarative controller/endpoint layer over Flask."""

from .api_response import api_output, api_response, server_time
from .controller import ControllerBuilder, ControllerDescriptor, controller
from .dispatch import Inputs, RequestContext, ResponseWriter, build_controllers, register_controllers
from .endpoint import EndpointBuilder, EndpointDescriptor, delete, endpoint, get, patch, post, put
from .middleware import Middleware, MiddlewareType, after, before, middleware
from .openapi import OpenAPIDocument, build_openapi, normalize_tag
from .paths import join_paths
from .server import HTTPServer, ServerContext, get_server_context, install_server_context

__all__ = [
    "ControllerBuilder",
    "ControllerDescriptor",
    "EndpointBuilder",
    "EndpointDescriptor",
    "HTTPServer",
    "Inputs",
    "Middleware",
    "MiddlewareType",
    "OpenAPIDocument",
    "RequestContext",
    "ResponseWriter",
    "ServerContext",
    "after",
    "api_output",
    "api_response",
    "before",
    "build_controllers",
    "build_openapi",
    "controller",
    "delete",
    "endpoint",
    "get",
    "get_server_context",
    "install_server_context",
    "join_paths",
    "middleware",
    "normalize_tag",
    "patch",
    "post",
    "put",
    "register_controllers",
    "server_time",
]
