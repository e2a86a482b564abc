"""Route analysis: backend route table -> RouteDescriptor list.

Routes are grouped by resource name so the service generator can pick up
the non-CRUD endpoints belonging to a model.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from ..codegen.core.naming import singularize, to_snake_case
from ..codegen.core.schema import (
    EndpointKind,
    EndpointType,
    ParameterType,
    PathParameter,
    RouteAnalysis,
    RouteDescriptor,
)
from ..hosts.interface import HostRoute, Router
from ..logging_config import get_logger
from .base import Analyzer, AnalyzerError

logger = get_logger(__name__)

API_PREFIX = "api/"
ACTION_SEPARATOR = "@"
AUTH_MIDDLEWARE = frozenset({"auth", "auth:api", "auth:sanctum", "jwt.auth"})
IGNORED_METHODS = ("HEAD", "OPTIONS")

_PLACEHOLDER = re.compile(r"\{(\w+)(\?)?\}")
_STANDARD_ACTIONS = frozenset(kind.value for kind in EndpointKind) | {"create", "edit"}


class RouteAnalyzer(Analyzer):
    """Builds ``RouteDescriptor``s and groups them by resource."""

    def __init__(self, router: Router | None = None) -> None:
        """
        Args:
            router: Route table used when ``analyze`` is called without a
                source.
        """
        self.router = router

    def can_analyze(self, subject: Any) -> bool:
        return (
            subject is None
            or self._is_router(subject)
            or self._is_route(subject)
            or (isinstance(subject, Iterable) and not isinstance(subject, (str, bytes)))
        )

    def analyze(self, subject: Any = None) -> RouteAnalysis:
        """
        Analyze a router, a sequence of routes, a single route, or (with no
        argument) every ``api/`` route of the configured router.
        """
        if subject is None:
            return self.analyze_api_routes()
        if self._is_router(subject):
            return self.analyze_routes(subject.get_routes())
        if self._is_route(subject):
            return self.analyze_routes([subject])
        if isinstance(subject, Iterable) and not isinstance(subject, (str, bytes)):
            return self.analyze_routes(subject)
        raise AnalyzerError(f"Cannot analyze routes from {type(subject).__name__}")

    def analyze_api_routes(self) -> RouteAnalysis:
        if self.router is None:
            raise AnalyzerError("No route table configured")
        routes = [
            route
            for route in self.router.get_routes()
            if self._normalize_uri(route.uri()).startswith(API_PREFIX)
        ]
        return self.analyze_routes(routes)

    def analyze_routes(self, routes: Iterable[HostRoute]) -> RouteAnalysis:
        analysis = RouteAnalysis()
        for route in routes:
            descriptor = self.analyze_route(route)
            analysis.routes.append(descriptor)
            if descriptor.resource_name:
                analysis.grouped_routes.setdefault(descriptor.resource_name, []).append(
                    descriptor
                )

        logger.debug(
            f"Analyzed {len(analysis.routes)} routes into "
            f"{len(analysis.grouped_routes)} resources"
        )
        return analysis

    def analyze_route(self, route: HostRoute) -> RouteDescriptor:
        uri = self._normalize_uri(route.uri())
        methods = tuple(method.upper() for method in route.methods())
        controller = (route.action() or {}).get("controller")
        action_name = self.extract_action_name(controller)
        middleware = frozenset(route.middleware() or ())
        name = route.name()
        resource = self.extract_resource_name(uri, name)
        primary = self.get_primary_http_method(methods)

        return RouteDescriptor(
            uri=uri,
            http_methods=methods,
            primary_http_method=primary,
            endpoint_type=self.determine_endpoint_type(uri, primary, action_name),
            name=name,
            controller_action=controller,
            action_name=action_name,
            path_parameters=self.extract_parameters(route, uri, resource),
            middleware=middleware,
            resource_name=resource,
            is_api_route=uri.startswith(API_PREFIX),
            requires_auth=bool(middleware & AUTH_MIDDLEWARE),
        )

    @staticmethod
    def extract_resource_name(uri: str, name: str | None = None) -> str | None:
        """``users.show`` -> ``users``; else first non-``api`` URI segment."""
        if name and "." in name:
            return name.split(".", 1)[0]

        segments = [segment for segment in uri.strip("/").split("/") if segment]
        if segments and segments[0] == "api":
            segments = segments[1:]
        return segments[0] if segments else None

    @staticmethod
    def extract_action_name(controller: str | None) -> str | None:
        if not controller or ACTION_SEPARATOR not in controller:
            return None
        return controller.split(ACTION_SEPARATOR, 1)[1] or None

    def extract_parameters(
        self, route: HostRoute, uri: str, resource: str | None
    ) -> tuple[PathParameter, ...]:
        optional = {match.group(1) for match in _PLACEHOLDER.finditer(uri) if match.group(2)}
        names = list(route.parameter_names() or ())
        if not names:
            names = [match.group(1) for match in _PLACEHOLDER.finditer(uri)]

        return tuple(
            PathParameter(
                name=param,
                required=param not in optional,
                inferred_type=self.guess_parameter_type(param, resource),
            )
            for param in names
        )

    @staticmethod
    def guess_parameter_type(parameter: str, resource: str | None = None) -> ParameterType:
        """
        ``id`` and ``*_id`` are integers, as is a parameter bound to the
        route's own model (``{user}`` on ``users``); ``uuid``/``guid`` and
        everything else are strings.
        """
        if parameter == "id" or parameter.endswith("_id"):
            return ParameterType.INT
        if "uuid" in parameter or "guid" in parameter:
            return ParameterType.STRING
        if resource and parameter == singularize(to_snake_case(resource)):
            return ParameterType.INT
        return ParameterType.STRING

    @staticmethod
    def get_primary_http_method(methods: tuple[str, ...]) -> str:
        filtered = [method for method in methods if method not in IGNORED_METHODS]
        if filtered:
            return filtered[0]
        return methods[0] if methods else "GET"

    @staticmethod
    def determine_endpoint_type(
        uri: str, method: str, action_name: str | None = None
    ) -> EndpointType:
        segments = [segment for segment in uri.strip("/").split("/") if segment]

        # Member action: a literal segment following a path parameter.
        if len(segments) >= 2 and "{" not in segments[-1] and "{" in segments[-2]:
            if action_name and action_name not in _STANDARD_ACTIONS:
                return EndpointType.other(action_name)
            return EndpointType.other(segments[-1])

        has_parameter = "{" in uri
        if method == "GET" and not has_parameter:
            return EndpointType.standard(EndpointKind.INDEX)
        if method == "GET":
            return EndpointType.standard(EndpointKind.SHOW)
        if method == "POST":
            return EndpointType.standard(EndpointKind.STORE)
        if method in ("PUT", "PATCH"):
            return EndpointType.standard(EndpointKind.UPDATE)
        if method == "DELETE":
            return EndpointType.standard(EndpointKind.DESTROY)
        return EndpointType.other(action_name or method.lower())

    @staticmethod
    def _normalize_uri(uri: str) -> str:
        return uri.lstrip("/")

    @staticmethod
    def _is_router(subject: Any) -> bool:
        return callable(getattr(subject, "get_routes", None))

    @staticmethod
    def _is_route(subject: Any) -> bool:
        return callable(getattr(subject, "uri", None)) and callable(
            getattr(subject, "methods", None)
        )
