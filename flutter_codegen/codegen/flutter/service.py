"""
Dart API client generator.

Renders a CRUD service class for a model, plus one method per non-CRUD
route attached to the descriptor.
"""

import re
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ...logging_config import get_logger
from ..core.naming import to_pascal_case
from ..core.schema import ModelDescriptor, RouteDescriptor
from .base import DartGenerator
from .naming import dart_field_name

logger = get_logger(__name__)

API_PREFIX = "api/"
BODY_VERBS = frozenset({"post", "put", "patch"})
TRANSPORT_VERBS = frozenset({"get", "post", "put", "patch", "delete"})
STANDARD_METHODS = ("getAll", "getById", "create", "update", "delete")

_PLACEHOLDER = re.compile(r"\{(\w+)\??\}")


@dataclass
class ServiceParameter:
    name: str
    dart_type: str

    def __str__(self) -> str:
        return f"{self.dart_type} {self.name}"


@dataclass
class ServiceMethod:
    """One method of the generated client.

    ``kind`` is one of the five standard operations or ``custom``;
    ``returns`` is ``bool``, ``single`` or ``list``.
    """

    name: str
    kind: str
    return_type: str
    returns: str
    doc: str = ""
    parameters: List[ServiceParameter] = field(default_factory=list)
    verb: str = "get"
    path: str = ""
    has_body: bool = False
    body_name: str = "data"

    @property
    def signature(self) -> str:
        return ", ".join(str(p) for p in self.parameters)


@dataclass
class DartServiceSpec:
    """Structure of a generated API client."""

    class_name: str
    model_class: str
    endpoint: str
    imports: List[str] = field(default_factory=list)
    methods: List[ServiceMethod] = field(default_factory=list)
    nullable_suffix: str = "?"
    doc: str = ""

    @property
    def method_names(self) -> List[str]:
        return [method.name for method in self.methods]

    @property
    def custom_methods(self) -> List[ServiceMethod]:
        return [method for method in self.methods if method.kind == "custom"]


class ApiServiceGenerator(DartGenerator):
    """Generates Dart API client classes."""

    output_section = "services"
    file_suffix = "_service"

    @property
    def component_name(self) -> str:
        return "service"

    def build_spec(self, descriptor: ModelDescriptor) -> DartServiceSpec:
        model = self.class_name(descriptor)
        methods = self._standard_methods(model)
        taken = set(STANDARD_METHODS)

        for route in descriptor.custom_routes():
            method = self.build_custom_method(route, model, taken)
            taken.add(method.name)
            methods.append(method)

        return DartServiceSpec(
            class_name=f"{model}Service",
            model_class=model,
            endpoint=self.endpoint(descriptor),
            imports=[
                f"import '{self.api_service_import()}';",
                f"import '{self.model_import(descriptor)}';",
            ],
            methods=methods,
            nullable_suffix="?" if self.null_safety else "",
            doc=self.format_doc_comment(f"Service class for {model}Service"),
        )

    def _standard_methods(self, model: str) -> List[ServiceMethod]:
        doc = self.format_doc_comment
        int_id = [ServiceParameter("id", "int")]
        body = [ServiceParameter("data", "Map<String, dynamic>")]
        return [
            ServiceMethod(
                name="getAll",
                kind="get_all",
                return_type=f"List<{model}>",
                returns="list",
                doc=doc(
                    f"Get all {model} items\n\n"
                    "[page] Optional page number for pagination\n"
                    "[filters] Optional query filters",
                    indent=2,
                ),
            ),
            ServiceMethod(
                name="getById",
                kind="get_by_id",
                return_type=model,
                returns="single",
                doc=doc(f"Get a {model} by ID\n\n[id] The ID of the {model}", indent=2),
                parameters=int_id,
            ),
            ServiceMethod(
                name="create",
                kind="create",
                return_type=model,
                returns="single",
                doc=doc(f"Create a new {model}\n\n[data] The {model} data to create", indent=2),
                parameters=body,
                verb="post",
                has_body=True,
            ),
            ServiceMethod(
                name="update",
                kind="update",
                return_type=model,
                returns="single",
                doc=doc(
                    f"Update a {model}\n\n"
                    f"[id] The ID of the {model} to update\n"
                    f"[data] The updated {model} data",
                    indent=2,
                ),
                parameters=int_id + body,
                verb="put",
                has_body=True,
            ),
            ServiceMethod(
                name="delete",
                kind="delete",
                return_type="bool",
                returns="bool",
                doc=doc(
                    f"Delete a {model} by ID\n\n[id] The ID of the {model} to delete",
                    indent=2,
                ),
                parameters=int_id,
                verb="delete",
            ),
        ]

    def build_custom_method(
        self, route: RouteDescriptor, model: str, taken=frozenset()
    ) -> ServiceMethod:
        """Method for a route outside the five CRUD operations."""
        verb = route.primary_http_method.lower()
        if verb not in TRANSPORT_VERBS:
            logger.warning(f"Unsupported HTTP method {route.primary_http_method} for {route.uri}; using GET")
            verb = "get"

        name = dart_field_name(self.sanitizer, route.endpoint_type.tag)
        if name in taken:
            name = f"{name}{to_pascal_case(verb)}"
        base, counter = name, 2
        while name in taken:
            name = f"{base}{counter}"
            counter += 1

        parameters = [
            ServiceParameter(
                dart_field_name(self.sanitizer, param.name),
                self.type_mapper.parameter_type(param.inferred_type),
            )
            for param in route.path_parameters
        ]
        has_body = verb in BODY_VERBS
        body_name = "data"
        if has_body:
            used = {p.name for p in parameters}
            while body_name in used:
                body_name = "body" if body_name == "data" else f"{body_name}Data"
            parameters.append(ServiceParameter(body_name, "Map<String, dynamic>"))

        if verb == "delete":
            return_type, returns = "bool", "bool"
        elif "{" in route.uri:
            return_type, returns = model, "single"
        else:
            return_type, returns = f"List<{model}>", "list"

        return ServiceMethod(
            name=name,
            kind="custom",
            return_type=return_type,
            returns=returns,
            doc=self.format_doc_comment(
                f"{route.primary_http_method} {route.uri}", indent=2
            ),
            parameters=parameters,
            verb=verb,
            path=self.interpolate_path(route.uri),
            has_body=has_body,
            body_name=body_name,
        )

    def interpolate_path(self, uri: str) -> str:
        """``api/users/{user}/activate`` -> ``users/$user/activate``."""
        path = uri.lstrip("/")
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]

        def replace(match):
            name = dart_field_name(self.sanitizer, match.group(1))
            following = path[match.end():match.end() + 1]
            if following and (following.isalnum() or following == "_"):
                return f"${{{name}}}"
            return f"${name}"

        return _PLACEHOLDER.sub(replace, path)

    def generate(
        self, descriptor: ModelDescriptor, options: Optional[Mapping[str, Any]] = None
    ) -> str:
        """Generate the API client for ``descriptor`` and its attached routes."""
        spec = self.build_spec(descriptor)
        logger.debug(
            f"Generating {spec.class_name} with {len(spec.custom_methods)} custom methods"
        )
        code = self.render_template(self.template_name("service"), {"service": spec})
        return self.format_code(code)
