"""
Intermediate representation shared by analyzers and generators.

Analyzers turn host reflection data into these value objects; generators
only ever read them. All descriptors are immutable and compare
structurally.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .naming import pluralize, to_kebab_case, to_snake_case


class TargetType(Enum):
    """Client-side scalar families an attribute can map to."""

    INT = "int"
    DOUBLE = "double"
    BOOL = "bool"
    DATETIME = "datetime"
    JSON = "json"
    STRING = "string"


# Keys are lowercase; lookups normalize the host type first.
SOURCE_TYPE_MAP: Dict[str, TargetType] = {
    "integer": TargetType.INT,
    "bigint": TargetType.INT,
    "smallint": TargetType.INT,
    "tinyint": TargetType.INT,
    "decimal": TargetType.DOUBLE,
    "float": TargetType.DOUBLE,
    "double": TargetType.DOUBLE,
    "real": TargetType.DOUBLE,
    "boolean": TargetType.BOOL,
    "date": TargetType.DATETIME,
    "datetime": TargetType.DATETIME,
    "timestamp": TargetType.DATETIME,
    "json": TargetType.JSON,
    "jsonb": TargetType.JSON,
}


def map_source_type(source_type: Optional[str]) -> TargetType:
    """
    Map a raw host column type to its target type family.

    Matching is case-insensitive and ignores any length/precision suffix,
    so ``VARCHAR(255)`` and ``DECIMAL(8, 2)`` resolve like their bare names.
    Unknown types fall back to ``TargetType.STRING``.
    """
    if not source_type:
        return TargetType.STRING
    normalized = str(source_type).strip().lower().split("(", 1)[0].strip()
    return SOURCE_TYPE_MAP.get(normalized, TargetType.STRING)


@dataclass(frozen=True)
class AttributeDescriptor:
    """A single column of a model's table."""

    name: str
    target_type: TargetType
    source_type: str
    nullable: bool = False
    default_value: Any = None


@dataclass(frozen=True)
class RelationshipDescriptor:
    """A relation declared on a model (``posts`` -> HasMany Post)."""

    accessor_name: str
    relation_kind: str
    related_type_name: str
    foreign_key: Optional[str] = None
    local_key: Optional[str] = None

    @property
    def related_class_name(self) -> str:
        """Unqualified name of the related model."""
        name = self.related_type_name
        for separator in ("\\", ":", "."):
            name = name.rsplit(separator, 1)[-1]
        return name


class ParameterType(Enum):
    """Inferred type of a route path parameter."""

    INT = "int"
    STRING = "string"


@dataclass(frozen=True)
class PathParameter:
    """A ``{placeholder}`` inside a route URI."""

    name: str
    required: bool = True
    inferred_type: ParameterType = ParameterType.STRING


class EndpointKind(Enum):
    """Standard REST endpoint shapes plus a catch-all."""

    INDEX = "index"
    SHOW = "show"
    STORE = "store"
    UPDATE = "update"
    DESTROY = "destroy"
    OTHER = "other"


STANDARD_ENDPOINT_KINDS = frozenset(
    {
        EndpointKind.INDEX,
        EndpointKind.SHOW,
        EndpointKind.STORE,
        EndpointKind.UPDATE,
        EndpointKind.DESTROY,
    }
)


@dataclass(frozen=True)
class EndpointType:
    """Tagged endpoint type; ``tag`` carries the action name for OTHER."""

    kind: EndpointKind
    tag: str

    @classmethod
    def standard(cls, kind: EndpointKind) -> "EndpointType":
        return cls(kind=kind, tag=kind.value)

    @classmethod
    def other(cls, tag: str) -> "EndpointType":
        return cls(kind=EndpointKind.OTHER, tag=tag)

    @property
    def is_standard(self) -> bool:
        return self.kind in STANDARD_ENDPOINT_KINDS

    def __str__(self) -> str:
        if self.kind == EndpointKind.OTHER:
            return f"other({self.tag})"
        return self.tag


@dataclass(frozen=True)
class RouteDescriptor:
    """Normalized view of one host route."""

    uri: str
    http_methods: Tuple[str, ...]
    primary_http_method: str
    endpoint_type: EndpointType
    name: Optional[str] = None
    controller_action: Optional[str] = None
    action_name: Optional[str] = None
    path_parameters: Tuple[PathParameter, ...] = ()
    middleware: FrozenSet[str] = frozenset()
    resource_name: Optional[str] = None
    is_api_route: bool = False
    requires_auth: bool = False

    @property
    def has_path_parameters(self) -> bool:
        return bool(self.path_parameters)


@dataclass(frozen=True)
class ModelDescriptor:
    """Everything the generators need to know about one model."""

    class_name: str
    fully_qualified_name: str
    table_name: str
    primary_key: str = "id"
    attributes: Dict[str, AttributeDescriptor] = field(default_factory=dict)
    relationships: Dict[str, RelationshipDescriptor] = field(default_factory=dict)
    validation_rules: Dict[str, str] = field(default_factory=dict)
    fillable: FrozenSet[str] = frozenset()
    guarded: FrozenSet[str] = frozenset()
    hidden: FrozenSet[str] = frozenset()
    casts: Dict[str, str] = field(default_factory=dict)
    date_attributes: FrozenSet[str] = frozenset()
    has_timestamps: bool = False
    has_soft_delete: bool = False
    routes: Tuple[RouteDescriptor, ...] = ()

    def with_routes(self, routes) -> "ModelDescriptor":
        """Return a copy carrying ``routes`` for the API client generator."""
        return replace(self, routes=tuple(routes))

    def custom_routes(self) -> List[RouteDescriptor]:
        """Routes that do not map onto one of the five CRUD operations."""
        return [route for route in self.routes if not route.endpoint_type.is_standard]


@dataclass
class RouteAnalysis:
    """Result of a route analysis run."""

    routes: List[RouteDescriptor] = field(default_factory=list)
    grouped_routes: Dict[str, List[RouteDescriptor]] = field(default_factory=dict)

    @property
    def resources(self) -> List[str]:
        """Resource names in first-seen order."""
        return list(self.grouped_routes.keys())

    def routes_for_model(self, model_name: str) -> List[RouteDescriptor]:
        """
        Find the route group belonging to a model.

        ``User`` matches a resource named ``user``, ``users``, or the
        kebab/snake forms of multi-word names (``blog-posts``).
        """
        snake = to_snake_case(model_name)
        candidates = {
            model_name.lower(),
            snake,
            pluralize(snake),
            to_kebab_case(model_name),
            pluralize(to_kebab_case(model_name)),
        }
        for resource, routes in self.grouped_routes.items():
            if resource.lower() in candidates:
                return list(routes)
        return []
