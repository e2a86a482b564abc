"""Model analysis: backend model + schema reflection -> ModelDescriptor.

Attributes come from the schema reflector, in column order. Relationships
come from the model's declared registry; the older behaviour of invoking
accessors to see what they return is available behind
``model_analysis.probe_accessors``.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Callable

from ..codegen.core.config import FlutterConfig
from ..codegen.core.schema import (
    AttributeDescriptor,
    ModelDescriptor,
    RelationshipDescriptor,
    map_source_type,
)
from ..hosts.interface import SchemaReflector
from ..logging_config import get_logger
from ..utils import import_object
from .base import (
    Analyzer,
    AnalyzerError,
    SchemaUnavailableError,
    UnresolvableModelError,
)

logger = get_logger(__name__)

# Methods of the host model protocol; never treated as relationship accessors.
_MODEL_API = frozenset(
    {
        "get_table",
        "get_key_name",
        "get_fillable",
        "get_guarded",
        "get_hidden",
        "get_casts",
        "get_date_attributes",
        "has_soft_delete",
        "uses_timestamps",
        "get_model_name",
        "declared_relationships",
        "rules",
    }
)


def _basename(qualified_name: str) -> str:
    name = qualified_name
    for separator in ("\\", ":", "."):
        name = name.rsplit(separator, 1)[-1]
    return name


def _qualified_name(obj: Any) -> str:
    if isinstance(obj, str):
        return obj
    cls = obj if inspect.isclass(obj) else type(obj)
    return f"{cls.__module__}.{cls.__qualname__}"


def import_model(reference: str) -> Any:
    """Default resolver: import ``package.module:Class`` or a dotted path."""
    try:
        return import_object(reference)
    except (ImportError, AttributeError, ValueError) as e:
        raise UnresolvableModelError(f"Cannot resolve model '{reference}': {e}") from e


class ModelAnalyzer(Analyzer):
    """Builds a ``ModelDescriptor`` from a model reference."""

    def __init__(
        self,
        schema: SchemaReflector | None,
        config: FlutterConfig | None = None,
        resolver: Callable[[str], Any] | None = None,
    ) -> None:
        """
        Args:
            schema: Schema reflector for the model tables. ``None`` means the
                backend is unreachable; analysis then fails with
                ``SchemaUnavailableError``.
            config: Generator configuration (``model_analysis`` section is used).
            resolver: Maps a string reference to a model class or instance.
        """
        self.schema = schema
        self.config = config or FlutterConfig()
        self.resolver = resolver or import_model

    @property
    def options(self):
        return self.config.model_analysis

    def can_analyze(self, subject: Any) -> bool:
        if isinstance(subject, str):
            try:
                self.resolve(subject)
            except UnresolvableModelError:
                return False
            return True
        return callable(getattr(subject, "get_table", None))

    def analyze(self, subject: Any) -> ModelDescriptor:
        return self.analyze_model(subject)

    def analyze_model(self, model_ref: Any) -> ModelDescriptor:
        """
        Analyze a model given as a reference string, class or instance.

        Raises:
            UnresolvableModelError: ``model_ref`` is not an analyzable model.
            SchemaUnavailableError: No schema connection is available.
        """
        model = self.resolve(model_ref)
        qualified = self._model_name(model)
        table = model.get_table()
        logger.debug(f"Analyzing model {qualified} (table {table})")

        descriptor = ModelDescriptor(
            class_name=_basename(qualified),
            fully_qualified_name=qualified,
            table_name=table,
            primary_key=model.get_key_name() or "id",
            attributes=self.get_model_attributes(model),
            relationships=self.get_model_relationships(model),
            validation_rules=self.get_validation_rules(model),
            fillable=frozenset(model.get_fillable() or ()),
            guarded=frozenset(self._optional_call(model, "get_guarded", ()) or ()),
            hidden=frozenset(model.get_hidden() or ()),
            casts=dict(model.get_casts() or {}),
            date_attributes=frozenset(model.get_date_attributes() or ()),
            has_timestamps=bool(self._timestamps(model)),
            has_soft_delete=bool(model.has_soft_delete()),
        )

        logger.info(
            f"Analyzed {descriptor.class_name}: {len(descriptor.attributes)} attributes, "
            f"{len(descriptor.relationships)} relationships"
        )
        return descriptor

    def resolve(self, model_ref: Any) -> Any:
        """Return a model instance for a reference, class or instance."""
        target = model_ref
        if isinstance(model_ref, str):
            target = self.resolver(model_ref)
            if target is None:
                raise UnresolvableModelError(f"Cannot resolve model '{model_ref}'")

        if inspect.isclass(target):
            if inspect.isabstract(target):
                raise UnresolvableModelError(
                    f"Model '{_qualified_name(target)}' is abstract"
                )
            try:
                target = target()
            except TypeError as e:
                raise UnresolvableModelError(
                    f"Model '{_qualified_name(target)}' needs a zero-argument "
                    f"constructor: {e}"
                ) from e

        if not callable(getattr(target, "get_table", None)):
            raise UnresolvableModelError(f"'{_qualified_name(target)}' is not a model")
        return target

    # Attributes

    def get_model_attributes(self, model: Any) -> dict[str, AttributeDescriptor]:
        """Columns of the model table in schema order."""
        if self.schema is None:
            raise SchemaUnavailableError("No schema connection is configured")

        table = model.get_table()
        if not self.schema.has_table(table):
            message = f"Table '{table}' does not exist"
            if self.options.strict:
                raise SchemaUnavailableError(message)
            logger.warning(f"{message}; generating {self._model_name(model)} without attributes")
            return {}

        attributes = {}
        for column in self.schema.list_columns(table):
            source_type = self.schema.column_type(table, column)
            attributes[column] = AttributeDescriptor(
                name=column,
                target_type=map_source_type(source_type),
                source_type=source_type,
                nullable=bool(self.schema.column_nullable(table, column)),
                default_value=self.schema.column_default(table, column),
            )
        return attributes

    # Relationships

    def get_model_relationships(self, model: Any) -> dict[str, RelationshipDescriptor]:
        if not self.options.include_relationships:
            return {}

        declared = self._declared_relationships(model)
        if declared is not None:
            return declared

        if self.options.probe_accessors:
            return self._probe_relationships(model)
        return {}

    def _declared_relationships(self, model: Any) -> dict[str, RelationshipDescriptor] | None:
        registry = None
        if callable(getattr(model, "declared_relationships", None)):
            registry = model.declared_relationships()
        elif hasattr(type(model), "__relationships__"):
            registry = type(model).__relationships__
        if registry is None:
            return None
        if not isinstance(registry, Mapping):
            raise AnalyzerError(
                f"Relationships of {self._model_name(model)} must be a mapping, "
                f"got {type(registry).__name__}"
            )

        relationships = {}
        for accessor, spec in registry.items():
            if isinstance(spec, RelationshipDescriptor):
                relationships[accessor] = spec
                continue
            if not isinstance(spec, Mapping):
                raise AnalyzerError(
                    f"Relationship '{accessor}' of {self._model_name(model)} must be an object, "
                    f"got {type(spec).__name__}"
                )
            related = spec.get("related") or spec.get("related_model")
            if not related:
                logger.warning(f"Relationship '{accessor}' declares no related model; skipped")
                continue
            relationships[accessor] = RelationshipDescriptor(
                accessor_name=accessor,
                relation_kind=spec.get("kind") or spec.get("type") or "Relation",
                related_type_name=_qualified_name(related),
                foreign_key=spec.get("foreign_key"),
                local_key=spec.get("local_key"),
            )
        return relationships

    def _probe_relationships(self, model: Any) -> dict[str, RelationshipDescriptor]:
        """Invoke zero-argument public methods declared on the model class."""
        relationships = {}
        for name, member in vars(type(model)).items():
            if name.startswith("_") or name in _MODEL_API:
                continue
            if not inspect.isfunction(member):
                continue
            if len(inspect.signature(member).parameters) != 1:
                continue

            try:
                result = getattr(model, name)()
            except Exception as e:
                log = logger.warning if self.options.strict else logger.debug
                log(f"Skipping accessor {type(model).__name__}.{name}: {e}")
                continue

            if not callable(getattr(result, "get_related", None)):
                continue

            relationships[name] = RelationshipDescriptor(
                accessor_name=name,
                relation_kind=getattr(result, "relation_kind", None) or type(result).__name__,
                related_type_name=_qualified_name(result.get_related()),
                foreign_key=self._first_call(result, "get_foreign_key_name", "get_foreign_key"),
                local_key=self._first_call(result, "get_local_key_name", "get_owner_key_name"),
            )
        return relationships

    # Validation rules

    def get_validation_rules(self, model: Any) -> dict[str, str]:
        """Static ``rules`` mapping first, then a ``rules()`` method."""
        rules = getattr(type(model), "rules", None)
        if not isinstance(rules, Mapping):
            if callable(getattr(model, "rules", None)):
                rules = model.rules()
            else:
                rules = None
        if not rules:
            return {}

        normalized = {}
        for attribute, rule in rules.items():
            if isinstance(rule, (list, tuple)):
                rule = "|".join(str(part) for part in rule)
            normalized[attribute] = str(rule)
        return normalized

    # Helpers

    @staticmethod
    def _model_name(model: Any) -> str:
        if callable(getattr(model, "get_model_name", None)):
            return model.get_model_name()
        return _qualified_name(model)

    @staticmethod
    def _optional_call(obj: Any, method: str, default: Any) -> Any:
        func = getattr(obj, method, None)
        return func() if callable(func) else default

    @staticmethod
    def _first_call(obj: Any, *methods: str) -> str | None:
        for method in methods:
            func = getattr(obj, method, None)
            if callable(func):
                return func()
        return None

    @staticmethod
    def _timestamps(model: Any) -> bool:
        func = getattr(model, "uses_timestamps", None)
        if callable(func):
            return func()
        return getattr(model, "timestamps", False)
