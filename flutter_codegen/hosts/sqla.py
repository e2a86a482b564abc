"""Backend backed by SQLAlchemy declarative models and a live database.

Columns are reflected from the database with ``sqlalchemy.inspect``;
relationships are read from the mappers, so nothing on the models is
invoked during analysis.
"""

from __future__ import annotations

import datetime
import decimal
from collections.abc import Mapping
from typing import Any

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import MANYTOMANY, MANYTOONE, ONETOMANY

from ..analyzers.base import SchemaUnavailableError, UnresolvableModelError
from ..logging_config import get_logger
from ..utils import import_object

logger = get_logger(__name__)


def type_family(sa_type: Any) -> str:
    """Collapse a SQLAlchemy column type into a portable type name."""
    try:
        python_type = sa_type.python_type
    except NotImplementedError:
        python_type = None

    if python_type is bool:
        return "boolean"
    if python_type is int:
        return "integer"
    if python_type is float:
        return "float"
    if python_type is decimal.Decimal:
        return "decimal"
    if python_type is datetime.datetime:
        return "datetime"
    if python_type is datetime.date:
        return "date"
    if python_type in (dict, list):
        return "json"

    try:
        return str(sa_type).lower()
    except Exception:
        return type(sa_type).__name__.lower()


class SQLAlchemySchemaReflector:
    """Schema reflector over a SQLAlchemy engine."""

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._columns: dict[str, dict[str, dict[str, Any]]] = {}

    def has_table(self, table: str) -> bool:
        try:
            return inspect(self.engine).has_table(table)
        except SQLAlchemyError as e:
            raise SchemaUnavailableError(f"Cannot inspect database: {e}") from e

    def list_columns(self, table: str) -> list[str]:
        return list(self._table_columns(table))

    def column_type(self, table: str, column: str) -> str:
        return type_family(self._table_columns(table)[column]["type"])

    def column_nullable(self, table: str, column: str) -> bool:
        return bool(self._table_columns(table)[column].get("nullable", True))

    def column_default(self, table: str, column: str) -> Any:
        return self._table_columns(table)[column].get("default")

    def _table_columns(self, table: str) -> dict[str, dict[str, Any]]:
        if table not in self._columns:
            try:
                columns = inspect(self.engine).get_columns(table)
            except SQLAlchemyError as e:
                raise SchemaUnavailableError(
                    f"Cannot read columns of table '{table}': {e}"
                ) from e
            self._columns[table] = {column["name"]: column for column in columns}
        return self._columns[table]


class SQLAlchemyModel:
    """Host model adapter around a mapped class.

    Host-specific metadata can be declared on the class with
    ``__fillable__``, ``__guarded__``, ``__hidden__``, ``__casts__`` and
    ``__rules__`` (or a ``rules`` mapping).
    """

    def __init__(self, model_class: type) -> None:
        self.model_class = model_class
        self.mapper = inspect(model_class)

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.mapper.columns]

    def get_model_name(self) -> str:
        return f"{self.model_class.__module__}.{self.model_class.__qualname__}"

    def get_table(self) -> str:
        return self.mapper.local_table.name

    def get_key_name(self) -> str:
        primary_key = self.mapper.primary_key
        return primary_key[0].name if primary_key else "id"

    def get_fillable(self) -> list[str]:
        declared = getattr(self.model_class, "__fillable__", None)
        if declared is not None:
            return list(declared)
        primary = {column.name for column in self.mapper.primary_key}
        managed = {"created_at", "updated_at", "deleted_at"}
        return [name for name in self.column_names if name not in primary | managed]

    def get_guarded(self) -> list[str]:
        return list(getattr(self.model_class, "__guarded__", []))

    def get_hidden(self) -> list[str]:
        return list(getattr(self.model_class, "__hidden__", []))

    def get_casts(self) -> dict[str, str]:
        return dict(getattr(self.model_class, "__casts__", {}))

    def get_date_attributes(self) -> list[str]:
        return [
            column.name
            for column in self.mapper.columns
            if type_family(column.type) in ("date", "datetime")
        ]

    def has_soft_delete(self) -> bool:
        return "deleted_at" in self.column_names

    def uses_timestamps(self) -> bool:
        names = self.column_names
        return "created_at" in names and "updated_at" in names

    def declared_relationships(self) -> dict[str, dict[str, Any]]:
        relationships = {}
        for relationship in self.mapper.relationships:
            pairs = list(relationship.local_remote_pairs or ())
            local_column, remote_column = pairs[0] if pairs else (None, None)
            foreign_key = local_key = None

            if relationship.direction is MANYTOONE:
                kind = "BelongsTo"
                foreign_key = local_column.name if local_column is not None else None
                local_key = remote_column.name if remote_column is not None else None
            elif relationship.direction is ONETOMANY:
                kind = "HasMany" if relationship.uselist else "HasOne"
                foreign_key = remote_column.name if remote_column is not None else None
                local_key = local_column.name if local_column is not None else None
            elif relationship.direction is MANYTOMANY:
                kind = "BelongsToMany"
            else:
                kind = "Relation"

            related = relationship.mapper.class_
            relationships[relationship.key] = {
                "kind": kind,
                "related": f"{related.__module__}.{related.__qualname__}",
                "foreign_key": foreign_key,
                "local_key": local_key,
            }
        return relationships

    def rules(self) -> dict[str, Any]:
        declared = getattr(self.model_class, "rules", None)
        if isinstance(declared, Mapping):
            return dict(declared)
        return dict(getattr(self.model_class, "__rules__", {}))


class SQLAlchemyHost:
    """Backend host for a declarative base bound to an engine."""

    def __init__(self, engine: Engine, base: Any, routes: list | None = None) -> None:
        """
        Args:
            engine: Engine connected to the application database.
            base: Declarative base (or registry) whose mapped classes are
                the application's models.
            routes: Optional host routes; SQLAlchemy has no route table.
        """
        self.engine = engine
        self.base = base
        self._schema = SQLAlchemySchemaReflector(engine)
        self._routes = list(routes or [])

    @classmethod
    def from_url(cls, database_url: str, models_reference: str, **kwargs) -> "SQLAlchemyHost":
        """Create a host from a database URL and a ``module:Base`` reference."""
        try:
            base = import_object(models_reference)
        except (ImportError, AttributeError) as e:
            raise UnresolvableModelError(
                f"Cannot import models from '{models_reference}': {e}"
            ) from e
        try:
            engine = create_engine(database_url)
        except (SQLAlchemyError, ValueError) as e:
            raise SchemaUnavailableError(f"Cannot create engine for {database_url}: {e}") from e
        logger.info(f"Reflecting models from {models_reference}")
        return cls(engine, base, **kwargs)

    @property
    def schema(self) -> SQLAlchemySchemaReflector:
        return self._schema

    def get_routes(self) -> list:
        return list(self._routes)

    def _mapped_classes(self) -> dict[str, type]:
        registry = getattr(self.base, "registry", self.base)
        return {mapper.class_.__name__: mapper.class_ for mapper in registry.mappers}

    def discover_models(self) -> list[str]:
        return sorted(self._mapped_classes())

    def resolve_model(self, name: str) -> SQLAlchemyModel:
        classes = self._mapped_classes()
        if name in classes:
            return SQLAlchemyModel(classes[name])
        for model_class in classes.values():
            if f"{model_class.__module__}.{model_class.__qualname__}" == name:
                return SQLAlchemyModel(model_class)
        raise UnresolvableModelError(f"No mapped model named '{name}'")
