"""Protocols for the backend collaborators the analyzers read from."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class SchemaReflector(Protocol):
    """Read-only view of the backend database schema."""

    def has_table(self, table: str) -> bool: ...

    def list_columns(self, table: str) -> Sequence[str]: ...

    def column_type(self, table: str, column: str) -> str: ...

    def column_nullable(self, table: str, column: str) -> bool: ...

    def column_default(self, table: str, column: str) -> Any: ...


@runtime_checkable
class HostModel(Protocol):
    """A model instance as exposed by the backend ORM."""

    def get_table(self) -> str: ...

    def get_key_name(self) -> str: ...

    def get_fillable(self) -> Iterable[str]: ...

    def get_hidden(self) -> Iterable[str]: ...

    def get_casts(self) -> Mapping[str, str]: ...

    def get_date_attributes(self) -> Iterable[str]: ...

    def has_soft_delete(self) -> bool: ...


@runtime_checkable
class HostRoute(Protocol):
    """A single entry of the backend route table."""

    def uri(self) -> str: ...

    def methods(self) -> Sequence[str]: ...

    def name(self) -> str | None: ...

    def action(self) -> Mapping[str, Any]: ...

    def middleware(self) -> Sequence[str]: ...

    def parameter_names(self) -> Sequence[str]: ...


@runtime_checkable
class Router(Protocol):
    """Anything that can list its routes."""

    def get_routes(self) -> Iterable[HostRoute]: ...


@runtime_checkable
class Host(Protocol):
    """Everything the CLI needs from a backend."""

    @property
    def schema(self) -> SchemaReflector: ...

    def get_routes(self) -> Iterable[HostRoute]: ...

    def discover_models(self) -> list[str]: ...

    def resolve_model(self, name: str) -> Any: ...
