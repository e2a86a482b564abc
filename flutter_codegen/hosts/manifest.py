"""Backend described by a JSON manifest.

A manifest is a JSON dump of the backend's models, tables and routes, so
generation can run without importing the backend itself::

    {
      "models": {
        "User": {
          "class": "App\\\\Models\\\\User",
          "table": "users",
          "fillable": ["name", "email"],
          "hidden": ["password"],
          "casts": {"email_verified_at": "datetime"},
          "relationships": {
            "posts": {"kind": "HasMany", "related": "App\\\\Models\\\\Post",
                      "foreign_key": "user_id", "local_key": "id"}
          },
          "rules": {"name": "required|string|max:255"}
        }
      },
      "tables": {
        "users": [{"name": "id", "type": "bigint", "nullable": false}]
      },
      "routes": [
        {"uri": "api/users", "methods": ["GET", "HEAD"], "name": "users.index",
         "action": "App\\\\Http\\\\Controllers\\\\UserController@index",
         "middleware": ["api"]}
      ]
    }
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from ..analyzers.base import UnresolvableModelError
from ..logging_config import get_logger
from ..utils import JSONLoaderError, load_json

logger = get_logger(__name__)

_PLACEHOLDER = re.compile(r"\{(\w+)\??\}")


class ManifestError(Exception):
    """Raised when a manifest cannot be loaded or is malformed."""

    pass


class ManifestSchemaReflector:
    """Schema reflector over the manifest's ``tables`` section."""

    def __init__(self, tables: dict[str, list[dict[str, Any]]]) -> None:
        self._tables = {
            table: {column["name"]: column for column in columns}
            for table, columns in tables.items()
        }

    def has_table(self, table: str) -> bool:
        return table in self._tables

    def list_columns(self, table: str) -> list[str]:
        return list(self._tables.get(table, {}))

    def column_type(self, table: str, column: str) -> str:
        return str(self._column(table, column).get("type", "string"))

    def column_nullable(self, table: str, column: str) -> bool:
        return bool(self._column(table, column).get("nullable", False))

    def column_default(self, table: str, column: str) -> Any:
        return self._column(table, column).get("default")

    def _column(self, table: str, column: str) -> dict[str, Any]:
        try:
            return self._tables[table][column]
        except KeyError as e:
            raise ManifestError(f"Unknown column {table}.{column}") from e


class ManifestModel:
    """Host model backed by a manifest entry."""

    def __init__(self, name: str, data: dict[str, Any]) -> None:
        self.name = name
        self.data = data

    def get_model_name(self) -> str:
        return self.data.get("class") or self.name

    def get_table(self) -> str:
        return self.data.get("table") or f"{self.name.lower()}s"

    def get_key_name(self) -> str:
        return self.data.get("primary_key", "id")

    def get_fillable(self) -> list[str]:
        return list(self.data.get("fillable", []))

    def get_guarded(self) -> list[str]:
        return list(self.data.get("guarded", []))

    def get_hidden(self) -> list[str]:
        return list(self.data.get("hidden", []))

    def _section(self, key: str) -> dict[str, Any]:
        value = self.data.get(key) or {}
        if not isinstance(value, dict):
            raise ManifestError(
                f"'{key}' of model {self.name} must be an object, got {type(value).__name__}"
            )
        return dict(value)

    def get_casts(self) -> dict[str, str]:
        return self._section("casts")

    def get_date_attributes(self) -> list[str]:
        return list(self.data.get("dates", []))

    def has_soft_delete(self) -> bool:
        return bool(self.data.get("soft_deletes", False))

    def uses_timestamps(self) -> bool:
        return bool(self.data.get("timestamps", True))

    def declared_relationships(self) -> dict[str, dict[str, Any]]:
        return self._section("relationships")

    def rules(self) -> dict[str, Any]:
        return self._section("rules")


class ManifestRoute:
    """Host route backed by a manifest entry."""

    def __init__(self, data: dict[str, Any]) -> None:
        if "uri" not in data:
            raise ManifestError(f"Route entry without 'uri': {data}")
        self.data = data

    def uri(self) -> str:
        return self.data["uri"]

    def methods(self) -> list[str]:
        methods = self.data.get("methods") or self.data.get("method") or ["GET"]
        if isinstance(methods, str):
            methods = [methods]
        return [method.upper() for method in methods]

    def name(self) -> str | None:
        return self.data.get("name")

    def action(self) -> dict[str, Any]:
        action = self.data.get("action")
        if isinstance(action, dict):
            return action
        return {"controller": action} if action else {}

    def middleware(self) -> list[str]:
        return list(self.data.get("middleware", []))

    def parameter_names(self) -> list[str]:
        return _PLACEHOLDER.findall(self.uri())


class ManifestHost:
    """Backend host read from a manifest document."""

    def __init__(self, data: dict[str, Any], source: str = "<memory>") -> None:
        if not isinstance(data, dict):
            raise ManifestError(f"Manifest must be a JSON object: {source}")
        self.source = source
        self.data = data
        self._schema = ManifestSchemaReflector(data.get("tables", {}))
        self._models = data.get("models", {})
        self._routes = [ManifestRoute(route) for route in data.get("routes", [])]

    @classmethod
    def load(cls, source: str | Path, timeout: int = 30) -> "ManifestHost":
        """Load a manifest from a file path or URL."""
        try:
            description, data = load_json(source, timeout)
        except (JSONLoaderError, FileNotFoundError) as e:
            raise ManifestError(f"Cannot load manifest {source}: {e}") from e
        logger.info(f"Using manifest {description}")
        return cls(data, description)

    @property
    def schema(self) -> ManifestSchemaReflector:
        return self._schema

    def get_routes(self) -> list[ManifestRoute]:
        return list(self._routes)

    def discover_models(self) -> list[str]:
        return sorted(self._models)

    def resolve_model(self, name: str) -> ManifestModel:
        if name in self._models:
            return ManifestModel(name, self._models[name])
        for model_name, data in self._models.items():
            if data.get("class") == name:
                return ManifestModel(model_name, data)
        raise UnresolvableModelError(f"Model '{name}' not found in manifest {self.source}")
