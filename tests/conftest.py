"""Test configuration for flutter_codegen."""

from pathlib import Path

import pytest

from flutter_codegen.codegen.core.config import FlutterConfig, load_config
from flutter_codegen.codegen.core.schema import (
    AttributeDescriptor,
    ModelDescriptor,
    TargetType,
)
from flutter_codegen.hosts.manifest import ManifestHost

DATA_DIR = Path(__file__).parent / "data"


class FakeSchema:
    """In-memory schema reflector.

    ``tables`` maps a table name to ``(column, type, nullable[, default])``
    tuples in column order.
    """

    def __init__(self, tables):
        self.tables = {
            table: {column[0]: column for column in columns}
            for table, columns in tables.items()
        }

    def has_table(self, table):
        return table in self.tables

    def list_columns(self, table):
        return list(self.tables[table])

    def column_type(self, table, column):
        return self.tables[table][column][1]

    def column_nullable(self, table, column):
        return self.tables[table][column][2]

    def column_default(self, table, column):
        entry = self.tables[table][column]
        return entry[3] if len(entry) > 3 else None


class FakeModel:
    """Minimal host model; subclasses override the class attributes."""

    table = "fakes"
    fillable = ()
    hidden = ()
    casts = {}
    dates = ()
    soft_deletes = False
    timestamps = True

    def get_table(self):
        return self.table

    def get_key_name(self):
        return "id"

    def get_fillable(self):
        return list(self.fillable)

    def get_hidden(self):
        return list(self.hidden)

    def get_casts(self):
        return dict(self.casts)

    def get_date_attributes(self):
        return list(self.dates)

    def has_soft_delete(self):
        return self.soft_deletes


class FakeRoute:
    """Minimal host route."""

    def __init__(self, uri, methods, name=None, controller=None, middleware=(), parameters=None):
        self._uri = uri
        self._methods = list(methods)
        self._name = name
        self._controller = controller
        self._middleware = list(middleware)
        self._parameters = parameters

    def uri(self):
        return self._uri

    def methods(self):
        return self._methods

    def name(self):
        return self._name

    def action(self):
        return {"controller": self._controller} if self._controller else {}

    def middleware(self):
        return self._middleware

    def parameter_names(self):
        return self._parameters or []


class FakeRouter:
    def __init__(self, routes):
        self.routes = list(routes)

    def get_routes(self):
        return list(self.routes)


@pytest.fixture
def users_schema():
    """Schema holding a ``users`` table with id/name/age plus system columns."""
    return FakeSchema(
        {
            "users": [
                ("id", "bigint", False),
                ("name", "varchar(255)", False),
                ("age", "integer", True),
                ("password", "varchar(255)", False),
                ("created_at", "timestamp", True),
                ("updated_at", "timestamp", True),
            ]
        }
    )


@pytest.fixture
def config():
    """Default configuration, unaffected by the environment."""
    return load_config(environ={})


@pytest.fixture
def plain_config():
    """Configuration producing hand-written JSON methods instead of json_serializable."""
    return load_config({"generation": {"use_json_annotation": False}}, environ={})


@pytest.fixture
def user_descriptor():
    """``User`` with id:int, name:string and age:int? attributes."""
    return ModelDescriptor(
        class_name="User",
        fully_qualified_name="app.models.User",
        table_name="users",
        attributes={
            "id": AttributeDescriptor("id", TargetType.INT, "bigint", nullable=False),
            "name": AttributeDescriptor("name", TargetType.STRING, "varchar", nullable=False),
            "age": AttributeDescriptor("age", TargetType.INT, "integer", nullable=True),
        },
    )


@pytest.fixture
def rich_descriptor():
    """``Post`` covering every target type plus excluded and system columns."""
    return ModelDescriptor(
        class_name="Post",
        fully_qualified_name="app.models.Post",
        table_name="posts",
        attributes={
            "id": AttributeDescriptor("id", TargetType.INT, "bigint"),
            "title": AttributeDescriptor("title", TargetType.STRING, "varchar"),
            "rating": AttributeDescriptor("rating", TargetType.DOUBLE, "decimal", nullable=True),
            "is_published": AttributeDescriptor("is_published", TargetType.BOOL, "boolean"),
            "published_at": AttributeDescriptor(
                "published_at", TargetType.DATETIME, "datetime", nullable=True
            ),
            "metadata": AttributeDescriptor("metadata", TargetType.JSON, "json", nullable=True),
            "password": AttributeDescriptor("password", TargetType.STRING, "varchar"),
            "created_at": AttributeDescriptor(
                "created_at", TargetType.DATETIME, "timestamp", nullable=True
            ),
        },
    )


@pytest.fixture
def empty_descriptor():
    return ModelDescriptor(
        class_name="Empty", fully_qualified_name="app.models.Empty", table_name="empties"
    )


@pytest.fixture
def manifest_path():
    return DATA_DIR / "sample_manifest.json"


@pytest.fixture
def manifest_host(manifest_path):
    return ManifestHost.load(manifest_path)


@pytest.fixture
def output_config(tmp_path):
    """Configuration writing into a temporary directory."""
    return load_config({"output": {"base_path": str(tmp_path / "flutter")}}, environ={})


@pytest.fixture
def default_config():
    return FlutterConfig()
