"""Tests for the manifest-backed host."""

import json

import pytest

from flutter_codegen.analyzers import ModelAnalyzer, RouteAnalyzer, UnresolvableModelError
from flutter_codegen.codegen.core.schema import EndpointType, TargetType
from flutter_codegen.hosts import Host, ManifestError, ManifestHost


class TestManifestHost:
    """Tests for reading models, tables and routes from a manifest."""

    def test_satisfies_host_protocol(self, manifest_host):
        assert isinstance(manifest_host, Host)

    def test_discover_models_sorted(self, manifest_host):
        assert manifest_host.discover_models() == ["AuditLog", "Post", "User"]

    def test_resolve_by_name_and_class(self, manifest_host):
        assert manifest_host.resolve_model("User").get_table() == "users"
        assert manifest_host.resolve_model("App\\Models\\Post").get_table() == "posts"

    def test_resolve_unknown_model(self, manifest_host):
        with pytest.raises(UnresolvableModelError):
            manifest_host.resolve_model("Invoice")

    def test_schema_reflection(self, manifest_host):
        schema = manifest_host.schema
        assert schema.has_table("users")
        assert not schema.has_table("audit_logs")
        assert schema.list_columns("users")[:3] == ["id", "name", "email"]
        assert schema.column_type("users", "name") == "varchar(255)"
        assert schema.column_nullable("users", "age")
        assert schema.column_default("users", "is_active") is True

    def test_string_action_becomes_controller(self, manifest_host):
        route = manifest_host.get_routes()[0]
        assert route.action() == {"controller": "App\\Http\\Controllers\\UserController@index"}
        assert route.parameter_names() == []

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(ManifestError):
            ManifestHost.load(tmp_path / "missing.json")

    def test_load_non_object(self, tmp_path):
        path = tmp_path / "manifest.json"
        path.write_text(json.dumps([1, 2, 3]))
        with pytest.raises(ManifestError):
            ManifestHost.load(path)

    def test_route_without_uri(self):
        with pytest.raises(ManifestError):
            ManifestHost({"routes": [{"methods": ["GET"]}]})


class TestManifestAnalysis:
    """Tests running the analyzers over the sample manifest."""

    def test_user_descriptor(self, manifest_host, config):
        analyzer = ModelAnalyzer(manifest_host.schema, config, manifest_host.resolve_model)
        user = analyzer.analyze_model("User")
        assert user.class_name == "User"
        assert user.fully_qualified_name == "App\\Models\\User"
        assert user.attributes["is_active"].target_type is TargetType.BOOL
        assert user.attributes["email_verified_at"].target_type is TargetType.DATETIME
        assert user.relationships["posts"].related_class_name == "Post"
        assert user.validation_rules["email"] == "required|email"

    def test_missing_table_model(self, manifest_host, config):
        analyzer = ModelAnalyzer(manifest_host.schema, config, manifest_host.resolve_model)
        audit = analyzer.analyze_model("AuditLog")
        assert audit.attributes == {}
        assert not audit.has_timestamps

    def test_soft_delete_flag(self, manifest_host, config):
        analyzer = ModelAnalyzer(manifest_host.schema, config, manifest_host.resolve_model)
        assert analyzer.analyze_model("Post").has_soft_delete

    def test_routes_group_by_resource(self, manifest_host):
        analysis = RouteAnalyzer(manifest_host).analyze()
        assert analysis.resources == ["users", "posts"]
        user_routes = analysis.routes_for_model("User")
        assert len(user_routes) == 6
        assert user_routes[-1].endpoint_type == EndpointType.other("activate")
