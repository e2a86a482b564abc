"""Tests for the Dart API client generator."""

import pytest

from conftest import FakeRoute
from flutter_codegen.analyzers import RouteAnalyzer
from flutter_codegen.codegen.core.schema import EndpointType, RouteDescriptor
from flutter_codegen.codegen.flutter import ApiServiceGenerator


@pytest.fixture
def generator(config):
    return ApiServiceGenerator(config)


def _routes(*routes):
    return RouteAnalyzer().analyze(list(routes)).routes


class TestApiServiceGenerator:
    """Tests for the CRUD client."""

    def test_exactly_five_standard_methods(self, generator, user_descriptor):
        spec = generator.build_spec(user_descriptor)
        assert spec.method_names == ["getAll", "getById", "create", "update", "delete"]
        assert spec.custom_methods == []

    def test_crud_body(self, generator, user_descriptor):
        code = generator.generate(user_descriptor)
        assert code.startswith("import 'api_service.dart';\nimport '../models/user.dart';\n")
        assert "class UserService {" in code
        assert "{String endpoint = 'users'}" in code
        assert "  Future<List<User>> getAll({int? page, Map<String, String>? filters}) async {" in code
        assert "  Future<User> getById(int id) async {" in code
        assert "  Future<User> create(Map<String, dynamic> data) async {" in code
        assert "  Future<User> update(int id, Map<String, dynamic> data) async {" in code
        assert "  Future<bool> delete(int id) async {" in code
        assert "throw ApiException('Failed to fetch User list: $e');" in code
        assert code.count("{") == code.count("}")

    def test_endpoint_is_plural_snake_case(self, generator, empty_descriptor):
        assert generator.build_spec(empty_descriptor).endpoint == "empties"

    def test_output_path(self, generator):
        assert generator.get_output_path("User") == "flutter_output/services/user_service.dart"


class TestCustomRoutes:
    """Tests for methods generated from non-CRUD routes."""

    def test_member_action(self, generator, user_descriptor):
        descriptor = user_descriptor.with_routes(
            _routes(
                FakeRoute("api/users", ["GET", "HEAD"], "users.index"),
                FakeRoute("api/users/{user}/activate", ["POST"], "users.activate"),
            )
        )
        spec = generator.build_spec(descriptor)
        assert spec.method_names[-1] == "activate"
        assert len(spec.methods) == 6

        code = generator.generate(descriptor)
        assert "  Future<User> activate(int user, Map<String, dynamic> data) async {" in code
        assert "await _apiService.post('users/$user/activate', data);" in code
        assert "/// POST api/users/{user}/activate" in code

    def test_collection_get_returns_list(self, generator, user_descriptor):
        route = RouteDescriptor(
            uri="api/users/search",
            http_methods=("GET",),
            primary_http_method="GET",
            endpoint_type=EndpointType.other("search"),
            resource_name="users",
        )
        method = generator.build_spec(user_descriptor.with_routes([route])).custom_methods[0]
        assert method.name == "search"
        assert method.return_type == "List<User>"
        assert method.path == "users/search"

    def test_custom_delete_returns_bool(self, generator, user_descriptor):
        descriptor = user_descriptor.with_routes(
            _routes(FakeRoute("api/users/{user}/avatar", ["DELETE"], "users.avatar"))
        )
        method = generator.build_spec(descriptor).custom_methods[0]
        assert method.return_type == "bool"
        assert method.signature == "int user"
        assert not method.has_body

    def test_name_collision_gets_verb_suffix(self, generator, user_descriptor):
        descriptor = user_descriptor.with_routes(
            _routes(
                FakeRoute("api/users/{user}/avatar", ["GET"], "users.avatar"),
                FakeRoute("api/users/{user}/avatar", ["DELETE"], "users.avatar"),
            )
        )
        names = [method.name for method in generator.build_spec(descriptor).custom_methods]
        assert names == ["avatar", "avatarDelete"]

    def test_repeated_collisions_get_numbered(self, generator, user_descriptor):
        descriptor = user_descriptor.with_routes(
            _routes(
                FakeRoute("api/users/{user}/activate", ["POST"], "users.activate"),
                FakeRoute("api/users/{user}/teams/{team}/activate", ["POST"], "users.teams.activate"),
                FakeRoute("api/users/{user}/roles/{role}/activate", ["POST"], "users.roles.activate"),
            )
        )
        spec = generator.build_spec(descriptor)
        names = [method.name for method in spec.custom_methods]
        assert names == ["activate", "activatePost", "activatePost2"]
        assert len(set(spec.method_names)) == len(spec.method_names) == 8

    def test_body_parameter_renamed_on_clash(self, generator, user_descriptor):
        descriptor = user_descriptor.with_routes(
            _routes(FakeRoute("api/users/{data}/import", ["POST"], "users.import"))
        )
        method = generator.build_spec(descriptor).custom_methods[0]
        assert method.body_name == "body"
        assert method.signature.endswith("data, Map<String, dynamic> body")

        code = generator.generate(descriptor)
        assert "await _apiService.post('users/$data/import', body);" in code
        assert f"{method.name}(String data, Map<String, dynamic> body) async {{" in code

    def test_placeholder_followed_by_identifier_is_braced(self, generator):
        assert generator.interpolate_path("api/files/{name}_v2") == "files/${name}_v2"
        assert generator.interpolate_path("/api/teams/{team_id}/users") == "teams/$teamId/users"
