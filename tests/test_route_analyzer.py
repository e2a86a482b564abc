"""Tests for route analysis and endpoint type inference."""

import pytest

from conftest import FakeRoute, FakeRouter
from flutter_codegen.analyzers import AnalyzerError, RouteAnalyzer
from flutter_codegen.codegen.core.schema import EndpointKind, EndpointType, ParameterType


def _resource_routes():
    return [
        FakeRoute("api/users", ["GET", "HEAD"], "users.index", "UserController@index"),
        FakeRoute("api/users", ["POST"], "users.store", "UserController@store", ["api", "auth:sanctum"]),
        FakeRoute("api/users/{id}", ["GET", "HEAD"], "users.show", "UserController@show"),
        FakeRoute("api/users/{id}", ["PUT", "PATCH"], "users.update", "UserController@update"),
        FakeRoute("api/users/{id}", ["DELETE"], "users.destroy", "UserController@destroy"),
        FakeRoute("api/users/{user}/activate", ["POST"], "users.activate", "UserController@activate"),
        FakeRoute("/login", ["GET", "HEAD"], "login", "AuthController@show", ["web"]),
    ]


@pytest.fixture
def analyzer():
    return RouteAnalyzer(FakeRouter(_resource_routes()))


class TestEndpointTypeInference:
    """Tests for mapping (uri, method) onto REST endpoint types."""

    @pytest.mark.parametrize(
        "uri,method,expected",
        [
            ("api/users", "GET", EndpointType.standard(EndpointKind.INDEX)),
            ("api/users/{id}", "GET", EndpointType.standard(EndpointKind.SHOW)),
            ("api/users", "POST", EndpointType.standard(EndpointKind.STORE)),
            ("api/users/{id}", "PUT", EndpointType.standard(EndpointKind.UPDATE)),
            ("api/users/{id}", "PATCH", EndpointType.standard(EndpointKind.UPDATE)),
            ("api/users/{id}", "DELETE", EndpointType.standard(EndpointKind.DESTROY)),
            ("api/users/{user}/activate", "POST", EndpointType.other("activate")),
        ],
    )
    def test_rest_shapes(self, uri, method, expected):
        assert RouteAnalyzer.determine_endpoint_type(uri, method) == expected

    def test_member_action_prefers_controller_action(self):
        result = RouteAnalyzer.determine_endpoint_type(
            "api/users/{user}/enable", "POST", "activateAccount"
        )
        assert result == EndpointType.other("activateAccount")

    def test_member_action_ignores_standard_controller_action(self):
        result = RouteAnalyzer.determine_endpoint_type("api/users/{user}/avatar", "PUT", "update")
        assert result == EndpointType.other("avatar")

    def test_unknown_method_falls_back_to_other(self):
        assert RouteAnalyzer.determine_endpoint_type("api/users", "OPTIONS") == EndpointType.other(
            "options"
        )


class TestRouteAnalyzer:
    """Tests for building route descriptors."""

    def test_analyze_filters_api_routes(self, analyzer):
        analysis = analyzer.analyze()
        assert len(analysis.routes) == 6
        assert all(route.is_api_route for route in analysis.routes)
        assert analysis.resources == ["users"]

    def test_head_is_not_primary(self, analyzer):
        index = analyzer.analyze().routes[0]
        assert index.http_methods == ("GET", "HEAD")
        assert index.primary_http_method == "GET"

    def test_descriptor_fields(self, analyzer):
        store = analyzer.analyze().routes[1]
        assert store.name == "users.store"
        assert store.controller_action == "UserController@store"
        assert store.action_name == "store"
        assert store.requires_auth
        assert store.resource_name == "users"

    def test_member_route_parameters(self, analyzer):
        activate = analyzer.analyze().routes[5]
        assert activate.endpoint_type == EndpointType.other("activate")
        assert [p.name for p in activate.path_parameters] == ["user"]
        assert activate.path_parameters[0].inferred_type is ParameterType.INT

    def test_analyze_route_list_keeps_non_api_routes(self):
        analysis = RouteAnalyzer().analyze(_resource_routes())
        login = analysis.routes[-1]
        assert login.uri == "login"
        assert not login.is_api_route

    def test_analyze_without_router_raises(self):
        with pytest.raises(AnalyzerError):
            RouteAnalyzer().analyze()

    def test_analyze_rejects_unknown_input(self):
        with pytest.raises(AnalyzerError):
            RouteAnalyzer().analyze(42)

    def test_optional_parameter(self):
        route = FakeRoute("api/posts/{slug?}", ["GET"])
        descriptor = RouteAnalyzer().analyze_route(route)
        assert descriptor.path_parameters[0].name == "slug"
        assert not descriptor.path_parameters[0].required


class TestParameterTypes:
    @pytest.mark.parametrize(
        "name,resource,expected",
        [
            ("id", None, ParameterType.INT),
            ("user_id", None, ParameterType.INT),
            ("uuid", None, ParameterType.STRING),
            ("user", "users", ParameterType.INT),
            ("slug", "posts", ParameterType.STRING),
        ],
    )
    def test_guess_parameter_type(self, name, resource, expected):
        assert RouteAnalyzer.guess_parameter_type(name, resource) is expected

    def test_resource_name_from_route_name(self):
        assert RouteAnalyzer.extract_resource_name("api/v1/things", "widgets.index") == "widgets"
        assert RouteAnalyzer.extract_resource_name("api/users/{id}") == "users"
