from auto_swagger.generator.paths import build_operation, generate_paths, route_security, synthesize_paths
from auto_swagger.routes.base import RouteDeclaration


class TestGeneratePaths:
    def test_get_user(self):
        functions = {"getUser": {"events": [{"http": {"path": "user/{id}", "method": "get"}}]}}
        paths = generate_paths(functions)
        operation = paths["/user/{id}"]["get"]
        assert operation["operationId"] == "getUser"
        assert operation["summary"] == "getUser"
        assert {"name": "id", "in": "path", "required": True, "type": "string"} in operation["parameters"]

    def test_operation_fields(self):
        functions = {
            "listUsers": {"events": [{"httpApi": {
                "path": "/users", "method": "GET",
                "description": "All users", "swaggerTags": ["users"],
            }}]},
        }
        operation = generate_paths(functions)["/users"]["get"]
        assert operation["description"] == "All users"
        assert operation["tags"] == ["users"]
        assert operation["consumes"] == ["application/json"]
        assert operation["produces"] == ["application/json"]
        assert operation["responses"] == {"200": {"description": "200 response"}}
        assert "security" not in operation

    def test_missing_description_and_tags(self):
        functions = {"f": {"events": [{"http": {"path": "x", "method": "post"}}]}}
        operation = generate_paths(functions)["/x"]["post"]
        assert operation["description"] == ""
        assert "tags" not in operation

    def test_methods_grouped_under_path(self):
        functions = {
            "read": {"events": [{"http": {"path": "items", "method": "get"}}]},
            "write": {"events": [{"http": {"path": "/items", "method": "POST"}}]},
        }
        paths = generate_paths(functions)
        assert list(paths) == ["/items"]
        assert set(paths["/items"]) == {"get", "post"}

    def test_last_route_wins(self):
        functions = {
            "first": {"events": [{"http": {"path": "dup", "method": "get"}}]},
            "second": {"events": [{"http": {"path": "dup", "method": "GET"}}]},
        }
        assert generate_paths(functions)["/dup"]["get"]["operationId"] == "second"

    def test_shorthand_skipped(self):
        functions = {"short": {"events": [{"http": "GET pets"}]}}
        assert generate_paths(functions) == {}

    def test_empty_status_code_keeps_route(self):
        functions = {"f": {"events": [{"http": {"path": "x", "method": "get", "responses": {200: None}}}]}}
        operation = generate_paths(functions)["/x"]["get"]
        assert operation["responses"] == {"200": {"description": "200 response"}}

    def test_multiple_events_on_one_function(self):
        functions = {
            "multi": {"events": [
                {"http": {"path": "a", "method": "get"}},
                {"httpApi": {"path": "b", "method": "get"}},
            ]},
        }
        assert set(generate_paths(functions)) == {"/a", "/b"}


class TestSynthesizePaths:
    def test_empty(self):
        assert synthesize_paths([]) == {}

    def test_security_is_always_absent(self):
        route = RouteDeclaration(name="op", path="/x", method="get")
        assert route_security(route) is None
        assert "security" not in build_operation(route)
