"""Path synthesis — route declarations into the Swagger ``paths`` object."""

import logging

from auto_swagger.generator.parameters import route_parameters
from auto_swagger.generator.responses import format_responses
from auto_swagger.routes.base import RouteDeclaration
from auto_swagger.routes.triggers import collect_routes

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPES = ["application/json"]


def route_security(route: RouteDeclaration) -> list[dict] | None:
    """Security requirements for a route.

    No security schemes are derived from route declarations, so this always
    returns None and operations carry no ``security`` key.
    """
    return None


def build_operation(route: RouteDeclaration) -> dict:
    """Render one route as a Swagger Operation object."""
    operation = {
        "summary": route.name,
        "description": route.description or "",
        "tags": route.tags,
        "operationId": route.name,
        "consumes": list(JSON_MEDIA_TYPES),
        "produces": list(JSON_MEDIA_TYPES),
        "parameters": route_parameters(route),
        "responses": format_responses(route.responses),
        "security": route_security(route),
    }
    return {key: value for key, value in operation.items() if value is not None}


def synthesize_paths(routes: list[RouteDeclaration]) -> dict[str, dict]:
    """Group operations by path, keyed by lower-case method.

    A later route replaces an earlier one declaring the same path and method.
    """
    paths: dict[str, dict] = {}
    for route in routes:
        methods = paths.setdefault(route.path, {})
        if route.method in methods:
            logger.debug("%s %s redeclared by %s", route.method.upper(), route.path, route.name)
        methods[route.method] = build_operation(route)
    return paths


def generate_paths(functions: dict) -> dict[str, dict]:
    """Build the ``paths`` object straight from a service's function map."""
    return synthesize_paths(collect_routes(functions))
