"""Parameter resolution — body and path parameters for a single route."""

import re

from auto_swagger.generator.responses import definition_ref
from auto_swagger.routes.base import RouteDeclaration

PLACEHOLDER_RE = re.compile(r"[^{}]+(?=})")


def extract_path_placeholders(path: str) -> list[str]:
    """Return the distinct ``{name}`` placeholders of a path template, left to right."""
    return list(dict.fromkeys(PLACEHOLDER_RE.findall(path)))


def body_parameter(body_type: str) -> dict:
    return {
        "in": "body",
        "name": "body",
        "description": "Body required in the request",
        "required": True,
        "schema": definition_ref(body_type),
    }


def path_parameter(name: str, required: bool = True) -> dict:
    return {
        "name": name,
        "in": "path",
        "required": required,
        "type": "string",
    }


def route_parameters(route: RouteDeclaration) -> list[dict]:
    """Build the ordered parameter list for a route.

    The body parameter, when present, always comes first. Explicitly
    declared path parameters keep their declared ``required`` flag; template
    placeholders without a declaration default to required. Declared names
    missing from the template are still emitted.
    """
    parameters = []
    if route.body_type:
        parameters.append(body_parameter(route.body_type))

    placeholders = extract_path_placeholders(route.path)

    if route.path_parameters:
        for name, required in route.path_parameters.items():
            parameters.append(path_parameter(name, required))
            placeholders = [p for p in placeholders if p != name]

    for name in placeholders:
        parameters.append(path_parameter(name))

    return parameters
