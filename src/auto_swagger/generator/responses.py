"""Response formatting — declared responses into Swagger Response objects."""

from auto_swagger.routes.base import ResponseDetail

DEFINITIONS_PREFIX = "#/definitions/"


def definition_ref(name: str) -> dict:
    return {"$ref": f"{DEFINITIONS_PREFIX}{name}"}


def format_responses(responses: dict[str, str | ResponseDetail] | None) -> dict[str, dict]:
    """Normalize a route's responses, keyed by status code.

    A route without declared responses gets a single ``200`` entry.
    """
    if not responses:
        return {"200": {"description": "200 response"}}

    formatted = {}
    for status_code, detail in responses.items():
        status_code = str(status_code)
        if isinstance(detail, str):
            formatted[status_code] = {"description": detail}
            continue

        if isinstance(detail, dict):
            detail = ResponseDetail.model_validate(detail)

        response = {"description": detail.description or f"{status_code} response"}
        if detail.body_type:
            response["schema"] = definition_ref(detail.body_type)
        formatted[status_code] = response

    return formatted
