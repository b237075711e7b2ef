"""Resolve function events into HTTP triggers and route declarations."""

import logging

from pydantic import ValidationError

from .base import HttpEventConfig, HttpTrigger, RouteDeclaration, ShorthandTrigger, Trigger

logger = logging.getLogger(__name__)

TRIGGER_STYLES = ("http", "httpApi")


def parse_trigger(event: dict) -> Trigger | None:
    """Return the HTTP trigger carried by an event, or None if it has none.

    Raises ValidationError when the object form is malformed.
    """
    if not isinstance(event, dict):
        return None

    for style in TRIGGER_STYLES:
        value = event.get(style)
        if not value:
            continue
        if isinstance(value, str):
            return ShorthandTrigger(style=style, expression=value)
        return HttpTrigger(style=style, event=HttpEventConfig.model_validate(value))

    return None


def normalize_path(path: str) -> str:
    if not path.startswith("/"):
        return f"/{path}"
    return path


def to_route(name: str, trigger: HttpTrigger) -> RouteDeclaration:
    event = trigger.event
    return RouteDeclaration(
        name=name,
        path=normalize_path(event.path),
        method=event.method.lower(),
        description=event.description,
        tags=event.swagger_tags,
        body_type=event.body_type,
        path_parameters=event.parameters.path if event.parameters else None,
        responses=event.responses,
    )


def collect_routes(functions: dict) -> list[RouteDeclaration]:
    """Collect route declarations from a function map, in declaration order.

    ``functions`` maps operation name to an object (or dict) with an
    ``events`` list. Shorthand and malformed triggers are skipped.
    """
    routes = []
    for name, function in functions.items():
        events = _events_of(function)
        for event in events:
            try:
                trigger = parse_trigger(event)
            except ValidationError as e:
                logger.debug("Skipping malformed HTTP event on %s: %s", name, e)
                continue

            if trigger is None:
                continue
            if isinstance(trigger, ShorthandTrigger):
                logger.debug(
                    "Skipping shorthand %s trigger on %s: %r", trigger.style, name, trigger.expression
                )
                continue

            routes.append(to_route(name, trigger))
    return routes


def _events_of(function) -> list:
    if isinstance(function, dict):
        events = function.get("events")
    else:
        events = getattr(function, "events", None)
    return events or []
