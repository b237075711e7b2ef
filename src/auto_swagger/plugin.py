"""Lifecycle wiring for Swagger generation.

``AutoSwaggerPlugin`` exposes a ``generate-swagger`` command made of three
lifecycle events, and a hook table that maps event names to handlers. The
documentation functions are also injected when a local offline server starts.
"""

import asyncio
import functools
import logging
from pathlib import Path

from auto_swagger.generator.document import DEFAULT_OUTPUT, DocumentBuilder, SwaggerDocument, write_document
from auto_swagger.generator.paths import generate_paths
from auto_swagger.service import ServiceConfig, inject_swagger_functions
from auto_swagger.typedefs.resolver import Converter, resolve_definitions
from auto_swagger.typedefs.typescript import convert_typescript

logger = logging.getLogger(__name__)

COMMAND = "generate-swagger"
OFFLINE_START_HOOK = "before:offline:start:init"


class AutoSwaggerPlugin:
    """Generates the Swagger document for a service and adds its endpoints."""

    def __init__(self, service: ServiceConfig, options: dict | None = None, converter: Converter | None = None):
        self.service = service
        self.options = options or {}
        self.output = Path(self.options.get("output") or DEFAULT_OUTPUT)
        self.converter = converter or functools.partial(convert_typescript, title=service.service)
        self.builder = DocumentBuilder()
        self.document: SwaggerDocument | None = None

        self.commands = {
            COMMAND: {
                "usage": "Generates Swagger for your API",
                "lifecycleEvents": ["gatherTypes", "generateSwagger", "addEndpointsAndLambda"],
            },
        }

        self.hooks = {
            f"before:{COMMAND}:gatherTypes": self.before_gather,
            f"{COMMAND}:gatherTypes": self.gather_types,
            f"{COMMAND}:generateSwagger": self.generate_swagger,
            f"{COMMAND}:addEndpointsAndLambda": self.add_endpoints_and_lambda,
            OFFLINE_START_HOOK: self.add_endpoints_and_lambda,
        }

    def run_command(self, command: str = COMMAND) -> None:
        """Fire the before/main/after hooks of every lifecycle event in order."""
        if command not in self.commands:
            raise KeyError(f"Unknown command: {command}")
        for event in self.commands[command]["lifecycleEvents"]:
            for prefix in ("before:", "", "after:"):
                self.run_hook(f"{prefix}{command}:{event}")

    def run_hook(self, name: str) -> None:
        hook = self.hooks.get(name)
        if hook is not None:
            hook()

    def before_gather(self) -> None:
        logger.info("Creating your Swagger File now")
        self.builder = DocumentBuilder(self.service.service)
        self.document = None

    def gather_types(self) -> None:
        typefiles = self.service.swagger_settings.typefiles
        logger.info("Gathering types from %s", ", ".join(typefiles))
        definitions = asyncio.run(resolve_definitions(typefiles, self.converter))
        self.builder.set_definitions(definitions)

    def generate_swagger(self) -> None:
        self.builder.set_paths(generate_paths(self.service.functions))
        self.document = self.builder.build()
        write_document(self.document, self.output)
        logger.info("Swagger written to %s", self.output)

    def add_endpoints_and_lambda(self) -> None:
        names = inject_swagger_functions(self.service)
        logger.info("Added documentation functions: %s", ", ".join(names))
