"""Service descriptor loading and the documentation-serving functions.

The descriptor is a serverless-style YAML file. Only ``service``,
``functions`` and ``custom.swagger`` are interpreted; everything else is
kept as-is.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from auto_swagger.errors import ConfigError
from auto_swagger.typedefs.resolver import DEFAULT_TYPEFILES

DEFAULT_CONFIG = Path("serverless.yml")


class ServiceLoader(yaml.SafeLoader):
    """SafeLoader that accepts CloudFormation short-form tags (``!Ref`` etc.)."""


def _construct_tagged(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> Any:
    if isinstance(node, yaml.ScalarNode):
        return loader.construct_scalar(node)
    if isinstance(node, yaml.SequenceNode):
        return loader.construct_sequence(node, deep=True)
    return loader.construct_mapping(node, deep=True)


ServiceLoader.add_multi_constructor("!", _construct_tagged)


class FunctionConfig(BaseModel):
    """One deployed function. Unknown keys are preserved."""

    model_config = ConfigDict(extra="allow")

    handler: str | None = None
    events: list[Any] = []


class SwaggerSettings(BaseModel):
    """Options read from ``custom.swagger``."""

    model_config = ConfigDict(extra="ignore")

    typefiles: list[str] = Field(default_factory=lambda: list(DEFAULT_TYPEFILES))

    @field_validator("typefiles", mode="before")
    @classmethod
    def _typefile_list(cls, value):
        # an empty `typefiles:` key falls back to the default location
        if value is None:
            return list(DEFAULT_TYPEFILES)
        if isinstance(value, str):
            return [value]
        return value


class ServiceConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    service: str
    functions: dict[str, FunctionConfig] = {}
    custom: dict[str, Any] = {}

    @field_validator("service", mode="before")
    @classmethod
    def _service_name(cls, value):
        if isinstance(value, dict):
            return value.get("name")
        return value

    @field_validator("functions", mode="before")
    @classmethod
    def _empty_functions(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {name: config or {} for name, config in value.items()}
        return value

    @field_validator("custom", mode="before")
    @classmethod
    def _empty_custom(cls, value):
        return value or {}

    @property
    def swagger_settings(self) -> SwaggerSettings:
        try:
            return SwaggerSettings.model_validate(self.custom.get("swagger") or {})
        except ValidationError as e:
            raise ConfigError(f"Invalid custom.swagger settings: {e}") from e


def parse_service(text: str, source: str = "<string>") -> ServiceConfig:
    try:
        data = yaml.load(text, Loader=ServiceLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {source}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{source} must contain a mapping")

    try:
        return ServiceConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid service descriptor {source}: {e}") from e


def load_service(path: Path = DEFAULT_CONFIG) -> ServiceConfig:
    """Load a service descriptor from a YAML file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    return parse_service(text, str(path))


def swagger_functions() -> dict[str, FunctionConfig]:
    """Functions serving the Swagger UI and the generated document."""
    return {
        "swaggerUI": FunctionConfig(
            handler="swagger/index.handler",
            events=[{"http": {"method": "get", "path": "swagger"}}],
        ),
        "swaggerJSON": FunctionConfig(
            handler="swagger/json.handler",
            events=[{"http": {"method": "get", "path": "swagger.json"}}],
        ),
    }


def inject_swagger_functions(service: ServiceConfig) -> list[str]:
    """Add the documentation functions, replacing any with the same name."""
    injected = swagger_functions()
    service.functions = {**service.functions, **injected}
    return list(injected)


def dump_functions(service: ServiceConfig) -> str:
    """Render the function map as YAML."""
    functions = {
        name: function.model_dump(exclude_none=True) for name, function in service.functions.items()
    }
    return yaml.safe_dump({"functions": functions}, sort_keys=False)
