"""Data models for route declarations read from the service descriptor.

Both HTTP trigger shapes (legacy ``http`` and gateway ``httpApi``) are
validated into the same ``HttpEventConfig`` model, then wrapped into a
tagged trigger variant so callers never need to guess which shape they hold.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResponseDetail(BaseModel):
    """Structured response declaration: ``{description?, bodyType?}``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    description: str | None = None
    body_type: str | None = Field(default=None, alias="bodyType")


class RequestParameters(BaseModel):
    """Explicit request parameter declarations. Only ``path`` is consulted."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    path: dict[str, bool] | None = None


class HttpEventConfig(BaseModel):
    """Object form of an ``http`` or ``httpApi`` trigger."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    path: str
    method: str
    description: str | None = None
    swagger_tags: list[str] | None = Field(default=None, alias="swaggerTags")
    body_type: str | None = Field(default=None, alias="bodyType")
    parameters: RequestParameters | None = None
    responses: dict[str, str | ResponseDetail] | None = None

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_codes(cls, value):
        # YAML reads unquoted status codes as integers, and `200:` alone as None
        if isinstance(value, dict):
            return {str(code): {} if detail is None else detail for code, detail in value.items()}
        return value


class HttpTrigger(BaseModel):
    """A fully declared HTTP trigger, in either of the two supported styles."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["object"] = "object"
    style: Literal["http", "httpApi"]
    event: HttpEventConfig


class ShorthandTrigger(BaseModel):
    """A string-form trigger such as ``http: GET users/list``.

    Recognized but not expanded: no operation is generated for it.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["shorthand"] = "shorthand"
    style: Literal["http", "httpApi"]
    expression: str


Trigger = HttpTrigger | ShorthandTrigger


class RouteDeclaration(BaseModel):
    """One exposed operation, normalized from its owning function and trigger."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str  # always starts with "/"
    method: str  # lower case
    description: str | None = None
    tags: list[str] | None = None
    body_type: str | None = None
    path_parameters: dict[str, bool] | None = None
    responses: dict[str, str | ResponseDetail] | None = None
