"""Swagger document assembly and output.

``DocumentBuilder`` collects the title, definitions and paths in separate
phases and only hands out a ``SwaggerDocument`` once all of them are set.
"""

import copy
import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from auto_swagger.errors import DocumentError

SWAGGER_VERSION = "2.0"
DOCUMENT_VERSION = "1"
DEFAULT_OUTPUT = Path("swagger.js")
GENERATED_HEADER = "// this file was generated by auto-swagger"


class Info(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    version: str = DOCUMENT_VERSION


class SwaggerDocument(BaseModel):
    """The finished Swagger 2.0 document."""

    model_config = ConfigDict(frozen=True)

    swagger: str = SWAGGER_VERSION
    info: Info
    schemes: list[str] = ["https"]
    paths: dict[str, dict] = {}
    definitions: dict[str, dict] = {}

    def to_dict(self) -> dict:
        return self.model_dump()

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)


class DocumentBuilder:
    """Accumulates the parts of a Swagger document, then freezes it."""

    def __init__(self, title: str = ""):
        self.title = title
        self._definitions: dict[str, dict] | None = None
        self._paths: dict[str, dict] | None = None
        self._document: SwaggerDocument | None = None

    def set_title(self, title: str) -> None:
        self._check_open()
        self.title = title

    def set_definitions(self, definitions: dict[str, dict]) -> None:
        self._check_open()
        self._definitions = copy.deepcopy(definitions)

    def set_paths(self, paths: dict[str, dict]) -> None:
        self._check_open()
        if self._definitions is None:
            raise DocumentError("definitions must be resolved before paths are set")
        self._paths = copy.deepcopy(paths)

    @property
    def built(self) -> bool:
        return self._document is not None

    def build(self) -> SwaggerDocument:
        """Return the finished document. No further changes are accepted."""
        if self._document is not None:
            return self._document
        if self._definitions is None or self._paths is None:
            raise DocumentError("cannot build document before definitions and paths are set")

        self._document = SwaggerDocument(
            info=Info(title=self.title),
            paths=self._paths,
            definitions=self._definitions,
        )
        return self._document

    def _check_open(self) -> None:
        if self._document is not None:
            raise DocumentError("document has already been built")


def render_module(document: SwaggerDocument) -> str:
    """Render the document as a JavaScript module exporting it."""
    return f"{GENERATED_HEADER}\nmodule.exports = {document.to_json(indent=2)};"


def write_document(document: SwaggerDocument, output: Path = DEFAULT_OUTPUT) -> Path:
    """Write the document module, replacing any previous file. Errors propagate."""
    output = Path(output)
    output.write_text(render_module(document), encoding="utf-8")
    return output
