"""Type schema resolution — type definition files into Swagger definitions.

Every source is read and converted concurrently. Each conversion returns its
own schema map; the maps are merged afterwards in configured order, so a
later source wins when two sources define the same name.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from pathlib import Path

from auto_swagger.errors import TypeDefinitionError
from auto_swagger.generator.responses import DEFINITIONS_PREFIX
from auto_swagger.typedefs.typescript import COMPONENTS_PREFIX, convert_typescript

logger = logging.getLogger(__name__)

DEFAULT_TYPEFILES = ["./src/types/api-types.d.ts"]

Converter = Callable[[str], str]


def rewrite_references(data: str) -> str:
    """Point component schema references at the Swagger definitions section."""
    return data.replace(COMPONENTS_PREFIX, DEFINITIONS_PREFIX)


def flag_disjunctions(source: str, data: str) -> None:
    """Report sources whose schemas use ``anyOf``.

    Swagger 2.0 has no ``anyOf``; such schemas are passed through unchanged.
    """
    if "anyOf" in data:
        logger.info("%s contains anyOf schemas, which Swagger 2.0 does not support; left unchanged", source)


def extract_schemas(source: str, data: str) -> dict[str, dict]:
    """Parse converter output and return its ``components.schemas`` map."""
    data = rewrite_references(data)
    flag_disjunctions(source, data)
    document = json.loads(data)
    schemas = document["components"]["schemas"]
    if not isinstance(schemas, dict):
        raise TypeDefinitionError(f"components.schemas in {source} is not a mapping")
    return schemas


def convert_source(path: str, converter: Converter = convert_typescript) -> dict[str, dict]:
    """Read and convert one type definition file."""
    text = Path(path).read_text(encoding="utf-8")
    return extract_schemas(path, converter(text))


async def resolve_source(path: str, converter: Converter = convert_typescript) -> dict[str, dict]:
    """Convert one source in a worker thread. A failing source yields no schemas."""
    try:
        return await asyncio.to_thread(convert_source, path, converter)
    except (OSError, TypeDefinitionError, ValueError, KeyError, TypeError) as e:
        logger.warning("Error getting types from %s: %s", path, e)
        return {}


def merge_definitions(results: list[dict[str, dict]]) -> dict[str, dict]:
    """Merge per-source schema maps in order; later sources win on collisions."""
    combined: dict[str, dict] = {}
    for schemas in results:
        for name in schemas:
            if name in combined:
                logger.debug("Definition %s overridden by a later type file", name)
        combined.update(schemas)
    return combined


async def resolve_definitions(
    typefiles: list[str] | None = None,
    converter: Converter = convert_typescript,
) -> dict[str, dict]:
    """Convert all type files concurrently and merge their definitions."""
    if typefiles is None:
        typefiles = DEFAULT_TYPEFILES
    results = await asyncio.gather(*(resolve_source(path, converter) for path in typefiles))
    return merge_definitions(list(results))
