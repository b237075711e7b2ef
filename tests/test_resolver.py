import asyncio
import json
import logging
import time
from pathlib import Path

from auto_swagger.typedefs.resolver import (
    extract_schemas,
    merge_definitions,
    resolve_definitions,
    rewrite_references,
)

FIXTURES = Path(__file__).parent / "fixtures"


def _components(schemas: dict) -> str:
    return json.dumps({"components": {"schemas": schemas}})


class TestRewriteReferences:
    def test_points_at_definitions(self):
        data = '{"$ref": "#/components/schemas/Owner"}'
        assert rewrite_references(data) == '{"$ref": "#/definitions/Owner"}'


class TestExtractSchemas:
    def test_returns_component_schemas(self):
        data = _components({"A": {"$ref": "#/components/schemas/B"}})
        assert extract_schemas("a.ts", data) == {"A": {"$ref": "#/definitions/B"}}

    def test_any_of_is_reported_and_left_alone(self, caplog):
        data = _components({"A": {"anyOf": [{"type": "string"}, {"type": "number"}]}})
        with caplog.at_level(logging.INFO, logger="auto_swagger.typedefs.resolver"):
            schemas = extract_schemas("a.ts", data)
        assert schemas["A"]["anyOf"] == [{"type": "string"}, {"type": "number"}]
        assert "anyOf" in caplog.text


class TestMergeDefinitions:
    def test_last_wins(self):
        merged = merge_definitions([{"Widget": {"n": 1}, "A": {}}, {"Widget": {"n": 2}}])
        assert merged == {"Widget": {"n": 2}, "A": {}}


class TestResolveDefinitions:
    def test_fixture_files(self):
        typefiles = [str(FIXTURES / "api-types.d.ts"), str(FIXTURES / "extra-types.d.ts")]
        definitions = asyncio.run(resolve_definitions(typefiles))
        assert {"Pet", "NewPet", "Owner", "Widget", "Colour"} <= set(definitions)
        assert definitions["Pet"]["properties"]["owner"] == {"$ref": "#/definitions/Owner"}
        assert definitions["Widget"]["properties"] == {
            "size": {"type": "number"},
            "colour": {"type": "string"},
        }

    def test_second_source_wins_on_collision(self, tmp_path):
        first = tmp_path / "first.d.ts"
        second = tmp_path / "second.d.ts"
        first.write_text("interface Widget { a: string }")
        second.write_text("interface Widget { b: number }")
        definitions = asyncio.run(resolve_definitions([str(first), str(second)]))
        assert list(definitions) == ["Widget"]
        assert list(definitions["Widget"]["properties"]) == ["b"]

    def test_merge_order_follows_configuration_not_completion(self, tmp_path):
        slow = tmp_path / "slow.d.ts"
        fast = tmp_path / "fast.d.ts"
        slow.write_text("slow")
        fast.write_text("fast")

        def converter(text):
            if text == "slow":
                time.sleep(0.05)
            return _components({"Widget": {"from": text}})

        definitions = asyncio.run(resolve_definitions([str(fast), str(slow)], converter))
        assert definitions["Widget"] == {"from": "slow"}

    def test_missing_source_contributes_nothing(self, tmp_path, caplog):
        good = tmp_path / "good.d.ts"
        good.write_text("interface Good { id: string }")
        with caplog.at_level(logging.WARNING):
            definitions = asyncio.run(resolve_definitions([str(tmp_path / "missing.d.ts"), str(good)]))
        assert list(definitions) == ["Good"]
        assert "missing.d.ts" in caplog.text

    def test_invalid_output_contributes_nothing(self, tmp_path):
        source = tmp_path / "a.d.ts"
        source.write_text("anything")
        assert asyncio.run(resolve_definitions([str(source)], lambda text: "not json")) == {}
        assert asyncio.run(resolve_definitions([str(source)], lambda text: "{}")) == {}

    def test_syntax_error_contributes_nothing(self, tmp_path):
        broken = tmp_path / "broken.d.ts"
        broken.write_text("interface Broken {")
        assert asyncio.run(resolve_definitions([str(broken)])) == {}

    def test_default_location(self, tmp_path, monkeypatch):
        types_dir = tmp_path / "src" / "types"
        types_dir.mkdir(parents=True)
        (types_dir / "api-types.d.ts").write_text("interface Default { id: string }")
        monkeypatch.chdir(tmp_path)
        assert list(asyncio.run(resolve_definitions())) == ["Default"]

    def test_empty_list_means_no_sources(self):
        assert asyncio.run(resolve_definitions([])) == {}
