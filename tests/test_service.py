from pathlib import Path

import pytest
import yaml

from auto_swagger.errors import ConfigError
from auto_swagger.service import (
    dump_functions,
    inject_swagger_functions,
    load_service,
    parse_service,
)

FIXTURES = Path(__file__).parent / "fixtures"


class TestLoadService:
    def test_fixture(self):
        service = load_service(FIXTURES / "serverless.yml")
        assert service.service == "pet-service"
        assert list(service.functions) == ["getPet", "createPet", "updateOwner", "listPets", "nightly"]
        assert service.functions["getPet"].handler == "src/pets.get"

    def test_cloudformation_tags_are_accepted(self):
        service = load_service(FIXTURES / "serverless.yml")
        assert service.provider["environment"]["TABLE_NAME"] == "PetsTable"

    def test_typefiles_setting(self):
        service = load_service(FIXTURES / "serverless.yml")
        assert service.swagger_settings.typefiles == [
            "./tests/fixtures/api-types.d.ts",
            "./tests/fixtures/extra-types.d.ts",
        ]

    def test_default_typefiles(self):
        service = parse_service("service: svc\n")
        assert service.swagger_settings.typefiles == ["./src/types/api-types.d.ts"]
        assert service.functions == {}

    def test_service_name_mapping(self):
        service = parse_service("service:\n  name: named\nfunctions:\n  empty:\n")
        assert service.service == "named"
        assert service.functions["empty"].events == []

    def test_empty_typefiles_key_uses_default(self):
        service = parse_service("service: svc\ncustom:\n  swagger:\n    typefiles:\n")
        assert service.swagger_settings.typefiles == ["./src/types/api-types.d.ts"]

    def test_single_typefile_string(self):
        service = parse_service("service: svc\ncustom:\n  swagger:\n    typefiles: ./a.d.ts\n")
        assert service.swagger_settings.typefiles == ["./a.d.ts"]

    def test_invalid_typefiles(self):
        service = parse_service("service: svc\ncustom:\n  swagger:\n    typefiles:\n      nested: map\n")
        with pytest.raises(ConfigError, match="custom.swagger"):
            service.swagger_settings

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_service(tmp_path / "serverless.yml")

    def test_invalid_yaml(self):
        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_service("service: [unclosed\n")

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError):
            parse_service("- a\n- b\n")

    def test_missing_service_name(self):
        with pytest.raises(ConfigError):
            parse_service("functions: {}\n")


class TestInjectSwaggerFunctions:
    def test_adds_documentation_functions(self):
        service = parse_service("service: svc\nfunctions:\n  hello:\n    handler: h.hello\n")
        names = inject_swagger_functions(service)
        assert names == ["swaggerUI", "swaggerJSON"]
        assert list(service.functions) == ["hello", "swaggerUI", "swaggerJSON"]
        assert service.functions["swaggerJSON"].events == [{"http": {"method": "get", "path": "swagger.json"}}]

    def test_overwrites_same_name(self):
        service = parse_service("service: svc\nfunctions:\n  swaggerUI:\n    handler: mine.handler\n")
        inject_swagger_functions(service)
        assert service.functions["swaggerUI"].handler == "swagger/index.handler"


class TestDumpFunctions:
    def test_keeps_unknown_keys(self):
        service = parse_service("service: svc\nfunctions:\n  hello:\n    handler: h.hello\n    timeout: 10\n")
        data = yaml.safe_load(dump_functions(service))
        assert data == {"functions": {"hello": {"handler": "h.hello", "events": [], "timeout": 10}}}
