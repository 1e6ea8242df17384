from __future__ import annotations

import json
from pathlib import Path

import pytest

from protocol_schema_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator, SchemaAnalyzer
from protocol_schema_to_code.pipeline.schema_ast import SchemaParser

TEST_DATA = Path(__file__).parent / "test_data"


@pytest.fixture
def dap_schema_path() -> Path:
    return TEST_DATA / "debug_protocol.json"


@pytest.fixture
def dap_schema(dap_schema_path):
    with open(dap_schema_path) as f:
        return json.load(f)


@pytest.fixture
def dap_model(dap_schema):
    """The resolved model of the debug protocol test schema."""
    return PipelineGenerator(dap_schema, version="1.2.3").resolve()


@pytest.fixture
def base_definitions():
    """Minimal stand-ins for the four base message types."""
    return {name: {"type": "object"} for name in ("ProtocolMessage", "Request", "Event", "Response")}


@pytest.fixture
def resolve():
    """Resolve a `definitions` mapping with the given config options."""

    def _resolve(definitions, **config_options):
        config = CodeGeneratorConfig(**config_options)
        ast = SchemaParser(config.open_enum_marker).parse({"definitions": definitions})
        return SchemaAnalyzer(config).analyze(ast)

    return _resolve
