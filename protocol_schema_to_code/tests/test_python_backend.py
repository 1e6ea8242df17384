from __future__ import annotations

import ast

import pytest

from protocol_schema_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator
from protocol_schema_to_code.pipeline.analyzer import IR, EnumDef, EnumMember, PropertyDef, RecordDef
from protocol_schema_to_code.pipeline.analyzer.ir_nodes import ANY, PrimitiveType, RequestPair, array_of, map_of, primitive, union_of
from protocol_schema_to_code.pipeline.backends import PythonBackend, python_identifier


def extract_python_classes(code: str) -> list[str]:
    tree = ast.parse(code)
    return [node.name for node in tree.body if isinstance(node, ast.ClassDef)]


@pytest.fixture
def backend():
    return PythonBackend(CodeGeneratorConfig())


@pytest.fixture
def dap_code(dap_model, backend):
    return backend.generate(dap_model)


class TestTranslateType:
    def test_primitives(self, backend):
        assert backend.translate_type(primitive(PrimitiveType.STRING)) == "str"
        assert backend.translate_type(primitive(PrimitiveType.NUMBER)) == "float"
        assert backend.translate_type(primitive(PrimitiveType.INTEGER, is_nullable=True)) == "int | None"

    def test_containers(self, backend):
        assert backend.translate_type(array_of(primitive(PrimitiveType.BOOLEAN))) == "list[bool]"
        assert backend.translate_type(map_of(ANY)) == "dict[str, Any]"

    def test_union(self, backend):
        union = union_of((primitive(PrimitiveType.STRING), primitive(PrimitiveType.INTEGER))).with_nullable(True)
        assert backend.translate_type(union) == "str | int | None"

    def test_nullable_any_stays_any(self, backend):
        assert backend.translate_type(ANY.with_nullable(True)) == "Any"


class TestPythonIdentifier:
    @pytest.mark.parametrize(
        "name, expected",
        [
            ("threadId", "threadId"),
            ("continue", "continue_"),
            ("import", "import_"),
            ("default", "default_"),
            ("field", "field_"),
            ("__restart", "restart_"),
            ("1st", "_1st"),
            ("foo-bar", "foo_bar"),
        ],
    )
    def test_identifier(self, name, expected):
        assert python_identifier(name) == expected


class TestDebugProtocolRendering:
    def test_output_is_valid_python(self, dap_code, dap_model):
        classes = extract_python_classes(dap_code)
        assert set(classes) == {e.name for e in dap_model.entities} | {"DebugProtocolServer", "DebugProtocolClient"}

    def test_header(self, dap_code):
        assert dap_code.startswith("from __future__ import annotations\n")
        assert 'SCHEMA_VERSION = "1.2.3"' in dap_code
        assert "from dataclasses import dataclass, field" in dap_code
        assert "from dataclasses_json import config, dataclass_json" in dap_code
        assert "from enum import Enum" in dap_code
        assert "from typing import Any, Protocol" in dap_code

    def test_closed_enum(self, dap_code):
        assert "class ChecksumAlgorithm(str, Enum):" in dap_code
        assert '    MD5 = "MD5"\n' in dap_code
        assert '    TIMESTAMP = "timestamp"\n' in dap_code

    def test_open_enum(self, dap_code):
        assert "class StoppedEventArgumentsReason:\n" in dap_code
        assert '    FUNCTION_BREAKPOINT = "function breakpoint"\n' in dap_code
        assert "Suggested values only" in dap_code

    def test_base_class_precedes_subclass(self, dap_code):
        classes = extract_python_classes(dap_code)
        assert classes.index("Breakpoint") < classes.index("DataBreakpoint")
        assert "@dataclass(kw_only=True)\nclass DataBreakpoint(Breakpoint):" in dap_code

    def test_record_fields(self, dap_code):
        assert "    verified: bool\n" in dap_code
        assert "    id: int | None = None\n" in dap_code
        assert "    source: Source | None = None\n" in dap_code
        assert "    variables: dict[str, str] | None = None\n" in dap_code
        assert "    supportedChecksumAlgorithms: list[ChecksumAlgorithm] | None = None\n" in dap_code
        assert "    presentationHint: SourcePresentationHint | None = None\n" in dap_code
        assert "    adapterData: Any = None\n" in dap_code

    def test_escaped_field_keeps_wire_name(self, dap_code):
        assert '    restart_: Any = field(default=None, metadata=config(field_name="__restart"))\n' in dap_code

    def test_open_enum_field(self, dap_code):
        assert "    # Suggested values: InitializeRequestArgumentsPathFormat\n    pathFormat: str | None = None\n" in dap_code

    def test_descriptions_become_docstrings_and_comments(self, dap_code):
        assert '    """\n    Information about the capabilities of a debug adapter.\n    """' in dap_code
        assert "    # The identifier for the breakpoint.\n    id: int | None = None" in dap_code

    def test_server_interface(self, dap_code):
        assert "class DebugProtocolServer(Protocol):" in dap_code
        assert "    def initialize(self, args: InitializeRequestArguments) -> Capabilities | None:" in dap_code
        assert "    def launch(self, args: dict[str, Any]) -> None:" in dap_code
        assert '    # Sent as "continue"\n    def continue_(self, args: ContinueArguments) -> ContinueResponse:' in dap_code

    def test_client_interface(self, dap_code):
        assert "class DebugProtocolClient(Protocol):" in dap_code
        assert "    def stopped(self, args: StoppedEventArguments) -> None:" in dap_code
        assert "    def initialized(self) -> None:" in dap_code

    def test_response_description_documents_the_return_value(self, dap_code):
        expected = (
            "    def initialize(self, args: InitializeRequestArguments) -> Capabilities | None:\n"
            "        \"\"\"\n"
            "        The `initialize` request is sent as the first request from the client to the debug adapter.\n"
            "\n"
            "        Returns:\n"
            "            Response to `initialize` request.\n"
            "        \"\"\"\n"
            "        ...\n"
        )
        assert expected in dap_code

    def test_interface_names_are_configurable(self, dap_model):
        config = CodeGeneratorConfig(server_interface_name="Adapter", client_interface_name="Client")
        code = PythonBackend(config).generate(dap_model)
        assert "class Adapter(Protocol):" in code
        assert "class Client(Protocol):" in code

    def test_rendering_is_deterministic(self, dap_model, backend):
        assert backend.generate(dap_model) == backend.generate(dap_model)


class TestEdgeCases:
    def test_empty_model(self, backend):
        code = backend.generate(IR())
        ast.parse(code)
        assert "Protocol" not in code
        assert 'SCHEMA_VERSION = ""' in code

    def test_empty_record_and_enum(self, backend):
        code = backend.generate(IR(entities=(RecordDef(name="Empty"), EnumDef(name="Nothing"))))
        ast.parse(code)
        assert "class Empty:\n    pass" in code
        assert "class Nothing(str, Enum):\n    pass" in code

    def test_awkward_descriptions_are_escaped(self, backend):
        record = RecordDef(
            name="Quoted",
            description='Contains """ triple quotes\nand a \\ backslash "',
            properties=(PropertyDef(name="value", type_ref=primitive(PrimitiveType.STRING), is_required=True),),
        )
        code = backend.generate(IR(entities=(record,)))
        tree = ast.parse(code)
        quoted = next(node for node in tree.body if isinstance(node, ast.ClassDef))
        assert 'Contains """ triple quotes' in ast.get_docstring(quoted)

    def test_response_description_without_request_description(self, backend):
        code = backend.generate(IR(requests=(RequestPair(command="ping", response_description="Pong."),)))
        ast.parse(code)
        assert '    def ping(self) -> None:\n        """\n        Returns:\n            Pong.\n        """\n' in code

    def test_colliding_enum_labels(self, backend):
        enum_def = EnumDef(
            name="Kinds",
            members=(EnumMember(value="a b", label="A_B"), EnumMember(value="a_b", label="A_B")),
        )
        code = backend.generate(IR(entities=(enum_def,)))
        assert '    A_B = "a b"\n' in code
        assert '    A_B_ = "a_b"\n' in code

    def test_generation_comment(self, dap_schema):
        code = PipelineGenerator(dap_schema, version="1.2.3", command_line="protocol_schema_to_code dap.json out.py").generate()
        lines = code.splitlines()
        assert lines[0].startswith("# Generated by protocol_schema_to_code ")
        assert "# Command: protocol_schema_to_code dap.json out.py" in lines
        assert "# Schema version: 1.2.3" in lines
        ast.parse(code)

    def test_generation_comment_disabled(self, dap_schema):
        config = CodeGeneratorConfig(add_generation_comment=False)
        code = PipelineGenerator(dap_schema, config).generate()
        assert code.startswith("from __future__ import annotations")

    def test_black_formatting(self, dap_schema):
        pytest.importorskip("black")
        config = CodeGeneratorConfig()
        config.formatter.enabled = True
        code = PipelineGenerator(dap_schema, config).generate()
        ast.parse(code)
        assert "class DebugProtocolServer(Protocol):" in code
