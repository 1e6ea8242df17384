from __future__ import annotations

import pytest

from protocol_schema_to_code.pipeline import CodeGeneratorConfig, PipelineGenerator, SchemaResolutionError
from protocol_schema_to_code.pipeline.analyzer import EnumDef, RecordDef, TypeKind
from protocol_schema_to_code.pipeline.analyzer.ir_nodes import ANY, PrimitiveType, map_of, primitive

EXPECTED_ENTITIES = [
    "InitializeRequestArguments",
    "InitializeRequestArgumentsPathFormat",
    "LaunchRequestArguments",
    "ContinueResponse",
    "ContinueArguments",
    "StoppedEventArguments",
    "StoppedEventArgumentsReason",
    "Capabilities",
    "ChecksumAlgorithm",
    "DataBreakpoint",
    "Breakpoint",
    "Source",
    "SourcePresentationHint",
    "Message",
]


class TestDebugProtocolModel:
    def test_entities_in_first_encountered_order(self, dap_model):
        assert [e.name for e in dap_model.entities] == EXPECTED_ENTITIES

    def test_version_is_passed_through(self, dap_model):
        assert dap_model.version == "1.2.3"

    def test_requests(self, dap_model):
        assert [(p.request_name, p.command) for p in dap_model.requests] == [
            ("InitializeRequest", "initialize"),
            ("LaunchRequest", "launch"),
            ("ContinueRequest", "continue"),
        ]
        initialize, launch, cont = dap_model.requests
        assert initialize.arguments.name == "InitializeRequestArguments"
        assert initialize.return_type.name == "Capabilities"
        assert initialize.return_type.is_nullable
        assert launch.arguments == map_of(ANY)
        assert launch.return_type.kind == TypeKind.VOID
        assert cont.return_type.kind == TypeKind.ANONYMOUS_OBJECT

    def test_events(self, dap_model):
        assert [(p.event_name, p.event) for p in dap_model.events] == [
            ("StoppedEvent", "stopped"),
            ("InitializedEvent", "initialized"),
        ]
        assert dap_model.events[0].body.name == "StoppedEventArguments"
        assert dap_model.events[1].body is None

    def test_plain_record(self, dap_model):
        breakpoint = dap_model.get_entity("Breakpoint")
        assert breakpoint.base_class is None
        assert [(p.name, p.is_required) for p in breakpoint.properties] == [
            ("id", False),
            ("verified", True),
            ("source", False),
        ]
        assert breakpoint.description == "Information about a breakpoint created in `setBreakpoints` requests."

    def test_derived_record_has_only_own_properties(self, dap_model):
        data_breakpoint = dap_model.get_entity("DataBreakpoint")
        assert data_breakpoint.base_class == "Breakpoint"
        assert [p.name for p in data_breakpoint.properties] == ["dataId"]
        assert data_breakpoint.description == "A breakpoint set on a data location."

    def test_closed_enum_definition(self, dap_model):
        algorithms = dap_model.get_entity("ChecksumAlgorithm")
        assert isinstance(algorithms, EnumDef)
        assert not algorithms.is_synthesized
        assert [(m.label, m.value) for m in algorithms.members] == [
            ("MD5", "MD5"),
            ("SHA1", "SHA1"),
            ("SHA256", "SHA256"),
            ("TIMESTAMP", "timestamp"),
        ]

    def test_open_enum_property(self, dap_model):
        reason = dap_model.get_entity("StoppedEventArguments").get_property("reason")
        assert reason.type_ref == primitive(PrimitiveType.STRING, open_enum="StoppedEventArgumentsReason")
        labels = [m.label for m in dap_model.get_entity("StoppedEventArgumentsReason").members]
        assert "FUNCTION_BREAKPOINT" in labels
        assert "GOTO" in labels

    def test_property_types(self, dap_model):
        source = dap_model.get_entity("Source")
        assert source.get_property("presentationHint").type_ref.kind == TypeKind.INLINE_ENUM
        assert source.get_property("adapterData").type_ref == ANY.with_nullable(True)

        message = dap_model.get_entity("Message")
        assert message.get_property("variables").type_ref == map_of(primitive(PrimitiveType.STRING)).with_nullable(True)

        capabilities = dap_model.get_entity("Capabilities")
        checksums = capabilities.get_property("supportedChecksumAlgorithms").type_ref
        assert checksums.kind == TypeKind.ARRAY
        assert checksums.element.name == "ChecksumAlgorithm"

    def test_records_and_enums_views(self, dap_model):
        assert all(isinstance(r, RecordDef) for r in dap_model.records)
        assert {e.name for e in dap_model.enums} == {
            "InitializeRequestArgumentsPathFormat",
            "StoppedEventArgumentsReason",
            "ChecksumAlgorithm",
            "SourcePresentationHint",
        }


class TestResolutionPass:
    def test_resolution_is_deterministic(self, dap_schema):
        first = PipelineGenerator(dap_schema, version="1").resolve()
        second = PipelineGenerator(dap_schema, version="1").resolve()
        assert first == second

    def test_ignore_classes(self, dap_schema):
        config = CodeGeneratorConfig(ignore_classes=["Message", "Source"])
        ir = PipelineGenerator(dap_schema, config).resolve()
        assert ir.get_entity("Message") is None
        assert ir.get_entity("SourcePresentationHint") is None

    def test_first_error_aborts_the_pass(self, dap_schema):
        dap_schema["definitions"]["Breakpoint"]["properties"]["source"]["$ref"] = "#/definitions/Missing"
        with pytest.raises(SchemaResolutionError) as exc_info:
            PipelineGenerator(dap_schema).resolve()
        assert exc_info.value.type_name == "Breakpoint"

    def test_schema_is_not_modified(self, dap_schema):
        before = repr(dap_schema)
        PipelineGenerator(dap_schema).resolve()
        assert repr(dap_schema) == before
