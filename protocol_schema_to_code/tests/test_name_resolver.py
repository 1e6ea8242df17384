from __future__ import annotations

import pytest

from protocol_schema_to_code.pipeline.analyzer.name_resolver import (
    camel_case_to_upper_case,
    capitalize,
    escape_reserved_word,
    synthesized_name,
)


class TestCamelCaseToUpperCase:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("pause", "PAUSE"),
            ("dataBreakpoint", "DATA_BREAKPOINT"),
            ("function breakpoint", "FUNCTION_BREAKPOINT"),
            ("instruction breakpoint", "INSTRUCTION_BREAKPOINT"),
            ("readWrite", "READ_WRITE"),
        ],
    )
    def test_plain_conversion(self, value, expected):
        assert camel_case_to_upper_case(value) == (expected, False)

    def test_all_caps_value_is_kept(self):
        assert camel_case_to_upper_case("MD5") == ("MD5", True)
        assert camel_case_to_upper_case("SHA256") == ("SHA256", True)

    def test_timezone_suffix_is_not_split(self):
        assert camel_case_to_upper_case("timestampUTC") == ("TIMESTAMP_UTC", True)

    def test_only_first_timezone_occurrence_is_fixed(self):
        label, needs_serialized_name = camel_case_to_upper_case("fromUTCToUTC")
        assert label == "FROM_UTC_TO_U_T_C"
        assert needs_serialized_name


class TestEscapeReservedWord:
    @pytest.mark.parametrize("name", ["class", "continue", "default", "enum", "goto", "interface"])
    def test_reserved_words_get_suffix(self, name):
        assert escape_reserved_word(name) == f"{name}_"

    def test_other_names_unchanged(self):
        assert escape_reserved_word("threadId") == "threadId"
        assert escape_reserved_word("import") == "import"

    def test_extra_reserved_words(self):
        assert escape_reserved_word("import", {"import", "from"}) == "import_"


class TestSynthesizedNames:
    def test_capitalize_keeps_rest_of_word(self):
        assert capitalize("kind") == "Kind"
        assert capitalize("presentationHint") == "PresentationHint"
        assert capitalize("") == ""

    def test_synthesized_name(self):
        assert synthesized_name("Source", "presentationHint") == "SourcePresentationHint"
        assert synthesized_name("StoppedEventArguments", "reason") == "StoppedEventArgumentsReason"
