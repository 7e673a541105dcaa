# =============================================================================
# tests/test_array_handlers.py - Array and Structure Alter Tests
# =============================================================================
# This module contains tests for:
# - array: splitting and nested sub-steps
# - clean, jsonParse, jsonStringify
# - normalize and list (listify)
# =============================================================================

from __future__ import annotations

import pytest

from alterations.exceptions import SoftMismatch
from alterations.handlers.arrays import (
    alter_array,
    alter_clean,
    alter_json_parse,
    alter_json_stringify,
)
from alterations.handlers.structure import alter_listify, alter_normalize, listify
from alterations.types import CleanFlag


# =============================================================================
# array
# =============================================================================

class TestArray:
    """Test the array alter."""

    def test_split_then_clean(self, make_context):
        result = alter_array("a;;b; ;c", ("clean",), make_context())

        assert result.value == ["a", "b", "c"]
        assert result.modified is True

    def test_split_without_sub_steps(self, make_context):
        assert alter_array("a;;b", (), make_context()).value == ["a", "", "b"]

    @pytest.mark.parametrize("value", ["", None, 5, {"a": 1}])
    def test_non_list_becomes_empty_list(self, make_context, value):
        result = alter_array(value, (), make_context())

        assert result.value == []
        assert result.modified is True

    def test_existing_list_kept(self, make_context):
        assert alter_array(["x", "y"], (), make_context()).value == ["x", "y"]

    def test_whole_list_sub_step(self, make_context):
        assert alter_array("1;2;x", ("int",), make_context()).value == [1, 2, 0]

    def test_elementwise_call_sub_step(self, make_context):
        result = alter_array("a;;b", ("clean", ["call", "upper"]), make_context())

        assert result.value == ["A", "B"]

    def test_elementwise_get_sub_step(self, make_context):
        result = alter_array("1;9", ("int", ["get", "users"]), make_context())

        assert result.value[0]["name"] == "Ada"
        assert result.value[1] is None

    def test_elementwise_json_parse_sub_step(self, make_context):
        result = alter_array('{"a":1};[2]', ("jsonParse",), make_context())

        assert result.value == [{"a": 1}, [2]]

    def test_normalize_sub_step_emptying_the_list(self, make_context):
        assert alter_array(" ;", ("normalize",), make_context()).value == []

    def test_unsupported_sub_step_ignored(self, make_context):
        assert alter_array("a;b", ("url", "bogus"), make_context()).value == ["a", "b"]


# =============================================================================
# clean
# =============================================================================

class TestClean:
    """Test the clean alter."""

    def test_list(self, make_context):
        result = alter_clean([None, "", "  ", "a", 0], (), make_context())

        assert result.value == ["a", 0]
        assert result.modified is True

    def test_nothing_to_drop(self, make_context):
        result = alter_clean(["a"], (), make_context())

        assert result.value == ["a"]
        assert result.modified is False

    def test_map(self, make_context):
        assert alter_clean({"a": None, "b": 1}, (), make_context()).value == {"b": 1}

    def test_scalar_unchanged(self, make_context):
        result = alter_clean("text", (), make_context())

        assert result.value == "text"
        assert result.modified is False


# =============================================================================
# jsonParse / jsonStringify
# =============================================================================

class TestJson:
    """Test the jsonParse and jsonStringify alters."""

    def test_parse_string(self, make_context):
        result = alter_json_parse('{"a": 1}', (), make_context())

        assert result.value == {"a": 1}
        assert result.modified is True

    def test_parse_malformed_raises_soft_mismatch(self, make_context):
        with pytest.raises(SoftMismatch):
            alter_json_parse("{bad", (), make_context())

    def test_parse_list_elementwise(self, make_context):
        result = alter_json_parse(["[1]", 2, "{bad"], (), make_context())

        assert result.value == [[1], 2, "{bad"]
        assert result.modified is True

    def test_parse_non_string(self, make_context):
        assert alter_json_parse(5, (), make_context()).modified is False

    def test_stringify(self, make_context):
        result = alter_json_stringify({"a": 1}, (), make_context())

        assert result.value == '{"a": 1}'
        assert result.modified is True

    def test_stringify_options(self, make_context):
        result = alter_json_stringify({"a": [1, 2]}, ({"separators": (",", ":")},), make_context())

        assert result.value == '{"a":[1,2]}'

    def test_stringify_unserializable(self, make_context):
        with pytest.raises(SoftMismatch):
            alter_json_stringify(object(), (), make_context())


# =============================================================================
# normalize
# =============================================================================

class TestNormalizeAlter:
    """Test the normalize alter."""

    def test_trims_string(self, make_context):
        result = alter_normalize("  x ", (), make_context())

        assert result.value == "x"
        assert result.modified is True

    def test_already_normal(self, make_context):
        assert alter_normalize("x", (), make_context()).modified is False

    def test_emptied_list_is_none(self, make_context):
        assert alter_normalize(["", None], (), make_context()).value is None

    def test_flags_argument(self, make_context):
        assert alter_normalize(["", None], (CleanFlag.DEFAULT,), make_context()).value == []

    def test_invalid_flags(self, make_context):
        with pytest.raises(SoftMismatch):
            alter_normalize("x", ("abc",), make_context())

    def test_idempotent(self, make_context):
        context = make_context()
        value = {"a": [" ", {"b": None}], "c": "  keep  ", "d": 0}

        once = alter_normalize(value, (), context)
        twice = alter_normalize(once.value, (), context)

        assert twice.value == once.value
        assert twice.modified is False


# =============================================================================
# list
# =============================================================================

class TestListify:
    """Test the list alter."""

    def test_custom_separators(self, make_context):
        result = alter_listify("a; b;;c", (";", ", "), make_context())

        assert result.value == "a, b, c"
        assert result.modified is True

    def test_default_separators(self, make_context):
        assert alter_listify("a;b", (), make_context()).value == "a\nb"

    def test_empty_input_yields_default(self, make_context):
        assert alter_listify(";;;", (";", "\n", "N/A"), make_context()).value == "N/A"

    def test_empty_input_without_default(self, make_context):
        assert alter_listify("", (), make_context()).value is None

    def test_none_unchanged(self, make_context):
        result = alter_listify(None, (), make_context())

        assert result.value is None
        assert result.modified is False

    def test_list_input(self):
        assert listify(["x", " ", None, "y"], ";", "|") == "x|y"
