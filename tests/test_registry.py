# =============================================================================
# tests/test_registry.py - Handler Registry Tests
# =============================================================================
# This module contains tests for:
# - Handler registration and lookup
# - Category listing
# - dispatch() fallbacks: unknown tags and soft mismatches
# =============================================================================

from __future__ import annotations

import logging

import pytest

from alterations import dispatch, get_handler, get_handler_info, list_handlers, register_handler
from alterations.handlers.scalars import alter_int
from alterations.types import AlterResult, AlterTag


class TestRegistration:
    """Test the global handler registry."""

    def test_every_tag_has_a_handler(self):
        assert set(list_handlers()) == {tag.value for tag in AlterTag}

    def test_list_by_category(self):
        assert set(list_handlers("scalar")) == {"value", "not", "int", "float"}
        assert set(list_handlers("document")) == {"call", "get", "hydrate", "map", "url"}

    def test_get_handler_by_string_or_enum(self):
        assert get_handler("int") is alter_int
        assert get_handler(AlterTag.INT) is alter_int

    def test_get_unknown_handler(self):
        assert get_handler("bogus") is None
        assert get_handler_info("bogus") is None

    def test_handler_info(self):
        info = get_handler_info(AlterTag.JSON_PARSE)

        assert info.tag == AlterTag.JSON_PARSE
        assert info.elementwise is True
        assert get_handler_info("int").elementwise is False

    def test_duplicate_registration_rejected(self):
        with pytest.raises(ValueError, match="already registered"):
            register_handler(AlterTag.INT, "scalar", "duplicate")(
                lambda value, args, context: AlterResult(value)
            )

        assert get_handler(AlterTag.INT) is alter_int


class TestDispatch:
    """Test dispatch()."""

    def test_unknown_tag_is_identity(self, make_context):
        """An unknown operation returns the very same value, unmodified."""
        value = {"nested": [1, 2]}

        result = dispatch("bogus", value, (), make_context())

        assert result.value is value
        assert result.modified is False

    def test_known_tag_runs_handler(self, make_context):
        result = dispatch(AlterTag.INT, "12", (), make_context())

        assert result.value == 12
        assert result.modified is True

    def test_soft_mismatch_keeps_value_and_warns(self, make_context, caplog):
        # Arrange
        context = make_context(key="payload", index=3)

        # Act
        with caplog.at_level(logging.WARNING):
            result = dispatch("jsonParse", "{bad", (), context)

        # Assert
        assert result.value == "{bad"
        assert result.modified is False

        records = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(records) == 1
        assert records[0].alter_key == "payload"
        assert records[0].alter_operation == "jsonParse"
        assert records[0].alter_index == 3
        assert "malformed JSON" in records[0].getMessage()
