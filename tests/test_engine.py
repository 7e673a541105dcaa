# =============================================================================
# tests/test_engine.py - Alteration Engine Tests
# =============================================================================
# This module contains tests for:
# - Folding chains over properties, write-back and the absent-key rule
# - List fan-out and non-mutation of the input
# - Error propagation and wrapping
# - execute() telemetry, validate_alters() and alter_bind_vars()
# =============================================================================

from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from alterations import (
    AlterationEngine,
    AlterationStepError,
    AlterStep,
    AlterTag,
    CleanFlag,
    DependencyResolutionError,
    HydrationError,
)
from lib.container import Container
from tests.schemas import FrozenProduct, Product, Row, User


# =============================================================================
# Core Properties
# =============================================================================

class TestCoreProperties:
    """Behavior every alters map relies on."""

    def test_unknown_tag_is_identity(self, engine):
        value = {"nested": [1, 2]}

        result = engine.alter({"a": value}, {"a": "bogus"})

        assert result["a"] is value

    def test_value_equal_is_not_modified(self, engine):
        result = engine.execute({"a": 1}, {"a": ["value", 1]})

        assert result.document == {"a": 1}
        assert result.modified is False
        assert result.steps[0].modified is False

    def test_not_is_an_involution(self, engine):
        assert engine.alter({"f": True}, {"f": ["not", "not"]}) == {"f": True}
        assert engine.alter({"f": [True, False]}, {"f": ["not", "not"]}) == {"f": [True, False]}

    def test_normalize_is_idempotent(self, engine):
        document = {"data": {"a": " ", "b": [None, "x "], "c": {"d": ""}}}

        once = engine.alter(document, {"data": "normalize"})
        twice = engine.alter(document, {"data": ["normalize", "normalize"]})

        assert once == twice == {"data": {"b": ["x "]}}

    @pytest.mark.parametrize("data,flags,expected", [
        # Tuples come back as lists
        (({"a": None}, " ", ("x", "")), None, [["x"]]),
        # FALSY drops 0 and False, then the emptied list
        ({"a": 0, "b": [False, "", [0]], "c": "y"},
         CleanFlag.DEFAULT | CleanFlag.FALSY | CleanFlag.RETURN_NULL, {"c": "y"}),
        # Containers emptied at every level collapse to None
        ({"x": {"y": {"z": [None, {"w": ""}]}}}, None, None),
    ])
    def test_normalize_is_idempotent_across_shapes(self, engine, data, flags, expected):
        step = ["normalize", flags] if flags is not None else "normalize"

        once = engine.alter({"data": data}, {"data": step})
        again = engine.execute(once, {"data": step})

        assert once == {"data": expected}
        assert again.document == once
        assert again.modified is False

    def test_array_split_then_clean(self, engine):
        result = engine.alter({"tags": "a;;b; ;c"}, {"tags": ["array", "clean"]})

        assert result == {"tags": ["a", "b", "c"]}

    def test_get_miss_and_null(self, engine):
        alters = {"owner": ["get", "users"]}

        assert engine.alter({"owner": 99}, alters) == {"owner": None}
        assert engine.alter({"owner": None}, alters) == {"owner": None}
        assert engine.alter({"owner": 1}, alters)["owner"]["name"] == "Ada"

    def test_listify_default(self, engine):
        result = engine.alter({"items": ";;"}, {"items": ["list", ";", ", ", "none"]})

        assert result == {"items": "none"}

    def test_list_fan_out(self, engine):
        documents = [{"p": "1"}, {"p": "2.5"}, {"q": "x"}]

        result = engine.alter(documents, {"p": "float"})

        assert result == [{"p": 1.0}, {"p": 2.5}, {"q": "x"}]

    def test_list_of_scalars_unchanged(self, engine):
        assert engine.alter([{"p": "1"}, 5, None], {"p": "int"}) == [{"p": 1}, 5, None]


# =============================================================================
# Folding and Write-back
# =============================================================================

class TestFolding:
    """Chains, write-back and absent properties."""

    def test_chain_runs_left_to_right(self, engine):
        assert engine.alter({"v": "3.7"}, {"v": ["float", "int"]}) == {"v": 3}
        assert engine.alter({"v": "3.7"}, {"v": ["int", "float"]}) == {"v": 3.0}

    def test_nested_array_chain(self, engine):
        result = engine.alter({"flags": "1;;0"}, {"flags": [["array", "clean", "int"], "not"]})

        assert result == {"flags": [False, True]}

    def test_explicit_steps(self, engine):
        alters = {"v": [AlterStep(AlterTag.INT), AlterStep(AlterTag.VALUE, (7,))]}

        assert engine.alter({"v": "1"}, alters) == {"v": 7}

    def test_absent_key_skipped(self, engine):
        assert engine.alter({"a": 1}, {"b": "int"}) == {"a": 1}

    def test_materializing_tags_create_keys(self, engine):
        result = engine.alter(
            {"id": 7},
            {
                "status": ["value", "active"],
                "url": ["url", "/users"],
                "label": ["map", lambda document, container, key, value, args: f"#{document['id']}"],
            },
        )

        assert result == {
            "id": 7,
            "status": "active",
            "url": "https://api.test/users/7",
            "label": "#7",
        }

    def test_input_never_mutated(self, engine):
        document = {"price": "9.5", "tags": "a;b"}
        snapshot = dict(document)

        engine.alter(document, {"price": "float", "tags": "array", "new": ["value", 1]})

        assert document == snapshot

    def test_attribute_objects(self, engine):
        document = SimpleNamespace(price="2")

        result = engine.alter(document, {"price": "int"})

        assert result.price == 2
        assert document.price == "2"

    def test_pydantic_document(self, engine):
        document = Product(id=1, name="x")

        result = engine.alter(document, {"name": ["call", "upper"], "status": ["value", "new"]})

        assert isinstance(result, Product)
        assert result.name == "X"
        assert result.status == "new"
        assert document.name == "x"
        assert not hasattr(document, "status")

    def test_frozen_pydantic_document(self, engine):
        document = FrozenProduct(id=1, name="x")

        result = engine.alter(document, {"name": ["call", "upper"]})

        assert result == FrozenProduct(id=1, name="X")
        assert document.name == "x"

    def test_frozen_dataclass_document(self, engine):
        document = Row(id="7")

        result = engine.alter(document, {"id": "int"})

        assert result == Row(id=7)
        assert document.id == "7"

    def test_frozen_dataclass_list(self, engine):
        result = engine.alter((Row(id="1"), Row(id="2")), {"id": "int"})

        assert result == (Row(id=1), Row(id=2))

    def test_map_sees_pre_alteration_document(self, engine):
        seen = []

        def capture(document, container, key, value, args):
            seen.append(document["price"])
            return value

        engine.alter({"price": "9.5", "copy": None}, {"price": "float", "copy": ["map", capture]})

        assert seen == ["9.5"]

    def test_hydrate_from_get(self, engine):
        result = engine.alter({"owner": 2}, {"owner": [["get", "users"], ["hydrate", "User"]]})

        assert isinstance(result["owner"], User)
        assert result["owner"].email is None

    def test_non_documents_returned_as_is(self, engine):
        assert engine.alter(5, {"a": "int"}) == 5
        assert engine.alter(None, {"a": "int"}) is None
        assert engine.alter("text", {"a": "int"}) == "text"

    def test_empty_alters_returns_same_document(self, engine):
        document = {"a": "1"}

        assert engine.alter(document, {}) is document

    def test_default_alters(self, container):
        engine = AlterationEngine(container, alters={"a": "int"})

        assert engine.alter({"a": "4"}) == {"a": 4}

    def test_alter_key(self, container):
        engine = AlterationEngine(container, alter_key="slug")

        result = engine.alter({"owner": "ada", "slug": "x"}, {"owner": ["get", "users"]})

        assert result["owner"]["id"] == 1


# =============================================================================
# Errors
# =============================================================================

class TestErrors:
    """Failure handling."""

    def test_soft_mismatch_logged_on_engine_logger(self, container, caplog):
        # Arrange
        engine = AlterationEngine(container, logger=logging.getLogger("alterations.audit"))

        # Act
        with caplog.at_level(logging.WARNING, logger="alterations.audit"):
            result = engine.alter({"meta": "{bad"}, {"meta": "jsonParse"})

        # Assert
        assert result == {"meta": "{bad"}
        assert any(record.name == "alterations.audit" for record in caplog.records)

    def test_unexpected_exception_wrapped(self, engine):
        def explode(value):
            raise ValueError("boom")

        with pytest.raises(AlterationStepError) as exc_info:
            engine.alter([{"a": 1}, {"a": 2}], {"a": ["call", explode]})

        error = exc_info.value
        assert error.key == "a"
        assert error.operation == "call"
        assert error.index == 0
        assert isinstance(error.__cause__, ValueError)

    def test_refused_write_wrapped(self, engine):
        """A document that cannot take the altered property raises a typed error."""
        with pytest.raises(AlterationStepError) as exc_info:
            engine.alter([Row(id=1), Row(id=2)], {"status": ["value", "new"]})

        error = exc_info.value
        assert error.key == "status"
        assert error.operation == "value"
        assert error.index == 0
        assert isinstance(error.__cause__, TypeError)

    def test_failing_store_yields_none(self, container, caplog):
        # Arrange
        store = MagicMock()
        store.get.side_effect = RuntimeError("down")
        container.set("broken_store", store)

        # Act
        with caplog.at_level(logging.WARNING, logger="alterations"):
            result = AlterationEngine(container).alter({"owner": 1}, {"owner": ["get", "broken_store"]})

        # Assert
        assert result == {"owner": None}
        warning = next(r for r in caplog.records if r.levelno == logging.WARNING)
        assert warning.alter_operation == "get"
        assert warning.alter_details["criteria"] == {"key": "id", "value": 1}

    def test_hydration_error_propagates(self, engine):
        with pytest.raises(HydrationError):
            engine.alter({"owner": {"name": "x"}}, {"owner": ["hydrate", "User"]})

    def test_dependency_resolution_error_propagates(self):
        container = Container().factory("fn", lambda c: 1 / 0)

        with pytest.raises(DependencyResolutionError):
            AlterationEngine(container).alter({"a": 1}, {"a": ["call", "fn"]})


# =============================================================================
# execute()
# =============================================================================

class TestExecute:
    """Step telemetry."""

    def test_records_every_step(self, engine):
        result = engine.execute(
            [{"a": "1", "b": "x"}, {"a": 2}],
            {"a": "int", "b": "normalize"},
        )

        assert [(s.key, s.operation, s.index, s.modified) for s in result.steps] == [
            ("a", "int", 0, True),
            ("b", "normalize", 0, False),
            ("a", "int", 1, False),
        ]
        assert result.modified_keys == ["a"]
        assert result.total_duration_ms >= 0
        assert all(step.duration_ms >= 0 for step in result.steps)

    def test_single_document_has_no_index(self, engine):
        result = engine.execute({"a": "1"}, {"a": "int"})

        assert result.steps[0].index is None
        assert result.document == {"a": 1}


# =============================================================================
# validate_alters()
# =============================================================================

class TestValidateAlters:
    """Validation without execution."""

    def test_valid(self, engine):
        valid, errors = engine.validate_alters({
            "a": "int",
            "b": [["array", "clean", ["call", "upper"]], "not"],
            "c": ["url", "/x"],
        })

        assert valid is True
        assert errors == []

    def test_invalid(self, engine):
        valid, errors = engine.validate_alters({
            "a": "int",
            "b": "bogus",
            "c": [],
            "d": [["array", "url"], "int"],
        })

        assert valid is False
        assert len(errors) == 3
        assert any("'b'" in error and "bogus" in error for error in errors)
        assert any("'c'" in error for error in errors)
        assert any("'url' is not allowed inside 'array'" in error for error in errors)

    def test_defaults_to_engine_alters(self, container):
        engine = AlterationEngine(container, alters={"a": "nope"})

        assert engine.validate_alters()[0] is False


# =============================================================================
# alter_bind_vars()
# =============================================================================

class TestBindVars:
    """Bind variable alteration and cleanup."""

    @pytest.fixture
    def bind_engine(self, container):
        return AlterationEngine(
            container,
            bind_alters={
                "get": {"id": "int"},
                "list": {"limit": "int", "tags": ["array", "clean"]},
                "limit": "int",
            },
        )

    def test_context_group(self, bind_engine):
        assert bind_engine.alter_bind_vars({"id": "42", "q": ""}, "get") == {"id": 42}

    def test_top_level_without_context(self, bind_engine):
        assert bind_engine.alter_bind_vars({"limit": "5", "q": None}) == {"limit": 5}

    def test_unknown_context_uses_top_level(self, bind_engine):
        assert bind_engine.alter_bind_vars({"limit": "5"}, "missing") == {"limit": 5}

    def test_nested_lists_cleaned(self, bind_engine):
        result = bind_engine.alter_bind_vars({"limit": "10", "tags": ";;"}, "list")

        assert result == {"limit": 10}

    def test_absent_keys_not_created(self, container):
        engine = AlterationEngine(container, bind_alters={"x": ["value", 1]})

        assert engine.alter_bind_vars({"y": 2}) == {"y": 2}

    def test_flags(self, bind_engine):
        assert bind_engine.alter_bind_vars({"id": "1", "q": ""}, "get", CleanFlag.NULLS) == {"id": 1, "q": ""}

    def test_non_maps_returned_as_is(self, bind_engine):
        assert bind_engine.alter_bind_vars(None) is None
        assert bind_engine.alter_bind_vars([{"id": "1"}], "get") == [{"id": "1"}]
