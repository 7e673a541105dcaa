# =============================================================================
# alterations/engine.py - Alteration Engine
# =============================================================================
# Applies an alters map to documents.
#
# An alters map names, per property, the chain of operations to fold over
# its value:
#     {
#         "price": "float",
#         "tags": ["array", "clean"],
#         "url": ["url", "/products"],
#         "owner": [["get", "users"], "normalize"],
#     }
#
# Documents may be maps (dicts, attribute objects) or lists of them; lists
# are altered element by element. The input document is never mutated.
# =============================================================================

from __future__ import annotations

import logging
import time
from collections.abc import Mapping
from typing import Any

from alterations.accessors import (
    copy_document,
    get_key_value,
    has_key_value,
    is_document,
    is_list,
    set_key_value,
)
from alterations.definitions import compile_alters, parse_definition, parse_sub_steps
from alterations.exceptions import AlterationError, AlterationStepError, InvalidDefinitionError
from alterations.handlers.arrays import ARRAY_SUB_STEPS
from alterations.normalize import clean
from alterations.registry import dispatch
from alterations.resolver import DependencyResolver
from alterations.types import (
    MATERIALIZING_TAGS,
    AlterationResult,
    AlterContext,
    AlterStep,
    AlterTag,
    AltersMap,
    CleanFlag,
    ContainerProtocol,
    Document,
    StepRecord,
)
from app.config import settings

logger = logging.getLogger(__name__)


class AlterationEngine:
    """
    Folds per-property operation chains over documents.

    Usage:
        engine = AlterationEngine(container, alters={"price": "float"})

        engine.alter({"price": "9.5"})            # {"price": 9.5}
        engine.alter([{"price": "1"}, {"price": "2"}])

        result = engine.execute(document)
        print(result.modified_keys, result.total_duration_ms)

    The engine keeps no per-call state, so one instance can be shared.
    """

    def __init__(
        self,
        container: ContainerProtocol | None = None,
        alters: AltersMap | None = None,
        alter_key: str | None = None,
        bind_alters: Mapping[str, Any] | None = None,
        logger: logging.Logger | None = None,
    ):
        """
        Initialize the engine.

        Args:
            container: Service container used to resolve names in definitions
            alters: Default alters map used when alter() gets none
            alter_key: Identifier property used by get / url (default ALTER_KEY)
            bind_alters: Alters applied by alter_bind_vars(), optionally
                         grouped by context name
            logger: Receives soft-mismatch warnings
        """
        self.container = container
        self.resolver = DependencyResolver(container)
        self.alters = dict(alters or {})
        self.alter_key = alter_key or settings.ALTER_KEY
        self.bind_alters = dict(bind_alters or {})
        self.logger = logger or logging.getLogger("alterations")

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def alter(self, document: Document, alters: AltersMap | None = None) -> Document:
        """
        Alter a document, or each document of a list.

        Args:
            document: Map, attribute object, or list of them. Anything else
                      is returned as is.
            alters: Alters map; defaults to the one given at construction

        Returns:
            The altered copy of the document

        Raises:
            AlterationError: On infra-level failures (container, schema
                             validation, refused write-back, unexpected
                             handler errors)
        """
        return self.execute(document, alters).document

    def execute(self, document: Document, alters: AltersMap | None = None) -> AlterationResult:
        """
        Alter a document and report every executed step.

        Returns:
            AlterationResult with the altered document and step records
        """
        start_time = time.time()

        chains = compile_alters(self.alters if alters is None else alters)
        steps: list[StepRecord] = []

        altered = self._alter_document(document, chains, steps, index=None)

        return AlterationResult(
            document=altered,
            steps=steps,
            total_duration_ms=(time.time() - start_time) * 1000,
        )

    def alter_bind_vars(
        self,
        bind_vars: Mapping[str, Any] | None,
        context: str | None = None,
        flags: CleanFlag = CleanFlag.DEFAULT,
    ) -> Any:
        """
        Alter query bind variables, then clean them.

        bind_alters may group alters by context:
            {"get": {"id": "int"}, "list": {"limit": "int", "tags": "array"}}

        Args:
            bind_vars: Variables to alter; non-maps are returned as is
            context: Name of the group to apply; the top-level alters are
                     used when absent
            flags: CleanFlag set applied to the altered variables

        Example:
            engine = AlterationEngine(bind_alters={"get": {"id": "int"}})
            engine.alter_bind_vars({"id": "42", "q": ""}, "get")   # {"id": 42}
        """
        if bind_vars is None or not isinstance(bind_vars, Mapping):
            return bind_vars

        alters: Mapping[str, Any] = self.bind_alters
        if context is not None and isinstance(alters.get(context), Mapping):
            alters = alters[context]
        else:
            # Without a selected context, grouped entries are not alters
            alters = {key: definition for key, definition in alters.items()
                      if not isinstance(definition, Mapping)}

        if not alters:
            return bind_vars

        chains = compile_alters(alters)
        chains = {key: chain for key, chain in chains.items() if has_key_value(bind_vars, key)}

        altered = self._alter_document(bind_vars, chains, [], index=None)
        return clean(altered, CleanFlag(flags))

    def validate_alters(self, alters: AltersMap | None = None) -> tuple[bool, list[str]]:
        """
        Validate an alters map without executing it.

        Checks that every definition parses and only names known operations,
        including the nested sub-steps of array alters.

        Returns:
            Tuple of (is_valid, list_of_errors)
        """
        errors = []

        for key, definition in (self.alters if alters is None else alters).items():
            try:
                chain = parse_definition(definition, key)
            except InvalidDefinitionError as e:
                errors.append(f"'{key}': {e.message}")
                continue

            for position, step in enumerate(chain):
                if not step.known:
                    errors.append(f"'{key}' step {position}: Unknown alter '{step.name}'")
                    continue
                if step.tag == AlterTag.ARRAY_SPLIT:
                    errors.extend(self._validate_sub_steps(key, position, step))

        return len(errors) == 0, errors

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @staticmethod
    def _validate_sub_steps(key: str, position: int, step: AlterStep) -> list[str]:
        errors = []
        try:
            sub_steps = parse_sub_steps(step.args, key)
        except InvalidDefinitionError as e:
            return [f"'{key}' step {position}: {e.message}"]

        for sub_step in sub_steps:
            if not sub_step.known or sub_step.tag not in ARRAY_SUB_STEPS:
                errors.append(
                    f"'{key}' step {position}: '{sub_step.name}' is not allowed inside 'array'"
                )
        return errors

    def _alter_document(
        self,
        document: Document,
        chains: dict[str, list[AlterStep]],
        steps: list[StepRecord],
        index: int | None,
    ) -> Document:
        if not chains or not is_document(document):
            return document

        if is_list(document):
            altered = [
                self._alter_document(item, chains, steps, index=i)
                for i, item in enumerate(document)
            ]
            return tuple(altered) if isinstance(document, tuple) else altered

        snapshot = document
        working = copy_document(document)

        for key, chain in chains.items():
            if not has_key_value(snapshot, key) and not self._materializes(chain):
                continue

            context = AlterContext(
                key=key,
                document=snapshot,
                resolver=self.resolver,
                logger=self.logger,
                alter_key=self.alter_key,
                index=index,
            )

            value, modified = self._fold(get_key_value(working, key), chain, context, steps)
            if modified:
                working = self._write(working, key, value, chain, index)

        return working

    @staticmethod
    def _write(document: Any, key: str, value: Any, chain: list[AlterStep], index: int | None) -> Any:
        """Write an altered value back; documents that refuse it raise AlterationStepError."""
        try:
            return set_key_value(document, key, value)
        except Exception as e:
            raise AlterationStepError(
                f"Cannot write altered value: {type(e).__name__}: {e}",
                key=key,
                operation=chain[-1].name,
                index=index,
            ) from e

    @staticmethod
    def _materializes(chain: list[AlterStep]) -> bool:
        return any(step.known and step.tag in MATERIALIZING_TAGS for step in chain)

    def _fold(
        self,
        value: Any,
        chain: list[AlterStep],
        context: AlterContext,
        steps: list[StepRecord],
    ) -> tuple[Any, bool]:
        """Run a chain left to right; returns (value, any step modified)."""
        modified = False

        for step in chain:
            step_start = time.time()

            try:
                result = dispatch(step.tag, value, step.args, context)
            except AlterationError:
                raise
            except Exception as e:
                raise AlterationStepError(
                    f"{type(e).__name__}: {e}",
                    key=context.key,
                    operation=step.name,
                    index=context.index,
                ) from e

            value = result.value
            modified = modified or result.modified

            steps.append(StepRecord(
                key=context.key,
                operation=step.name,
                modified=result.modified,
                index=context.index,
                duration_ms=(time.time() - step_start) * 1000,
            ))
            where = context.key if context.index is None else f"{context.key}[{context.index}]"
            logger.debug(f"Alter '{step.name}' on '{where}' modified={result.modified}")

        return value, modified
