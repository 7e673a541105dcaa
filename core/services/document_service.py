# =============================================================================
# core/services/document_service.py - Document Models
# =============================================================================
# Document stores the get alter looks related documents up in. Each one
# exposes get(criteria) with criteria = {"key": <field>, "value": <value>}
# and returns the matching document, or None.
#
#   InMemoryDocumentModel   list of dicts held in memory (tests, fixtures)
#   SupabaseDocumentModel   one Supabase table
#
# Register them in the container under the name used in alter definitions:
#   container.set("users", SupabaseDocumentModel("users"))
#   alters = {"owner": ["get", "users"]}
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Iterable

from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def _lookup(criteria: dict[str, Any], default_key: str) -> tuple[str, Any]:
    return criteria.get("key") or default_key, criteria.get("value")


class InMemoryDocumentModel:
    """
    Document store backed by a list of dicts.

    Returned documents are copies, so altering them never changes the store.

    Example:
        users = InMemoryDocumentModel([{"id": 1, "name": "Ada"}])
        users.get({"key": "id", "value": 1})   # {"id": 1, "name": "Ada"}
        users.get({"value": 2})                # None
    """

    def __init__(self, documents: Iterable[dict[str, Any]] = (), key: str = "id"):
        self.key = key
        self.documents: list[dict[str, Any]] = [dict(document) for document in documents]

    def get(self, criteria: dict[str, Any]) -> dict[str, Any] | None:
        field, value = _lookup(criteria, self.key)
        for document in self.documents:
            if field in document and document[field] == value:
                return dict(document)
        return None

    def add(self, document: dict[str, Any]) -> InMemoryDocumentModel:
        self.documents.append(dict(document))
        return self

    def __len__(self) -> int:
        return len(self.documents)


class SupabaseDocumentModel:
    """
    Document store reading one Supabase table.

    Args:
        table: Table name
        key: Column matched when the criteria carry no key
        columns: PostgREST select expression
    """

    def __init__(self, table: str, key: str = "id", columns: str = "*"):
        self.table = table
        self.key = key
        self.columns = columns

    def get(self, criteria: dict[str, Any]) -> dict[str, Any] | None:
        """
        Fetch one row.

        Raises:
            SupabaseClientError: If the query fails
        """
        field, value = _lookup(criteria, self.key)
        logger.debug(f"Looking up {self.table}.{field}={value!r}")
        return SupabaseClient.fetch_document(self.table, field, value, columns=self.columns)

    def __repr__(self) -> str:
        return f"SupabaseDocumentModel(table={self.table!r}, key={self.key!r})"
