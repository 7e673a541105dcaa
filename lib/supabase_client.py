# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for the Supabase reads the alteration
# pipeline needs. It implements the singleton pattern to reuse a single
# client connection and provides:
# - Single-document fetches by key/value (get alter lookups)
# - Multi-document fetches for a list of values
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   user = SupabaseClient.fetch_document("users", "id", 42)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any

from supabase import create_client, Client

from app.config import settings
from lib.utils import ApplicationError

# Set up logging for this module
logger = logging.getLogger(__name__)

# PostgREST code returned by .single() when no row matches
NO_ROWS_CODE = "PGRST116"


class SupabaseClientError(ApplicationError):
    """Error during Supabase operations."""

    def __init__(self, message: str, code: str = "SUPABASE_ERROR", **kwargs):
        super().__init__(message, code=code, **kwargs)


class SupabaseClient:
    """
    Typed wrapper for Supabase document reads.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        user = SupabaseClient.fetch_document("users", "id", 42)
        tags = SupabaseClient.fetch_documents("tags", "slug", ["a", "b"])
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).

        Raises:
            SupabaseClientError: If the credentials are missing or client
                                 creation fails
        """
        if cls._instance is None:
            if not settings.supabase_configured:
                raise SupabaseClientError(
                    message="Supabase credentials are not configured",
                    code="CLIENT_NOT_CONFIGURED",
                    suggestion="Set SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file",
                )
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                ) from e
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the cached client (used by tests and after credential changes)."""
        cls._instance = None

    # -------------------------------------------------------------------------
    # Document Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_document(
        cls,
        table: str,
        key: str,
        value: Any,
        columns: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch the single row of a table whose column `key` equals `value`.

        Args:
            table: Table name
            key: Column to match
            value: Value to match
            columns: PostgREST select expression (default: all columns)

        Returns:
            Row dict, or None if not found

        Raises:
            SupabaseClientError: If the query fails
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select(columns)
                .eq(key, value)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if NO_ROWS_CODE in str(e):
                logger.debug(f"No row in {table} where {key}={value!r}")
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_DOCUMENT_FAILED",
                suggestion=f"Check that the table exists and '{key}' is unique",
                details={"table": table, "key": key, "value": repr(value)},
            ) from e

    @classmethod
    def fetch_documents(
        cls,
        table: str,
        key: str,
        values: list[Any],
        columns: str = "*",
    ) -> list[dict[str, Any]]:
        """
        Fetch every row of a table whose column `key` is in `values`.

        Raises:
            SupabaseClientError: If the query fails
        """
        if not values:
            return []

        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select(columns)
                .in_(key, values)
                .execute()
            )
            rows = response.data or []
            logger.debug(f"Fetched {len(rows)} rows from {table}")
            return rows

        except Exception as e:
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_DOCUMENTS_FAILED",
                suggestion="Check that the table exists and is accessible",
                details={"table": table, "key": key, "count": len(values)},
            ) from e
