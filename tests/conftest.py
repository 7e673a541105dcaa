# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a container, an in-memory user store, an engine and a
#   handler context factory
# =============================================================================

import logging
import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest

from alterations import AlterationEngine, AlterContext, DependencyResolver
from core.services import InMemoryDocumentModel
from lib.container import Container
from tests.schemas import User


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def sample_users():
    """Rows of the in-memory user store."""
    return [
        {"id": 1, "name": "Ada", "email": "ada@example.com", "slug": "ada"},
        {"id": 2, "name": "Linus", "email": "", "slug": "linus"},
        {"id": 3, "name": "Grace", "email": None, "slug": "grace"},
    ]


@pytest.fixture
def users_store(sample_users):
    """In-memory document model over sample_users."""
    return InMemoryDocumentModel(sample_users)


@pytest.fixture
def container(users_store):
    """Container with a base URL, the user store, a schema and a callable."""
    container = Container({"baseUrl": "https://api.test"})
    container.set("users", users_store)
    container.set("User", User)
    container.set("upper", str.upper)
    return container


@pytest.fixture
def engine(container):
    """Engine wired to the test container."""
    return AlterationEngine(container)


@pytest.fixture
def make_context(container):
    """Factory building a handler context for direct handler calls."""

    def _make(key="field", document=None, alter_key="id", index=None, with_container=True):
        return AlterContext(
            key=key,
            document=document if document is not None else {},
            resolver=DependencyResolver(container if with_container else None),
            logger=logging.getLogger("alterations.tests"),
            alter_key=alter_key,
            index=index,
        )

    return _make
