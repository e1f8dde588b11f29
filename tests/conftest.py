"""Shared fixtures for unit and integration tests"""

import pytest
from unittest.mock import AsyncMock, MagicMock
from tests.fixtures.in_memory import InMemoryStore, InMemoryScopeFactory


@pytest.fixture
def mock_uow():
    """Mock UnitOfWork with async commit/rollback"""
    uow = MagicMock()
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()
    return uow


@pytest.fixture
def store():
    """Empty in-memory repository store"""
    return InMemoryStore()


@pytest.fixture
def scope_factory(store):
    """Repository scope factory over the in-memory store"""
    return InMemoryScopeFactory(store)
