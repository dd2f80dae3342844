"""Shared fixtures for the declaration engine tests."""

import pytest

from owl_declarator.storage import FactStore


@pytest.fixture
def store():
    """A fresh, empty store."""
    return FactStore()
