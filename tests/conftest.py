"""Shared pytest fixtures for normsql unit and integration tests."""
from __future__ import annotations

import pytest

import normsql
from normsql import Builder


@pytest.fixture(autouse=True)
def default_dialect():
    """Every test starts, and leaves, with the mysql default."""
    normsql.engine("mysql")
    yield
    normsql.engine("mysql")


@pytest.fixture()
def users_query() -> Builder:
    """A typical filtered select over ``users``."""
    return (
        normsql.norm()
        .select("users.id", "users.name")
        .from_("users")
        .where(["users.id > ?", 1], "users.deleted is null")
    )


@pytest.fixture()
def pg() -> Builder:
    """An empty builder pinned to the postgres dialect."""
    return normsql.norm(dialect="postgres")
