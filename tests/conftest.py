"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from dialectic.lib.dialect import Dialect
from dialectic.lib.hoist import HoistStore
from dialectic.lib.rules import register_standard_rules


@pytest.fixture
def dialect() -> Dialect:
    """A fresh engine without any rules."""
    return Dialect()


@pytest.fixture
def standard_dialect() -> Dialect:
    """A fresh engine with the standard rule set."""
    return register_standard_rules(Dialect())


@pytest.fixture
def hoist() -> HoistStore:
    return HoistStore()


@pytest.fixture
def tree():
    """Return a helper that finalizes a dialect and tokenizes source into a tree."""

    def _tree(dialect: Dialect, source: str) -> list:
        dialect.finalize()
        return dialect.tokenizer.tree_build(source)

    return _tree
