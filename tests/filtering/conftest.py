"""Shared fixtures for filtering tests."""

from __future__ import annotations

import pytest

from cleanbase_filtering import FilterAssembler, build_default_registry


@pytest.fixture
def registry():
    """Fresh registry with the built-in filter types."""
    return build_default_registry()


@pytest.fixture
def assembler(registry):
    return FilterAssembler(registry)
