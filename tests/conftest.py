"""Shared fixtures."""

import pytest

from gql_scaffold.core.references import ReferenceLibrary
from schema_builders import make_reference


@pytest.fixture
def reference_dir(tmp_path):
    """A minimal graphql-ruby checkout with the standard scalars."""
    return make_reference(tmp_path / "graphql-ruby")


@pytest.fixture
def reference(reference_dir):
    return ReferenceLibrary(reference_dir)
