"""Shared test fixtures for apidiff.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from apidiff.model.nodes import Method, Package, SurfaceModel, TypeDecl


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "apidiff"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def simple_surface() -> SurfaceModel:
    """A single package ``p`` holding type ``A`` with method ``foo()``."""
    return SurfaceModel(
        name="lib-1.0",
        packages=[Package(name="p", types=[TypeDecl(name="A", methods=[Method(name="foo")])])],
    )
