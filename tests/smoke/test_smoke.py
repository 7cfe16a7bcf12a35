"""Smoke tests to verify the project setup works correctly."""

from __future__ import annotations

from core import types


def test_import_core_types() -> None:
    """Verify that core.types can be imported successfully."""
    assert types is not None


def test_public_packages_import() -> None:
    import environments
    import optim
    import tasks

    assert "VariationalOptimizer" in optim.__all__
    assert "AlignmentSession" in environments.__all__
    assert "AlignmentProblem" in tasks.__all__
