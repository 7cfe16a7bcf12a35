from __future__ import annotations

import numpy as np
import pytest

from optim.finite_difference import FD_EPSILON, forward_difference_gradient


def test_matches_linear_gradient() -> None:
    weights = np.array([1.5, -2.0, 0.25])
    grad = forward_difference_gradient(lambda x: float(weights @ x), np.array([0.1, 0.2, 0.3]))
    np.testing.assert_allclose(grad, weights, atol=1e-9)


def test_quadratic_gradient_has_forward_bias() -> None:
    x = np.array([1.0, -1.0])
    grad = forward_difference_gradient(lambda v: float(v @ v), x, eps=FD_EPSILON)
    # d/dx x^2 = 2x, forward difference adds eps
    np.testing.assert_allclose(grad, 2 * x + FD_EPSILON, atol=1e-9)


def test_does_not_mutate_input() -> None:
    x = np.array([0.5, 0.5])
    before = x.copy()
    forward_difference_gradient(lambda v: float(np.sum(np.sin(v))), x)
    np.testing.assert_array_equal(x, before)


def test_uses_precomputed_value() -> None:
    calls: list[np.ndarray] = []

    def fn(v: np.ndarray) -> float:
        calls.append(v.copy())
        return float(np.sum(v))

    forward_difference_gradient(fn, np.zeros(3), fx=0.0)
    assert len(calls) == 3
    forward_difference_gradient(fn, np.zeros(3))
    assert len(calls) == 7


def test_each_partial_perturbs_one_coordinate() -> None:
    seen: list[np.ndarray] = []

    def fn(v: np.ndarray) -> float:
        seen.append(v.copy())
        return 0.0

    forward_difference_gradient(fn, np.zeros(3), eps=0.5, fx=0.0)
    np.testing.assert_array_equal(np.stack(seen), 0.5 * np.eye(3))


def test_invalid_arguments() -> None:
    with pytest.raises(ValueError, match="eps"):
        forward_difference_gradient(lambda v: 0.0, np.zeros(2), eps=0.0)
    with pytest.raises(ValueError, match="1-dimensional"):
        forward_difference_gradient(lambda v: 0.0, np.zeros((2, 2)))
