from __future__ import annotations

import math

import numpy as np
import pytest

from core.errors import InvalidConfiguration
from core.protocols import Observable
from tasks.cosine_alignment import AlignmentProblem, cosine_product, squared_loss


def test_cosine_product_values() -> None:
    assert cosine_product(np.array([0.0])) == 1.0
    assert cosine_product(np.array([0.0, 0.0])) == 1.0
    assert cosine_product(np.array([math.pi, 0.0])) == pytest.approx(-1.0)
    assert cosine_product(np.array([math.pi / 2, 0.3])) == pytest.approx(0.0, abs=1e-15)
    assert cosine_product(np.array([0.3, 0.7])) == pytest.approx(math.cos(0.3) * math.cos(0.7))


def test_cosine_product_bounded() -> None:
    rng = np.random.default_rng(0)
    for _ in range(50):
        value = cosine_product(rng.uniform(-10, 10, size=5))
        assert -1.0 <= value <= 1.0


def test_cosine_product_permutation_invariant() -> None:
    rng = np.random.default_rng(1)
    theta = rng.uniform(0, 2 * math.pi, size=6)
    for _ in range(10):
        perm = rng.permutation(6)
        assert cosine_product(theta[perm]) == pytest.approx(cosine_product(theta), rel=1e-12, abs=1e-15)


def test_problem_loss_identity() -> None:
    problem = AlignmentProblem(target=0.4)
    theta = np.array([0.2, 1.3, 2.9])
    observable, loss = problem.evaluate(theta)
    assert observable == cosine_product(theta)
    assert loss == (observable - 0.4) ** 2
    assert problem.loss(theta) == loss
    assert squared_loss(observable, 0.4) == loss


def test_problem_scenarios() -> None:
    assert AlignmentProblem(target=1.0).loss(np.array([0.0])) == 0.0
    assert AlignmentProblem(target=0.0).loss(np.array([0.0, 0.0])) == 1.0


def test_problem_rejects_non_finite_target() -> None:
    with pytest.raises(InvalidConfiguration):
        AlignmentProblem(target=math.inf)


def test_problem_custom_observable() -> None:
    problem = AlignmentProblem(target=1.0, observable=lambda t: float(np.sum(t)))
    assert problem.loss(np.array([0.5, 0.5])) == 0.0


@pytest.mark.parametrize("target", ["0.5", None, True])
def test_problem_rejects_non_numeric_target(target) -> None:
    with pytest.raises(InvalidConfiguration, match="target"):
        AlignmentProblem(target=target)


def test_problem_stores_target_as_float() -> None:
    problem = AlignmentProblem(target=1)
    assert isinstance(problem.target, float)
    assert problem.target == 1.0


def test_cosine_product_is_an_observable() -> None:
    assert isinstance(cosine_product, Observable)
