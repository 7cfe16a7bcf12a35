"""Cosine-product alignment task.

This module provides the objective the optimizer drives toward its target:
    O(theta) = prod_i cos(theta_i)
    L(theta) = (O(theta) - target)^2

O is a stand-in for the expectation value a variational circuit would
measure: each parameter acts as one rotation angle, so O always lies in
[-1, 1]. The loss is the squared deviation from a fixed target.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field

import numpy as np

from core.errors import InvalidConfiguration
from core.protocols import Observable
from core.types import ParamVector

__all__ = [
    "cosine_product",
    "squared_loss",
    "AlignmentProblem",
]


def cosine_product(theta: ParamVector) -> float:
    """Return the product of the cosines of every parameter.

    Args:
        theta: Parameter vector of shape (d,).

    Returns:
        prod_i cos(theta_i), in [-1, 1]. The empty product is 1.0.
    """
    return float(np.prod(np.cos(np.asarray(theta, dtype=np.float64))))


def squared_loss(observable: float, target: float) -> float:
    """Squared deviation of an observable value from the target."""
    return float((observable - target) ** 2)


@dataclass(frozen=True)
class AlignmentProblem:
    """Pairs an observable with the target it should reach.

    Attributes:
        target: Target value of the observable. Values outside [-1, 1]
            are allowed but can never be reached by the cosine product.
        observable: Pure function of the parameter vector.

    Example:
        >>> problem = AlignmentProblem(target=0.0)
        >>> problem.loss(np.array([0.0, 0.0]))
        1.0
    """

    target: float
    observable: Observable = field(default=cosine_product)

    def __post_init__(self) -> None:
        target = self.target
        if isinstance(target, bool) or not isinstance(target, numbers.Real) or not math.isfinite(target):
            raise InvalidConfiguration(f"target must be a finite number, got {target!r}")
        object.__setattr__(self, "target", float(target))

    def evaluate(self, theta: ParamVector) -> tuple[float, float]:
        """Return (observable, loss) at theta with a single observable call."""
        value = float(self.observable(theta))
        return value, squared_loss(value, self.target)

    def loss(self, theta: ParamVector) -> float:
        return self.evaluate(theta)[1]
