"""Finite-difference gradient descent on a variational observable.

This module provides:
- VariationalOptimizer: a steppable engine owning the parameter vector,
  the alignment problem and the step counter

The engine is a pure step function. It has no stopping condition and no
scheduling; sessions and drivers in ``environments`` decide when to call it.
It is not safe for concurrent step() calls on the same instance.
"""

from __future__ import annotations

import math
import numbers
from typing import Any

import numpy as np

from core.errors import InvalidConfiguration
from core.logging import get_logger
from core.protocols import Observable
from core.rng import RngLike, make_rng, uniform_angles
from core.types import AlignmentConfig, ParamVector, Snapshot, StepResult
from optim.finite_difference import FD_EPSILON, forward_difference_gradient
from tasks.cosine_alignment import AlignmentProblem, cosine_product

__all__ = ["VariationalOptimizer"]

logger = get_logger("optim.variational")


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


class VariationalOptimizer:
    """Gradient descent on (O(theta) - target)^2 with numerical gradients.

    Each step performs:
        g_i = (L(theta + eps * e_i) - L(theta)) / eps   for all i
        theta <- theta - lr * g

    All partial derivatives are taken at the same pre-step vector and the
    update is applied to every parameter at once.

    Attributes:
        problem: Observable/target pair defining the loss.
        learning_rate: Step size.
        epsilon: Finite-difference perturbation.

    Example:
        >>> engine = VariationalOptimizer(2, 0.1, 0.0, theta0=np.zeros(2))
        >>> result = engine.step()
        >>> result.step, result.loss
        (1, 1.0)
    """

    def __init__(
        self,
        dimensionality: int,
        learning_rate: float,
        target: float,
        *,
        rng: RngLike = None,
        theta0: ParamVector | None = None,
        observable: Observable = cosine_product,
        epsilon: float = FD_EPSILON,
    ) -> None:
        """Initialize the engine.

        Args:
            dimensionality: Number of parameters. Must be an integer >= 1.
            learning_rate: Step size. Must be positive and finite.
            target: Target observable value. Must be finite.
            rng: Generator or seed used to draw the initial angles
                uniformly from [0, 2*pi). Ignored when theta0 is given.
            theta0: Explicit initial parameter vector of shape (dimensionality,).
            observable: Pure function of the parameter vector.
            epsilon: Finite-difference perturbation. Must be positive.

        Raises:
            InvalidConfiguration: If any argument violates its constraint.
        """
        if isinstance(dimensionality, bool) or not isinstance(dimensionality, numbers.Integral):
            raise InvalidConfiguration(f"dimensionality must be an integer, got {dimensionality!r}")
        if dimensionality < 1:
            raise InvalidConfiguration(f"dimensionality must be >= 1, got {dimensionality}")
        if not _is_real(learning_rate) or not math.isfinite(learning_rate) or learning_rate <= 0:
            raise InvalidConfiguration(f"Learning rate must be positive, got {learning_rate}")
        if not _is_real(epsilon) or not math.isfinite(epsilon) or epsilon <= 0:
            raise InvalidConfiguration(f"epsilon must be positive, got {epsilon}")

        self.problem = AlignmentProblem(target=target, observable=observable)
        self.learning_rate = float(learning_rate)
        self.epsilon = float(epsilon)

        if theta0 is None:
            theta = uniform_angles(int(dimensionality), make_rng(rng))
        else:
            theta = np.array(theta0, dtype=np.float64, copy=True)
            if theta.shape != (dimensionality,):
                raise InvalidConfiguration(
                    f"theta0 must have shape ({dimensionality},), got {theta.shape}"
                )
        self._theta: ParamVector = theta
        self._t = 0

        logger.info(
            "Engine ready: dimensionality=%d learning_rate=%g target=%g",
            self.dimensionality,
            self.learning_rate,
            self.target,
        )

    @classmethod
    def from_config(cls, config: AlignmentConfig, *, rng: RngLike = None, **kwargs: Any) -> VariationalOptimizer:
        """Build an engine from a run configuration.

        Args:
            config: Run configuration.
            rng: Generator or seed; falls back to ``config.seed``.
            **kwargs: Forwarded to the constructor (theta0, observable, epsilon).
        """
        return cls(
            config.dimensionality,
            config.learning_rate,
            config.target,
            rng=config.seed if rng is None else rng,
            **kwargs,
        )

    @property
    def dimensionality(self) -> int:
        return int(self._theta.shape[0])

    @property
    def target(self) -> float:
        return self.problem.target

    @property
    def t(self) -> int:
        """Number of steps taken so far."""
        return self._t

    def observable(self, theta: ParamVector | None = None) -> float:
        """Evaluate the observable at theta (the current vector by default)."""
        return float(self.problem.observable(self._theta if theta is None else theta))

    def loss(self, theta: ParamVector | None = None) -> float:
        """Evaluate the loss at theta (the current vector by default)."""
        return self.problem.loss(self._theta if theta is None else theta)

    def step(self) -> StepResult:
        """Perform one finite-difference gradient-descent step.

        Returns:
            StepResult with the post-update step counter and parameters,
            and the loss and observable measured before the update.
        """
        theta = self._theta
        observable, loss = self.problem.evaluate(theta)

        grad = forward_difference_gradient(self.problem.loss, theta, eps=self.epsilon, fx=loss)

        self._theta = theta - self.learning_rate * grad
        self._t += 1

        logger.debug(
            "step=%d loss=%.6e observable=%.6f grad_norm=%.3e",
            self._t,
            loss,
            observable,
            float(np.linalg.norm(grad)),
        )

        # The reported loss/observable belong to the vector this step started
        # from, not to the returned theta.
        return StepResult(step=self._t, theta=self._theta, loss=loss, observable=observable)

    def snapshot(self) -> Snapshot:
        """Return the current parameters and step counter."""
        return Snapshot(theta=self._theta, step=self._t)
