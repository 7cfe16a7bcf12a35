"""Finite-difference gradient estimation.

Gradients are estimated numerically, one forward difference per parameter:
    g_i = (f(x + eps * e_i) - f(x)) / eps

This costs d extra evaluations of f for a d-dimensional vector, which is
acceptable for the small parameter counts this package targets.
"""

from __future__ import annotations

from collections.abc import Callable

import numpy as np

from core.types import ParamVector

__all__ = ["FD_EPSILON", "forward_difference_gradient"]

# Large enough to stay clear of cancellation noise, small enough to be local
FD_EPSILON = 1e-3


def forward_difference_gradient(
    fn: Callable[[ParamVector], float],
    x: ParamVector,
    *,
    eps: float = FD_EPSILON,
    fx: float | None = None,
) -> ParamVector:
    """Estimate the gradient of ``fn`` at ``x`` by forward differences.

    Every partial derivative is taken against the same base point ``x``;
    ``x`` itself is never modified.

    Args:
        fn: Scalar function of a 1D vector.
        x: Base point of shape (d,).
        eps: Perturbation applied to one coordinate at a time. Must be positive.
        fx: Precomputed ``fn(x)``; evaluated here when omitted.

    Returns:
        Gradient estimate of shape (d,).

    Raises:
        ValueError: If eps <= 0 or x is not 1-dimensional.
    """
    if eps <= 0:
        raise ValueError(f"eps must be positive, got {eps}")
    base = np.asarray(x, dtype=np.float64)
    if base.ndim != 1:
        raise ValueError(f"x must be 1-dimensional, got ndim={base.ndim}")

    if fx is None:
        fx = float(fn(base))

    grad = np.empty_like(base)
    for i in range(base.shape[0]):
        x_plus = base.copy()
        x_plus[i] += eps
        grad[i] = (float(fn(x_plus)) - fx) / eps
    return grad
