"""Optimization algorithms module.

This package contains:
- Forward-difference gradient estimation
- VariationalOptimizer: steppable finite-difference gradient descent
"""

from __future__ import annotations

from optim.finite_difference import FD_EPSILON, forward_difference_gradient
from optim.variational import VariationalOptimizer

__all__ = [
    "FD_EPSILON",
    "forward_difference_gradient",
    "VariationalOptimizer",
]
