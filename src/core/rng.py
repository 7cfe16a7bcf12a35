"""Random number generation utilities.

This module contains:
- Seeded RNG construction for reproducible runs
- Random initial angles for the parameter vector
"""

from __future__ import annotations

import math

import numpy as np

from core.types import ParamVector

__all__ = ["RngLike", "make_rng", "uniform_angles"]

# Either a ready generator, a seed, or None for fresh OS entropy
RngLike = np.random.Generator | int | None


def make_rng(rng: RngLike = None) -> np.random.Generator:
    """Return a numpy Generator for a seed, an existing generator, or None.

    Args:
        rng: A Generator (returned unchanged), an int seed, or None.

    Returns:
        A numpy random Generator.
    """
    if isinstance(rng, np.random.Generator):
        return rng
    return np.random.default_rng(rng)


def uniform_angles(dim: int, rng: np.random.Generator) -> ParamVector:
    """Draw ``dim`` independent angles uniformly from [0, 2*pi)."""
    return rng.uniform(0.0, 2.0 * math.pi, size=dim).astype(np.float64)
