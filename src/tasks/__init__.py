"""Tasks module for alignment runs.

Available tasks:
- AlignmentProblem: squared deviation of an observable from a target,
  with the cosine-product observable by default
"""

from __future__ import annotations

from tasks.cosine_alignment import AlignmentProblem, cosine_product, squared_loss

__all__ = [
    "AlignmentProblem",
    "cosine_product",
    "squared_loss",
]
