"""Protocol definitions for the alignment optimizer.

This module contains Protocol classes defining interfaces for:
- Observables: pure scalar functions of the parameter vector
- Engines: steppable optimizers exposing step() and snapshot()
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from core.types import ParamVector, Snapshot, StepResult

__all__ = [
    "Observable",
    "Engine",
]


@runtime_checkable
class Observable(Protocol):
    """Protocol for the measured quantity being optimized.

    Implementations must be pure: the same vector always yields the same
    value, and evaluation has no side effects.
    """

    def __call__(self, theta: ParamVector) -> float:
        """Evaluate the observable.

        Args:
            theta: Parameter vector of shape (d,).

        Returns:
            The observable value, conventionally in [-1, 1].
        """
        ...


@runtime_checkable
class Engine(Protocol):
    """Protocol for steppable optimizers driven by an orchestration layer.

    An Engine has no stopping condition of its own; the caller decides when
    to stop calling step(). It assumes a single caller at a time.
    """

    def step(self) -> StepResult:
        """Perform one gradient-descent step and return the new state."""
        ...

    def snapshot(self) -> Snapshot:
        """Return the current parameters and step counter without stepping."""
        ...


# Re-export types that protocols depend on for convenience
__all__ += ["ParamVector", "Snapshot", "StepResult"]
