"""Base environment class for alignment runs.

This module provides an abstract base class that implements the common
run loop logic while leaving environment-specific behavior to subclasses.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from core.types import History, StepResult

__all__ = ["BaseEnvironment"]


class BaseEnvironment(ABC):
    """Abstract base class for optimization environments.

    Provides a reusable run loop that records every step into a History.
    Subclasses must implement `reset()` and `step()`, and may override
    `done` to end `run()` early.

    Attributes:
        _t: Internal step counter, starts at 0 after reset() and increments
            on each step() call.
    """

    _t: int

    def __init__(self) -> None:
        """Initialize the environment with step counter at 0."""
        self._t = 0
        self.history = History()

    @property
    def t(self) -> int:
        """Current step index (read-only)."""
        return self._t

    @property
    def done(self) -> bool:
        """True once the environment refuses further steps."""
        return False

    @abstractmethod
    def reset(self, *, seed: int | None = None) -> None:
        """Reset the environment.

        Subclasses must:
        - Reset internal step counter to 0 (set self._t = 0)
        - Start a fresh History
        - Reinitialize any random state using the provided seed

        Args:
            seed: Random seed for reproducibility.
        """
        ...

    @abstractmethod
    def step(self) -> StepResult:
        """Execute one optimization step.

        Subclasses must increment self._t and append the result to
        self.history.
        """
        ...

    def run(self, *, steps: int | None = None) -> History:
        """Run optimization steps until `done` or until `steps` were taken.

        Args:
            steps: Maximum number of steps to execute. Must be >= 1 when given.
                With None, runs until `done`.

        Returns:
            The environment's History.

        Raises:
            ValueError: If steps < 1.
        """
        if steps is not None and steps < 1:
            raise ValueError(f"steps must be >= 1, got {steps}")

        taken = 0
        while not self.done and (steps is None or taken < steps):
            self.step()
            taken += 1

        return self.history

    def state_dict(self) -> dict[str, Any]:
        """Return the current state of the environment.

        Returns:
            A dictionary containing:
            - "t": Current step index
        """
        return {"t": self._t}
