"""Core type definitions for the alignment optimizer.

This module contains:
- Type aliases for parameter vectors
- Immutable records returned by the engine (StepResult, Snapshot)
- The caller-owned History of (step, loss, observable) entries
- The AlignmentConfig run configuration
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import numpy as np

__all__ = [
    "ParamVector",
    "StepResult",
    "Snapshot",
    "HistoryEntry",
    "History",
    "AlignmentConfig",
]

# Type alias for the parameter vector (one rotation angle per parameter)
ParamVector = np.ndarray


def _frozen_copy(theta: Any) -> ParamVector:
    """Return a read-only float64 copy of ``theta``."""
    arr = np.array(theta, dtype=np.float64, copy=True)
    arr.setflags(write=False)
    return arr


@dataclass(frozen=True, slots=True)
class StepResult:
    """Result of a single optimization step.

    ``step`` and ``theta`` describe the engine *after* the update, while
    ``loss`` and ``observable`` were measured *before* it: they are the values
    that justified the update. Callers must not assume ``loss`` corresponds
    to ``theta``.

    Attributes:
        step: Step counter after this step (1 for the first call).
        theta: Copy of the updated parameter vector (read-only).
        loss: Loss evaluated at the pre-update parameters.
        observable: Observable evaluated at the pre-update parameters.
    """

    step: int
    theta: ParamVector
    loss: float
    observable: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "theta", _frozen_copy(self.theta))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StepResult):
            return NotImplemented
        return (
            self.step == other.step
            and self.loss == other.loss
            and self.observable == other.observable
            and np.array_equal(self.theta, other.theta)
        )

    def to_entry(self) -> HistoryEntry:
        """Project this result onto a history entry."""
        return HistoryEntry(step=self.step, loss=self.loss, observable=self.observable)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Read-only view of the engine state without performing a step.

    Attributes:
        theta: Copy of the current parameter vector (read-only).
        step: Current step counter.
    """

    theta: ParamVector
    step: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "theta", _frozen_copy(self.theta))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        return self.step == other.step and np.array_equal(self.theta, other.theta)


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """One recorded step: (step, pre-update loss, pre-update observable)."""

    step: int
    loss: float
    observable: float


@dataclass
class History:
    """Append-only record of optimization progress, owned by the caller.

    The engine does not keep history; callers append one entry per
    ``step()`` result.

    Example:
        >>> history = History()
        >>> history.append(HistoryEntry(step=1, loss=0.5, observable=0.3))
        >>> history.append(HistoryEntry(step=2, loss=0.25, observable=0.5))
        >>> history.mean_loss()
        0.375
    """

    entries: list[HistoryEntry] = field(default_factory=list)

    def __len__(self) -> int:
        """Return the number of recorded steps."""
        return len(self.entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(list(self.entries))

    def append(self, record: StepResult | HistoryEntry) -> HistoryEntry:
        """Append a step result (or a ready entry) to the history.

        Args:
            record: A StepResult from the engine or a HistoryEntry.

        Returns:
            The entry that was stored.
        """
        entry = record.to_entry() if isinstance(record, StepResult) else record
        if not isinstance(entry, HistoryEntry):
            raise TypeError(f"Cannot append {type(record).__name__} to History")
        self.entries.append(entry)
        return entry

    def last(self) -> HistoryEntry:
        """Return the most recent entry.

        Raises:
            IndexError: If history is empty.
        """
        return self.entries[-1]

    def steps(self) -> np.ndarray:
        return np.array([e.step for e in self.entries], dtype=np.int64)

    def losses(self) -> np.ndarray:
        return np.array([e.loss for e in self.entries], dtype=np.float64)

    def observables(self) -> np.ndarray:
        return np.array([e.observable for e in self.entries], dtype=np.float64)

    def min_loss(self) -> float:
        """Return the smallest recorded loss.

        Raises:
            ValueError: If history is empty.
        """
        if not self.entries:
            raise ValueError("Cannot compute min_loss on empty history")
        return float(self.losses().min())

    def mean_loss(self) -> float:
        """Return the mean recorded loss.

        Raises:
            ValueError: If history is empty.
        """
        if not self.entries:
            raise ValueError("Cannot compute mean_loss on empty history")
        losses = [e.loss for e in self.entries]
        return sum(losses) / len(losses)

    def to_records(self) -> list[dict[str, Any]]:
        """Return the history as JSON-serializable dicts."""
        return [
            {"step": int(e.step), "loss": float(e.loss), "observable": float(e.observable)}
            for e in self.entries
        ]


@dataclass(frozen=True, slots=True)
class AlignmentConfig:
    """Configuration for one alignment run.

    Validation of the engine fields happens when the engine is built;
    see ``experiments.config.config_from_dict`` for parsing.

    Attributes:
        dimensionality: Number of parameters (>= 1).
        learning_rate: Gradient-descent step size (> 0).
        target: Target value of the observable, conventionally in [-1, 1].
        max_steps: Step budget after which a session stops.
        loss_tolerance: A session stops once the reported loss drops below this.
        seed: Optional seed for the initial parameters.
        interval: Seconds between steps when driven by a polling driver.
    """

    dimensionality: int = 3
    learning_rate: float = 0.1
    target: float = 1.0
    max_steps: int = 200
    loss_tolerance: float = 1e-10
    seed: int | None = None
    interval: float = 0.05

    def to_dict(self) -> dict[str, Any]:
        return {
            "dimensionality": self.dimensionality,
            "learning_rate": self.learning_rate,
            "target": self.target,
            "max_steps": self.max_steps,
            "loss_tolerance": self.loss_tolerance,
            "seed": self.seed,
            "interval": self.interval,
        }
