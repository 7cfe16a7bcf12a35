"""Alignment session: the orchestration layer around one engine.

A session owns the run configuration, the current engine, the caller-side
history and the termination policy. The engine itself never stops; the
session stops asking for steps once the step budget is spent or the loss
falls below the configured tolerance.
"""

from __future__ import annotations

import threading
from typing import Any

from core.logging import get_logger
from core.types import AlignmentConfig, History, ParamVector, Snapshot, StepResult
from environments.base import BaseEnvironment
from optim.variational import VariationalOptimizer

__all__ = ["STABILIZED_LOSS", "AlignmentSession"]

logger = get_logger("environments.session")

# Loss below which a run is reported as stabilized
STABILIZED_LOSS = 1e-3


class AlignmentSession(BaseEnvironment):
    """Drives a VariationalOptimizer and accumulates its history.

    Re-creating the engine is the only way to reset: `reset()` builds a new
    engine from the configuration and starts an empty history.

    Example:
        >>> session = AlignmentSession(AlignmentConfig(dimensionality=2, seed=7))
        >>> history = session.run()
        >>> session.done
        True

    Attributes:
        config: Run configuration.
        engine: The current engine.
        history: Entries recorded since the last reset.
        is_training: True while a driver is stepping this session.
    """

    def __init__(self, config: AlignmentConfig, *, seed: int | None = None) -> None:
        """Initialize the session and build its first engine.

        Args:
            config: Run configuration.
            seed: Seed for the first engine; falls back to ``config.seed``.

        Raises:
            InvalidConfiguration: If the engine cannot be built from config.
        """
        super().__init__()
        self.config = config
        self.engine: VariationalOptimizer
        self.is_training = False
        self.last_result: StepResult | None = None
        self.stop_reason: str | None = None
        self._seed: int | None = None
        # Guards the engine, history and stop state across driver threads
        self._lock = threading.Lock()
        self.reset(seed=seed)

    def reset(self, *, seed: int | None = None, theta0: ParamVector | None = None) -> None:
        """Replace the engine with a fresh one and clear the history.

        Args:
            seed: Seed for the initial angles; falls back to ``config.seed``.
            theta0: Explicit initial parameter vector (overrides the seed).
        """
        with self._lock:
            self._seed = self.config.seed if seed is None else seed
            self.engine = VariationalOptimizer.from_config(self.config, rng=self._seed, theta0=theta0)
            self._t = 0
            self.history = History()
            self.is_training = False
            self.last_result = None
            self.stop_reason = None
        logger.info("Session reset (seed=%s)", self._seed)

    @property
    def done(self) -> bool:
        return self.stop_reason is not None

    def step(self) -> StepResult:
        """Take one engine step and apply the termination policy.

        Safe to call from several threads: steps are serialized and the
        finished check happens under the same lock as the step.

        Returns:
            The engine's StepResult.

        Raises:
            RuntimeError: If the session already finished.
        """
        result = self.try_step()
        if result is None:
            raise RuntimeError(f"Session finished ({self.stop_reason}); call reset() to start again.")
        return result

    def try_step(self) -> StepResult | None:
        """Like `step()`, but return None instead of raising once finished."""
        with self._lock:
            if self.done:
                return None
            return self._step_locked()

    def _step_locked(self) -> StepResult:
        result = self.engine.step()
        self.history.append(result)
        self.last_result = result
        self._t = result.step

        if result.step >= self.config.max_steps:
            self._finish("max_steps")
        elif result.loss < self.config.loss_tolerance:
            self._finish("loss_tolerance")

        return result

    def _finish(self, reason: str) -> None:
        self.stop_reason = reason
        self.is_training = False
        logger.info(
            "Session stopped by %s after %d steps (loss=%.3e)",
            reason,
            self._t,
            self.last_result.loss if self.last_result is not None else float("nan"),
        )

    def snapshot(self) -> Snapshot:
        return self.engine.snapshot()

    def summary(self) -> dict[str, Any]:
        """Return a JSON-serializable digest of the current run.

        ``convergence`` is ``100 * (1 - loss)`` percent and ``stabilized``
        is True once the loss drops below ``STABILIZED_LOSS``. Both are None
        before the first step.
        """
        snap = self.engine.snapshot()
        loss = self.last_result.loss if self.last_result is not None else None
        observable = self.last_result.observable if self.last_result is not None else None
        return {
            "step": snap.step,
            "theta": snap.theta.tolist(),
            "loss": loss,
            "observable": observable,
            "target": self.engine.target,
            "convergence": None if loss is None else 100.0 * (1.0 - loss),
            "stabilized": None if loss is None else loss < STABILIZED_LOSS,
            "stop_reason": self.stop_reason,
        }

    def state_dict(self) -> dict[str, Any]:
        """Return the current state of the session.

        Returns a dictionary containing:
        - "t": Current step index
        - "seed": The seed used for the current engine
        - "params": Engine parameters as a list (JSON-serializable)
        - "done": Whether the termination policy has fired
        """
        return {
            "t": self._t,
            "seed": self._seed,
            "params": self.engine.snapshot().theta.tolist(),
            "done": self.done,
        }
