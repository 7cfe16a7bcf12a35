"""Fixed-cadence driver that steps a session on a background thread.

The driver owns the loop; the engine stays free of scheduling. Each result
is handed to a queue (and an optional callback) so a presentation layer can
consume the stream without touching the engine.
"""

from __future__ import annotations

import queue
import threading
from collections.abc import Callable, Iterator

from core.logging import get_logger
from core.types import StepResult
from environments.session import AlignmentSession

__all__ = ["PollingDriver"]

logger = get_logger("environments.polling")


class PollingDriver:
    """Calls ``session.step()`` every ``interval`` seconds until stopped.

    Steps go through the session lock, so several drivers (or a driver
    outliving a timed-out stop) never step the session concurrently. A
    ``None`` sentinel is put on ``results`` when the loop exits. An exception
    raised inside the loop is stored in ``error`` and re-raised by ``join()``.

    Example:
        >>> driver = PollingDriver(session, interval=0.0)
        >>> driver.start()
        >>> for result in driver.iter_results():
        ...     print(result.step, result.loss)
        >>> driver.join()
    """

    def __init__(
        self,
        session: AlignmentSession,
        *,
        interval: float | None = None,
        on_step: Callable[[StepResult], None] | None = None,
    ) -> None:
        """Initialize the driver.

        Args:
            session: Session to drive.
            interval: Seconds between steps; defaults to ``session.config.interval``.
            on_step: Called on the driver thread after every step.

        Raises:
            ValueError: If interval is negative.
        """
        interval = session.config.interval if interval is None else interval
        if interval < 0:
            raise ValueError(f"interval must be >= 0, got {interval}")
        self.session = session
        self.interval = float(interval)
        self.on_step = on_step
        self.results: queue.Queue[StepResult | None] = queue.Queue()
        self.error: BaseException | None = None

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the driver thread.

        Raises:
            RuntimeError: If the driver was already started.
        """
        if self._thread is not None:
            raise RuntimeError("PollingDriver can only be started once.")
        self.session.is_training = True
        self._thread = threading.Thread(target=self._loop, name="alignment-driver", daemon=True)
        self._thread.start()
        logger.info("Driver started (interval=%.3fs)", self.interval)

    def stop(self, timeout: float | None = None) -> None:
        """Ask the loop to stop and wait up to ``timeout`` for it to exit.

        ``session.is_training`` is only cleared here once the thread has
        exited; a loop still running past the timeout clears it on exit.
        """
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
        if not self.running:
            self.session.is_training = False

    def join(self, timeout: float | None = None) -> None:
        """Wait for the loop to exit and re-raise any error it hit."""
        if self._thread is not None:
            self._thread.join(timeout)
        if self.error is not None:
            raise self.error

    def iter_results(self, timeout: float | None = None) -> Iterator[StepResult]:
        """Yield published results until the end-of-stream sentinel.

        Raises:
            queue.Empty: If no result arrives within ``timeout`` seconds.
        """
        while True:
            item = self.results.get(timeout=timeout)
            if item is None:
                return
            yield item

    def _loop(self) -> None:
        try:
            while not self._stop.is_set():
                result = self.session.try_step()
                if result is None:
                    break
                self.results.put(result)
                if self.on_step is not None:
                    self.on_step(result)
                if self.interval > 0:
                    self._stop.wait(self.interval)
        except Exception as exc:
            self.error = exc
            logger.exception("Driver loop failed")
        finally:
            self.session.is_training = False
            self.results.put(None)
            logger.info("Driver stopped at step %d", self.session.t)
