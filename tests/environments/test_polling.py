"""Tests for the threaded PollingDriver."""

from __future__ import annotations

import threading
import time

import numpy as np
import pytest

from core.types import AlignmentConfig, StepResult
from environments.polling import PollingDriver
from environments.session import AlignmentSession
from optim.variational import VariationalOptimizer


def _session(max_steps: int = 8, **kwargs: object) -> AlignmentSession:
    return AlignmentSession(AlignmentConfig(dimensionality=2, max_steps=max_steps, seed=3, **kwargs))


def test_driver_publishes_every_step_then_sentinel() -> None:
    session = _session()
    seen: list[StepResult] = []
    driver = PollingDriver(session, interval=0.0, on_step=seen.append)

    driver.start()
    results = list(driver.iter_results(timeout=5.0))
    driver.join(timeout=5.0)

    assert [r.step for r in results] == list(range(1, 9))
    assert seen == results
    assert len(session.history) == 8
    assert session.done
    assert not session.is_training
    assert not driver.running


def test_driver_matches_synchronous_run() -> None:
    driven = _session(max_steps=6)
    driver = PollingDriver(driven, interval=0.0)
    driver.start()
    driver.join(timeout=5.0)

    direct = _session(max_steps=6)
    direct.run()

    assert driven.history.to_records() == direct.history.to_records()
    np.testing.assert_array_equal(driven.snapshot().theta, direct.snapshot().theta)


def test_driver_stop_halts_loop() -> None:
    session = _session(max_steps=10_000)
    driver = PollingDriver(session, interval=0.01)
    driver.start()
    assert session.is_training
    first = driver.results.get(timeout=5.0)
    driver.stop(timeout=5.0)

    assert first is not None
    assert not driver.running
    assert not session.is_training
    assert not session.done
    assert session.t < 10_000


def test_driver_cannot_start_twice() -> None:
    driver = PollingDriver(_session(max_steps=1), interval=0.0)
    driver.start()
    driver.join(timeout=5.0)
    with pytest.raises(RuntimeError, match="once"):
        driver.start()


def test_driver_default_interval_from_config() -> None:
    driver = PollingDriver(_session(interval=0.25))
    assert driver.interval == 0.25


def test_driver_rejects_negative_interval() -> None:
    with pytest.raises(ValueError, match="interval"):
        PollingDriver(_session(), interval=-1.0)


def test_driver_surfaces_callback_errors() -> None:
    def boom(result: StepResult) -> None:
        raise RuntimeError("consumer failed")

    session = _session()
    driver = PollingDriver(session, interval=0.0, on_step=boom)
    driver.start()
    results = list(driver.iter_results(timeout=5.0))

    with pytest.raises(RuntimeError, match="consumer failed"):
        driver.join(timeout=5.0)
    assert len(results) == 1
    assert isinstance(driver.error, RuntimeError)
    assert not session.is_training


def _slow_cosine(theta: np.ndarray) -> float:
    time.sleep(0.002)
    return float(np.prod(np.cos(theta)))


def test_two_drivers_share_step_budget() -> None:
    session = _session(max_steps=6)
    session.engine = VariationalOptimizer(2, 0.1, 0.0, rng=3, observable=_slow_cosine)
    start = session.snapshot().theta

    first = PollingDriver(session, interval=0.0)
    second = PollingDriver(session, interval=0.0)
    first.start()
    second.start()
    first.join(timeout=10.0)
    second.join(timeout=10.0)

    published = sorted(r.step for r in (*first.iter_results(), *second.iter_results()))
    assert published == list(range(1, 7))
    np.testing.assert_array_equal(session.history.steps(), np.arange(1, 7))

    reference = VariationalOptimizer(2, 0.1, 0.0, theta0=start)
    expected = [reference.step().loss for _ in range(6)]
    np.testing.assert_array_equal(session.history.losses(), expected)


def test_stop_timeout_keeps_training_flag_until_exit() -> None:
    release = threading.Event()
    session = _session(max_steps=3)
    driver = PollingDriver(session, interval=0.0, on_step=lambda result: release.wait(5.0))

    driver.start()
    driver.results.get(timeout=5.0)
    driver.stop(timeout=0.01)
    assert driver.running
    assert session.is_training

    release.set()
    driver.join(timeout=5.0)
    assert not driver.running
    assert not session.is_training


def test_new_driver_resumes_stopped_session() -> None:
    session = _session(max_steps=10_000)
    first = PollingDriver(session, interval=0.01)
    first.start()
    first.results.get(timeout=5.0)
    first.stop(timeout=5.0)
    halted_at = session.t
    halted_theta = session.snapshot().theta

    second = PollingDriver(session, interval=0.0)
    second.start()
    resumed = second.results.get(timeout=5.0)
    second.stop(timeout=5.0)

    assert resumed is not None
    assert resumed.step == halted_at + 1
    reference = VariationalOptimizer(2, session.config.learning_rate, session.config.target, theta0=halted_theta)
    expected = reference.step()
    assert resumed.loss == expected.loss
    assert resumed.observable == expected.observable
    np.testing.assert_array_equal(resumed.theta, expected.theta)
    np.testing.assert_array_equal(session.history.steps(), np.arange(1, session.t + 1))
