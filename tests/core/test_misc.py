from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from core.logging import LOGGER_NAMESPACE, configure_logging, get_logger
from core.rng import make_rng, uniform_angles


def test_get_logger_is_namespaced() -> None:
    assert get_logger("optim.variational").name == f"{LOGGER_NAMESPACE}.optim.variational"
    assert get_logger(LOGGER_NAMESPACE).name == LOGGER_NAMESPACE


def test_configure_logging_idempotent() -> None:
    root = configure_logging("DEBUG")
    handlers = list(root.handlers)
    root = configure_logging(logging.WARNING)
    assert root.level == logging.WARNING
    assert root.handlers == handlers


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        configure_logging("NOT_A_LEVEL")


def test_make_rng_accepts_seed_generator_none() -> None:
    gen = np.random.default_rng(3)
    assert make_rng(gen) is gen
    assert make_rng(5).random() == np.random.default_rng(5).random()
    assert isinstance(make_rng(None), np.random.Generator)


def test_uniform_angles_range_and_seeding() -> None:
    a = uniform_angles(100, make_rng(9))
    b = uniform_angles(100, make_rng(9))
    np.testing.assert_array_equal(a, b)
    assert a.dtype == np.float64
    assert np.all((a >= 0.0) & (a < 2 * math.pi))
