"""Environments module for alignment runs.

This package contains the orchestration layer that drives the optimizer:
the base run loop, sessions applying the termination policy, and a
fixed-cadence polling driver.
"""

from __future__ import annotations

from environments.base import BaseEnvironment
from environments.polling import PollingDriver
from environments.session import STABILIZED_LOSS, AlignmentSession

__all__ = [
    "BaseEnvironment",
    "AlignmentSession",
    "PollingDriver",
    "STABILIZED_LOSS",
]
