"""Plotting helpers for alignment runs."""

from __future__ import annotations

from pathlib import Path

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from core.types import History  # noqa: E402

__all__ = ["plot_history"]


def plot_history(
    history: History,
    out_path: Path,
    *,
    target: float | None = None,
    title: str | None = None,
) -> bool:
    """Plot loss (log scale) and observable against the step index.

    Args:
        history: Recorded run history.
        out_path: Output PNG path.
        target: Optional target value drawn as a reference line.
        title: Optional figure title.

    Returns:
        True if a file was written, False for an empty history.
    """
    if len(history) == 0:
        return False

    out_path.parent.mkdir(parents=True, exist_ok=True)

    steps = history.steps()
    losses = history.losses()
    observables = history.observables()

    fig, (ax_loss, ax_obs) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)

    mask = np.isfinite(losses) & (losses > 0)
    if np.any(mask):
        ax_loss.semilogy(steps[mask], np.clip(losses[mask], 1e-16, None), label="loss")
    ax_loss.set_ylabel("loss")
    ax_loss.grid(True, alpha=0.3)

    ax_obs.plot(steps, observables, label="observable")
    if target is not None:
        ax_obs.axhline(target, linestyle="--", alpha=0.7, label="target")
    ax_obs.set_xlabel("step")
    ax_obs.set_ylabel("observable")
    ax_obs.grid(True, alpha=0.3)
    ax_obs.legend()

    if title:
        fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(out_path, dpi=120)
    plt.close(fig)
    return True
