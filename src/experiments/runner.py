"""End-to-end alignment run: session, optional driver, run directory."""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from core.logging import get_logger
from core.types import AlignmentConfig
from environments.polling import PollingDriver
from environments.session import AlignmentSession
from experiments.plotting import plot_history
from experiments.workflow import (
    next_experiment_dir,
    render_readme,
    try_get_git_commit,
    write_history,
    write_run_files,
)

__all__ = ["run_alignment"]

logger = get_logger("experiments.runner")


def run_alignment(
    config: AlignmentConfig,
    workflow_dir: Path,
    *,
    use_driver: bool = False,
    plot: bool = True,
) -> tuple[Path, dict[str, Any]]:
    """Run one session to completion and record it in a new run directory.

    Args:
        config: Validated run configuration.
        workflow_dir: Parent directory; the run goes to ``exp_XXXX`` inside it.
        use_driver: Step through a PollingDriver at ``config.interval``
            instead of a synchronous loop.
        plot: Also write artifacts/history.png.

    Returns:
        The run directory and the session summary.
    """
    session = AlignmentSession(config)

    if use_driver:
        driver = PollingDriver(session)
        driver.start()
        for _ in driver.iter_results():
            pass
        driver.join()
    else:
        session.run()

    summary = session.summary()
    exp_dir = next_experiment_dir(workflow_dir)
    config_dict = config.to_dict()

    meta = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "git_commit": try_get_git_commit(),
        "argv": list(sys.argv),
        "summary": summary,
    }
    write_run_files(exp_dir, meta=meta, config=config_dict, readme_text=render_readme(summary, config_dict))
    write_history(exp_dir, session.history)
    if plot:
        plot_history(
            session.history,
            exp_dir / "artifacts" / "history.png",
            target=config.target,
            title=f"Alignment run ({summary['step']} steps)",
        )

    logger.info("Run written to %s", exp_dir)
    return exp_dir, summary
