"""Run directory management for alignment experiments.

This module provides utilities for creating run directories with
consistent naming and for writing a run's metadata and history.
"""

from __future__ import annotations

import csv
import json
import re
import subprocess
from pathlib import Path
from typing import Any

from core.types import History

__all__ = [
    "next_experiment_dir",
    "write_run_files",
    "write_history",
    "render_readme",
    "try_get_git_commit",
]


def next_experiment_dir(workflow_dir: Path) -> Path:
    """Create the next experiment directory with zero-padded naming.

    Creates directories:
    - workflow_dir/exp_XXXX/
    - workflow_dir/exp_XXXX/artifacts/

    Policy: next index after the maximum existing index.

    Args:
        workflow_dir: Parent directory for all runs.

    Returns:
        Path to the newly created experiment directory.

    Example:
        >>> exp_dir = next_experiment_dir(Path("workflow"))
        >>> exp_dir
        PosixPath('workflow/exp_0000')
    """
    workflow_dir.mkdir(parents=True, exist_ok=True)

    pattern = re.compile(r"^exp_(\d{4})$")
    max_index = -1

    for entry in workflow_dir.iterdir():
        if entry.is_dir():
            match = pattern.match(entry.name)
            if match:
                max_index = max(max_index, int(match.group(1)))

    exp_dir = workflow_dir / f"exp_{max_index + 1:04d}"
    exp_dir.mkdir(parents=True, exist_ok=True)
    (exp_dir / "artifacts").mkdir(exist_ok=True)

    return exp_dir


def write_run_files(
    exp_dir: Path,
    *,
    meta: dict[str, Any],
    config: dict[str, Any],
    readme_text: str,
) -> None:
    """Write meta.json, config.json and README.md into exp_dir."""
    with (exp_dir / "meta.json").open("w", encoding="utf-8") as f:
        json.dump(meta, f, indent=2, sort_keys=True)

    with (exp_dir / "config.json").open("w", encoding="utf-8") as f:
        json.dump(config, f, indent=2, sort_keys=True)

    with (exp_dir / "README.md").open("w", encoding="utf-8") as f:
        f.write(readme_text)


def write_history(exp_dir: Path, history: History) -> tuple[Path, Path]:
    """Write the history as artifacts/history.json and artifacts/history.csv.

    Returns:
        Paths of the JSON and CSV files.
    """
    artifacts = exp_dir / "artifacts"
    artifacts.mkdir(parents=True, exist_ok=True)
    records = history.to_records()

    json_path = artifacts / "history.json"
    with json_path.open("w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)

    csv_path = artifacts / "history.csv"
    with csv_path.open("w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=["step", "loss", "observable"])
        writer.writeheader()
        writer.writerows(records)

    return json_path, csv_path


def render_readme(summary: dict[str, Any], config: dict[str, Any]) -> str:
    """Render a short human-readable report of a finished run."""
    theta = ", ".join(f"{v:.6f}" for v in summary.get("theta", []))
    loss = summary.get("loss")
    convergence = summary.get("convergence")
    lines = [
        "# Alignment run",
        "",
        f"- Steps taken: {summary.get('step')}",
        f"- Stopped by: {summary.get('stop_reason') or 'not finished'}",
        f"- Final loss: {'n/a' if loss is None else f'{loss:.6e}'}",
        f"- Target: {summary.get('target')}",
        f"- Convergence: {'n/a' if convergence is None else f'{convergence:.2f}%'}",
        f"- Stabilized: {summary.get('stabilized')}",
        f"- Parameters (theta): {theta}",
        "",
        "## Config",
        "",
        "```json",
        json.dumps(config, indent=2, sort_keys=True),
        "```",
        "",
    ]
    return "\n".join(lines)


def try_get_git_commit() -> str | None:
    """Attempt to get the current git commit hash.

    Returns:
        The git commit hash, or None if git is unavailable
        or not in a git repository.
    """
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            capture_output=True,
            text=True,
            timeout=5,
            check=False,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        pass
    return None
