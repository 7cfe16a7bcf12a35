from __future__ import annotations

import argparse
import json
from pathlib import Path

from core.errors import InvalidConfiguration
from core.logging import configure_logging
from experiments.config import load_config
from experiments.runner import run_alignment


def main() -> None:
    parser = argparse.ArgumentParser(description="Run finite-difference alignment to a target observable.")
    parser.add_argument("--config", type=Path, default=None, help="JSON config file (defaults if omitted)")
    parser.add_argument("--set", dest="overrides", action="append", default=[], help="Override key=value")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--workflow-dir", type=Path, default=Path("workflow/alignment"))
    parser.add_argument("--interval", type=float, default=None, help="Step through the polling driver")
    parser.add_argument("--no-plot", action="store_true")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    configure_logging(args.log_level)

    overrides = list(args.overrides)
    if args.seed is not None:
        overrides.append(f"seed={args.seed}")
    if args.interval is not None:
        overrides.append(f"interval={args.interval}")

    try:
        config = load_config(args.config, overrides)
    except InvalidConfiguration as exc:
        parser.error(str(exc))

    exp_dir, summary = run_alignment(
        config,
        args.workflow_dir,
        use_driver=args.interval is not None,
        plot=not args.no_plot,
    )
    print(json.dumps({"exp_dir": str(exp_dir), **summary}, indent=2))


if __name__ == "__main__":
    main()
