"""Config loading, overrides and validation for alignment runs."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from core.errors import InvalidConfiguration
from core.types import AlignmentConfig

__all__ = [
    "DEFAULT_CONFIG",
    "load_json",
    "apply_overrides",
    "config_from_dict",
    "load_config",
]

DEFAULT_CONFIG: dict[str, Any] = AlignmentConfig().to_dict()

# Keys accepted from configs exported by the browser front end
_ALIASES = {
    "numQubits": "dimensionality",
    "num_qubits": "dimensionality",
    "learningRate": "learning_rate",
    "targetConsciousness": "target",
    "maxSteps": "max_steps",
    "lossTolerance": "loss_tolerance",
}


def load_json(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def _parse_value(raw: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def apply_overrides(config: dict[str, Any], overrides: Iterable[str]) -> dict[str, Any]:
    """Return a copy of config with dotted ``key=value`` overrides applied."""
    result = json.loads(json.dumps(config))
    for item in overrides:
        if "=" not in item:
            raise ValueError(f"Override must be key=value, got: {item}")
        path, raw_val = item.split("=", 1)
        keys = path.split(".")
        target = result
        for key in keys[:-1]:
            if key not in target or not isinstance(target[key], dict):
                target[key] = {}
            target = target[key]
        target[keys[-1]] = _parse_value(raw_val)
    return result


def _as_int(name: str, value: Any) -> int:
    if (
        isinstance(value, bool)
        or not isinstance(value, (int, float))
        or not math.isfinite(value)
        or float(value) != int(value)
    ):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    return int(value)


def _as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidConfiguration(f"{name} must be a finite number, got {value!r}")
    return float(value)


def config_from_dict(data: Mapping[str, Any]) -> AlignmentConfig:
    """Validate a mapping and build an AlignmentConfig.

    Missing keys take their defaults. camelCase keys from the front end
    (``numQubits``, ``learningRate``, ``targetConsciousness``, ``maxSteps``)
    are accepted as aliases.

    Raises:
        InvalidConfiguration: On unknown keys or out-of-range values.
    """
    merged = dict(DEFAULT_CONFIG)
    for key, value in data.items():
        name = _ALIASES.get(key, key)
        if name not in DEFAULT_CONFIG:
            raise InvalidConfiguration(f"Unknown config key: {key}")
        merged[name] = value

    dimensionality = _as_int("dimensionality", merged["dimensionality"])
    learning_rate = _as_float("learning_rate", merged["learning_rate"])
    max_steps = _as_int("max_steps", merged["max_steps"])
    loss_tolerance = _as_float("loss_tolerance", merged["loss_tolerance"])
    interval = _as_float("interval", merged["interval"])
    seed = None if merged["seed"] is None else _as_int("seed", merged["seed"])

    if dimensionality < 1:
        raise InvalidConfiguration(f"dimensionality must be >= 1, got {dimensionality}")
    if learning_rate <= 0:
        raise InvalidConfiguration(f"Learning rate must be positive, got {learning_rate}")
    if max_steps < 1:
        raise InvalidConfiguration(f"max_steps must be >= 1, got {max_steps}")
    if loss_tolerance < 0:
        raise InvalidConfiguration(f"loss_tolerance must be >= 0, got {loss_tolerance}")
    if interval < 0:
        raise InvalidConfiguration(f"interval must be >= 0, got {interval}")

    return AlignmentConfig(
        dimensionality=dimensionality,
        learning_rate=learning_rate,
        target=_as_float("target", merged["target"]),
        max_steps=max_steps,
        loss_tolerance=loss_tolerance,
        seed=seed,
        interval=interval,
    )


def load_config(path: Path | None = None, overrides: Iterable[str] = ()) -> AlignmentConfig:
    """Load a JSON config (or the defaults), apply overrides and validate."""
    raw = load_json(path) if path is not None else dict(DEFAULT_CONFIG)
    return config_from_dict(apply_overrides(raw, overrides))
