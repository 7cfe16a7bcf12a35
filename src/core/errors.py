"""Exception types for the alignment optimizer."""

from __future__ import annotations

__all__ = ["InvalidConfiguration"]


class InvalidConfiguration(ValueError):
    """Raised when an optimizer or run configuration violates its constraints.

    The engine refuses to construct rather than continuing with degenerate
    state, so this is only ever raised at construction or config-parsing time.
    """
