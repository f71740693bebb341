# src/asset_minimizer/core/errors.py

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """Raised before any work starts when scheduler arguments are malformed."""


class MinimizerError(RuntimeError):
    """A minimizer pipeline could not be built (bad payload, unresolvable implementation)."""
