# src/asset_minimizer/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The scheduler and the pipeline depend on these Protocols, not on concrete callables.
"""

from collections.abc import Mapping
from typing import Any, Awaitable, Protocol, TypeVar

T_co = TypeVar("T_co", covariant=True)

MinimizerInput = Mapping[str, str]
# Single-entry mapping: {asset_name: code}.

MinimizerOptions = Mapping[str, Any]


class Task(Protocol[T_co]):
    """Zero-argument deferred unit of work; invoked at most once by the scheduler."""
    def __call__(self) -> Awaitable[T_co]: ...


class Minimizer(Protocol):
    """
    Minimizer implementation.

    May be sync or async. The return value is either:
    - a plain code string, or
    - a mapping with "code" and optional "warnings"/"errors" lists.
    """

    def __call__(self, input: MinimizerInput, options: MinimizerOptions, /) -> Any: ...
