# src/asset_minimizer/minify/models.py

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..core.ports import Minimizer


@dataclass(slots=True, frozen=True)
class MinimizerSpec:
    """One pipeline step: an implementation plus the options it is called with."""

    implementation: Minimizer
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, frozen=True)
class MinifyRequest:
    name: str
    input: str
    minimizer: MinimizerSpec | Sequence[MinimizerSpec]

    def steps(self) -> list[MinimizerSpec]:
        if isinstance(self.minimizer, MinimizerSpec):
            return [self.minimizer]
        return list(self.minimizer)


@dataclass(slots=True)
class MinifyResult:
    code: str
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class AssetResult:
    """Pipeline result for one named asset."""

    name: str
    code: str
    warnings: tuple[str, ...] = ()
    errors: tuple[str, ...] = ()
