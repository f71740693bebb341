# src/asset_minimizer/minify/assets.py

from __future__ import annotations

"""
Asset fan-out: run the minimizer pipeline over many assets through the bounded scheduler.

Results come back in input order. The first failing asset fails the whole call; other
assets already being minified are left to finish in the background (see throttle_all).
"""

import logging
import time
from collections.abc import Iterable, Mapping, Sequence

from ..config import get_settings
from ..tasks.throttle import throttle_all
from .models import AssetResult, MinifyRequest, MinimizerSpec
from .pipeline import minify

logger = logging.getLogger(__name__)


def _as_pairs(assets: Mapping[str, str] | Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    if isinstance(assets, Mapping):
        return list(assets.items())
    return [(str(name), code) for name, code in assets]


async def minify_assets(
        assets: Mapping[str, str] | Iterable[tuple[str, str]],
        minimizer: MinimizerSpec | Sequence[MinimizerSpec],
        *,
        parallelism: int | None = None,
        cancel_on_error: bool | None = None,
) -> list[AssetResult]:
    """
    Minify every (name, code) asset with the given minimizer chain.

    parallelism / cancel_on_error default to the process settings.
    """
    settings = get_settings()
    limit = settings.parallelism if parallelism is None else parallelism
    cancel = settings.cancel_on_error if cancel_on_error is None else cancel_on_error

    pairs = _as_pairs(assets)

    def make_task(name: str, code: str):
        async def run() -> AssetResult:
            res = await minify(MinifyRequest(name=name, input=code, minimizer=minimizer))
            return AssetResult(
                name=name,
                code=res.code,
                warnings=tuple(res.warnings),
                errors=tuple(res.errors),
            )

        return run

    started = time.monotonic()
    results = await throttle_all(
        limit,
        [make_task(name, code) for name, code in pairs],
        cancel_on_error=cancel,
    )
    logger.info(
        "Minified %d assets (parallelism=%d) in %.3fs",
        len(results),
        limit,
        time.monotonic() - started,
    )
    return results
