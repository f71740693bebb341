# tests/test_assets.py

from __future__ import annotations

import asyncio
from dataclasses import replace

import pytest

from asset_minimizer.config import Settings
from asset_minimizer.core.errors import InvalidArgumentError
from asset_minimizer.minify import assets as assets_mod
from asset_minimizer.minify.assets import minify_assets
from asset_minimizer.minify.models import AssetResult, MinimizerSpec

from .fakes import FakeMinimizer


class SlowMinimizer:
    """Async minimizer with per-asset delay; tracks how many run at once."""

    def __init__(self, delays: dict[str, float], fail: set[str] | None = None) -> None:
        self.delays = delays
        self.fail = fail or set()
        self.in_flight = 0
        self.max_in_flight = 0
        self.finished: list[str] = []

    async def __call__(self, input, options):
        [(name, code)] = input.items()
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(name, 0.0))
            if name in self.fail:
                raise RuntimeError(f"cannot minify {name}")
            return {"code": code.strip(), "warnings": [f"{name}: ok"]}
        finally:
            self.in_flight -= 1
            self.finished.append(name)


@pytest.mark.asyncio
async def test_minify_assets_keeps_input_order_and_bounds_parallelism() -> None:
    slow = SlowMinimizer({"a.html": 0.03, "b.html": 0.01, "c.html": 0.02, "d.html": 0.0})
    assets = {name: f"  {name}  " for name in ("a.html", "b.html", "c.html", "d.html")}

    results = await minify_assets(assets, MinimizerSpec(slow), parallelism=2)

    assert [r.name for r in results] == ["a.html", "b.html", "c.html", "d.html"]
    assert results[0] == AssetResult(name="a.html", code="a.html", warnings=("a.html: ok",))
    assert slow.max_in_flight == 2
    assert slow.finished[0] == "b.html"


@pytest.mark.asyncio
async def test_minify_assets_accepts_pairs_and_chains() -> None:
    results = await minify_assets(
        [("x.js", "1"), ("y.js", "2")],
        [MinimizerSpec(FakeMinimizer("a")), MinimizerSpec(FakeMinimizer("b", errors=["bad"]))],
        parallelism=4,
    )

    assert results == [
        AssetResult(name="x.js", code="1ab", errors=("bad",)),
        AssetResult(name="y.js", code="2ab", errors=("bad",)),
    ]


@pytest.mark.asyncio
async def test_minify_assets_fails_fast_on_first_failing_asset() -> None:
    slow = SlowMinimizer({"ok.html": 0.05, "bad.html": 0.01}, fail={"bad.html"})

    with pytest.raises(RuntimeError, match="cannot minify bad.html"):
        await minify_assets({"ok.html": "x", "bad.html": "y"}, MinimizerSpec(slow), parallelism=2)

    assert slow.finished == ["bad.html"]

    await asyncio.sleep(0.06)
    assert slow.finished == ["bad.html", "ok.html"]


@pytest.mark.asyncio
async def test_minify_assets_uses_settings_parallelism(
    monkeypatch: pytest.MonkeyPatch, settings: Settings
) -> None:
    monkeypatch.setattr(assets_mod, "get_settings", lambda: replace(settings, parallelism=1))
    slow = SlowMinimizer({"a": 0.005, "b": 0.005, "c": 0.005})

    await minify_assets({"a": "", "b": "", "c": ""}, MinimizerSpec(slow))

    assert slow.max_in_flight == 1


@pytest.mark.asyncio
async def test_minify_assets_rejects_bad_parallelism() -> None:
    with pytest.raises(InvalidArgumentError):
        await minify_assets({"a": ""}, MinimizerSpec(FakeMinimizer("")), parallelism=0)


@pytest.mark.asyncio
async def test_minify_assets_empty_input() -> None:
    fake = FakeMinimizer("")
    assert await minify_assets({}, MinimizerSpec(fake), parallelism=3) == []
    assert fake.calls == []
