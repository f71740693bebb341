# src/asset_minimizer/minify/pipeline.py

from __future__ import annotations

"""
Minimizer pipeline.

Applies one or more minimizers to a single code string, in order:
- step i receives {name: code} where code is step i-1's output,
- warnings/errors accumulate across steps in order,
- a step returning a bare value (not a {"code": ...} mapping) replaces the code as-is.

transform() is the worker-side entry: it takes a JSON payload whose minimizers are
given as "package.module:attribute" import paths.
"""

import importlib
import inspect
import json
import logging
from collections.abc import Mapping
from typing import Any

from ..core.errors import MinimizerError
from .models import MinifyRequest, MinifyResult, MinimizerSpec

logger = logging.getLogger(__name__)


def _as_messages(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _merge_step_result(result: MinifyResult, step_result: Any) -> None:
    if isinstance(step_result, MinifyResult):
        result.code = step_result.code
        result.warnings.extend(step_result.warnings)
        result.errors.extend(step_result.errors)
        return

    if isinstance(step_result, Mapping) and "code" in step_result:
        result.code = step_result["code"]
        result.warnings.extend(_as_messages(step_result.get("warnings")))
        result.errors.extend(_as_messages(step_result.get("errors")))
        return

    result.code = step_result


async def apply_minimizer(spec: MinimizerSpec, code: str, name: str) -> Any:
    """Call one implementation; sync and async implementations are both accepted."""
    out = spec.implementation({name: code}, spec.options)
    if inspect.isawaitable(out):
        out = await out
    return out


async def minify(request: MinifyRequest) -> MinifyResult:
    result = MinifyResult(code=request.input)

    for i, spec in enumerate(request.steps()):
        step_result = await apply_minimizer(spec, result.code, request.name)
        _merge_step_result(result, step_result)
        logger.debug("minify %s: step %d done (%d chars)", request.name, i, len(str(result.code)))

    return result


def resolve_implementation(path: str) -> Any:
    """Resolve "package.module:attribute" (or "package.module.attribute") to an object."""
    module_name, sep, attr = path.partition(":")
    if not sep:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise MinimizerError(f"Invalid minimizer implementation path: {path!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise MinimizerError(f"Cannot import minimizer module {module_name!r}") from exc

    obj: Any = module
    for part in attr.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as exc:
            raise MinimizerError(f"Minimizer {path!r} not found") from exc

    if not callable(obj):
        raise MinimizerError(f"Minimizer {path!r} is not callable")
    return obj


def _spec_from_payload(raw: Any) -> MinimizerSpec:
    if not isinstance(raw, dict) or not isinstance(raw.get("implementation"), str):
        raise MinimizerError("Each minimizer must be an object with an 'implementation' import path")
    options = raw.get("options")
    if options is None:
        options = {}
    if not isinstance(options, dict):
        raise MinimizerError("Minimizer 'options' must be an object")
    return MinimizerSpec(
        implementation=resolve_implementation(raw["implementation"]),
        options=options,
    )


def parse_request(payload: str) -> MinifyRequest:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise MinimizerError(f"Malformed minify payload: {exc}") from exc

    if not isinstance(data, dict):
        raise MinimizerError("Minify payload must be a JSON object")

    name = data.get("name")
    code = data.get("input")
    if not isinstance(name, str) or not isinstance(code, str):
        raise MinimizerError("Minify payload requires string 'name' and 'input'")

    raw_minimizer = data.get("minimizer")
    if isinstance(raw_minimizer, list):
        steps: MinimizerSpec | list[MinimizerSpec] = [_spec_from_payload(m) for m in raw_minimizer]
    else:
        steps = _spec_from_payload(raw_minimizer)

    return MinifyRequest(name=name, input=code, minimizer=steps)


async def transform(payload: str) -> MinifyResult:
    return await minify(parse_request(payload))
