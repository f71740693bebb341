# src/asset_minimizer/minify/html.py

from __future__ import annotations

"""
HTML minimizer backed by the `minify-html` library.

Defaults stick to transformations that are safe for arbitrary markup:
- CSS and JS inside the document are minified,
- comments are dropped,
- closing tags and <html>/<head> opening tags are kept (XHTML and templating friendly).

Attribute-quote removal, empty-attribute removal and doctype shortening are left off:
they can break CSS attribute selectors, scripts or XHTML.
"""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from ..core.ports import MinimizerInput

logger = logging.getLogger(__name__)

DEFAULT_HTML_OPTIONS: dict[str, Any] = {
    "minify_css": True,
    "minify_js": True,
    "keep_comments": False,
    "keep_closing_tags": True,
    "keep_html_and_head_opening_tags": True,
}


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return base updated with override; nested mappings merge, override wins per key."""
    merged: dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


async def minify_html(
        input: MinimizerInput,
        options: Mapping[str, Any] | None = None,
) -> dict[str, str]:
    import minify_html as _minify_html

    if len(input) != 1:
        raise ValueError(f"minify_html expects exactly one asset, got {len(input)}")
    [(name, code)] = input.items()

    effective = deep_merge(DEFAULT_HTML_OPTIONS, options)
    logger.debug("minify_html %s with %s", name, sorted(effective))

    # Native call; keep it off the event loop so throttled minifications overlap.
    result = await asyncio.to_thread(_minify_html.minify, code, **effective)
    return {"code": result}
