# src/asset_minimizer/worker.py

"""
Out-of-process minify worker.

Runs one transform() request per process, for callers that farm minification out to
subprocesses:
- stdin: the JSON request ({"name", "input", "minimizer": ...}),
- stdout: {"code", "warnings", "errors"} on success, {"error": "..."} on failure,
- exit code 0 / 1,
- logs go to stderr and <log_dir>/<app_name>.log, never to stdout.

Usage: python -m asset_minimizer.worker < request.json
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from dataclasses import asdict
from typing import TextIO

from .config import get_settings
from .core.errors import MinimizerError
from .logging_setup import setup_logging_from_settings
from .minify.pipeline import transform

logger = logging.getLogger(__name__)


def main(stdin: TextIO | None = None, stdout: TextIO | None = None) -> int:
    stdin = sys.stdin if stdin is None else stdin
    stdout = sys.stdout if stdout is None else stdout

    settings = get_settings()
    setup_logging_from_settings(settings)
    logger.info("Starting %s worker...", settings.app_name)

    payload = stdin.read()
    try:
        result = asyncio.run(transform(payload))
    except MinimizerError as exc:
        logger.error("Rejected minify request: %s", exc)
        stdout.write(json.dumps({"error": str(exc)}))
        return 1
    except Exception as exc:
        logger.exception("Minify request failed")
        stdout.write(json.dumps({"error": f"{type(exc).__name__}: {exc}"}))
        return 1

    stdout.write(json.dumps(asdict(result), ensure_ascii=False))
    logger.info("%s worker done (%d chars)", settings.app_name, len(str(result.code)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
