# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from asset_minimizer.config import Settings


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Deterministic Settings for unit tests.

    Built directly rather than via Settings.from_env(), so a developer's .env or
    shell environment cannot leak into test runs.
    """
    return Settings(
        app_name="asset-minimizer-test",
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        parallelism=2,
        cancel_on_error=False,
    )


@pytest.fixture()
def restore_root_logging():
    """Put root handlers back after tests that call setup_logging()."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    for h in saved_handlers:
        root.addHandler(h)
    root.setLevel(saved_level)
    logging.captureWarnings(False)
