"""
Repository-level pytest configuration.

Why this exists:
  - Keep unit runs independent of the developer's shell: framework settings
    can be overridden by environment variables (``IMPLICIT_WAIT``, ``BROWSER``...)
  - Expose the repo root to tests that need real project files
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from uiauto_tools.common.global_config import CONFIG_PATH_ENV, DEFAULTS


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(autouse=True)
def _isolated_config_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """
    Remove framework override variables for the duration of each test.

    Tests that exercise env overrides set them explicitly with monkeypatch.
    """
    monkeypatch.delenv(CONFIG_PATH_ENV, raising=False)
    for key in DEFAULTS:
        monkeypatch.delenv(key.upper().replace(".", "_"), raising=False)

    yield
